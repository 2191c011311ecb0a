import asyncio
import logging
from typing import Any

from openai import APIConnectionError, AsyncOpenAI, RateLimitError

from report_card_data.records.base import Embedder

logger = logging.getLogger(__name__)


class OpenAIEmbedder(Embedder):
    """OpenAI embeddings client producing fixed-size vectors."""

    DEFAULT_MODEL = "text-embedding-3-large"
    MAX_RETRIES = 5
    BASE_DELAY = 1.0  # Base delay in seconds for exponential backoff

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        dimensions: int = 3072,
    ) -> None:
        """Initialize the embedder.

        Args:
            api_key: OpenAI API key.
            model: Embedding model (default: text-embedding-3-large).
            dimensions: Expected length of every returned vector.
        """
        self._client = AsyncOpenAI(api_key=api_key)
        self._model = model or self.DEFAULT_MODEL
        self._dimensions = dimensions

    async def embed(self, text: str) -> list[float]:
        """Generate embedding vector for text.

        Args:
            text: Text to generate embedding for.

        Returns:
            List of floats with exactly ``dimensions`` entries.

        Raises:
            EmbeddingError: If the request fails after retries or the vector
                has the wrong size.
        """
        response = await self._request_with_retry(
            self._client.embeddings.create,
            model=self._model,
            input=text,
            dimensions=self._dimensions,
        )
        embedding = list(response.data[0].embedding)
        if len(embedding) != self._dimensions:
            raise EmbeddingError(
                "Embedding size does not match expected dimensions: "
                f"{len(embedding)} != {self._dimensions}"
            )
        return embedding

    async def aclose(self) -> None:
        await self._client.close()

    async def _request_with_retry(self, func: Any, **kwargs: Any) -> Any:
        """Execute an API request with exponential backoff retry.

        Raises:
            EmbeddingError: If all retries are exhausted.
        """
        last_error: Exception | None = None

        for attempt in range(self.MAX_RETRIES):
            try:
                return await func(**kwargs)
            except RateLimitError as e:
                last_error = e
                delay = self.BASE_DELAY * (2**attempt)
                logger.warning(
                    "Rate limited (attempt %d/%d), retrying in %.1f seconds",
                    attempt + 1,
                    self.MAX_RETRIES,
                    delay,
                )
                await asyncio.sleep(delay)
            except APIConnectionError as e:
                last_error = e
                delay = self.BASE_DELAY * (2**attempt)
                logger.warning(
                    "Connection error (attempt %d/%d), retrying in %.1f seconds: %s",
                    attempt + 1,
                    self.MAX_RETRIES,
                    delay,
                    str(e),
                )
                await asyncio.sleep(delay)

        raise EmbeddingError(
            f"Embedding request failed after {self.MAX_RETRIES} retries"
        ) from last_error


class EmbeddingError(Exception):
    """Exception raised when an embedding cannot be produced."""

    pass
