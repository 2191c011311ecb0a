"""Qdrant-backed record store.

Every write is issued with ``wait=True`` so that a returned call means the
change is applied and visible to the next read. ``update_point`` relies on
that for its read-modify-write.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import uuid_utils
from qdrant_client import AsyncQdrantClient
from qdrant_client.http import exceptions as qdrant_exceptions
from qdrant_client.http import models

from report_card_data.config import Settings
from report_card_data.records.base import Embedder, PayloadFilter, RecordNotFoundError
from report_card_data.records.filters import build_filter, build_order_by

logger = logging.getLogger(__name__)

DEFAULT_SCROLL_LIMIT = 144
DEFAULT_SEARCH_LIMIT = 54
UNKNOWN_USERNAME = "Unknown User"

PayloadSelector = bool | list[str] | str | None


def generate_id() -> str:
    """Return a new time-ordered UUIDv7 string."""
    return str(uuid_utils.uuid7())


def _with_payload(payload: PayloadSelector) -> bool | list[str]:
    if payload is None:
        return True
    if isinstance(payload, str):
        return [payload]
    return payload


def _with_id(point: models.Record | models.ScoredPoint) -> dict[str, Any]:
    return {**(point.payload or {}), "i": str(point.id)}


class RecordStore:
    """CRUD and search helpers over a single Qdrant collection.

    Example:
        async with RecordStore(Settings(), embedder=embedder) as store:
            point_id = await store.create({"s": "u", "u": "ada"}, "Ada Lovelace")
            user = await store.get(point_id)
    """

    def __init__(
        self,
        settings: Settings,
        embedder: Embedder | None = None,
        client: AsyncQdrantClient | None = None,
    ) -> None:
        """Initialize the record store.

        Args:
            settings: Application settings with Qdrant connection info.
            embedder: Embedding collaborator used by ``create`` when text is
                supplied.
            client: Optional pre-built Qdrant client.
        """
        self._client = client or AsyncQdrantClient(
            url=settings.qdrant_url,
            api_key=settings.qdrant_api_key,
        )
        self._collection_name = settings.qdrant_collection
        self._vector_size = settings.vector_size
        self._embedder = embedder

    async def __aenter__(self) -> RecordStore:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.close()

    @property
    def collection_name(self) -> str:
        return self._collection_name

    def zero_vector(self) -> list[float]:
        """Placeholder vector for points that have no meaningful embedding."""
        return [0.0] * self._vector_size

    async def ensure_collection(self) -> None:
        """Create the collection with cosine distance if it does not exist."""
        try:
            await self._client.get_collection(self._collection_name)
            return
        except qdrant_exceptions.UnexpectedResponse as exc:
            if exc.status_code != 404:
                raise

        logger.info(
            "Creating collection %s (size=%d)",
            self._collection_name,
            self._vector_size,
        )
        await self._client.create_collection(
            collection_name=self._collection_name,
            vectors_config=models.VectorParams(
                size=self._vector_size,
                distance=models.Distance.COSINE,
            ),
        )

    async def create(
        self,
        payload: dict[str, Any],
        text_to_embed: str | None = None,
        id: str | None = None,
    ) -> str:
        """Store a new point and return its id.

        Args:
            payload: Payload to store.
            text_to_embed: Optional text whose embedding becomes the vector.
                Without it the point gets a zero vector.
            id: Optional id to use instead of a generated one.

        Returns:
            The id of the stored point.
        """
        point_id = id or generate_id()

        if text_to_embed:
            if self._embedder is None:
                raise ValueError("An embedder is required to embed text.")
            vector = await self._embedder.embed(text_to_embed)
        else:
            vector = self.zero_vector()
        self._validate_vector(vector)

        await self._client.upsert(
            collection_name=self._collection_name,
            points=[models.PointStruct(id=point_id, payload=payload, vector=vector)],
            wait=True,
        )
        return point_id

    async def edit_point(self, id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Replace a point's payload entirely, resetting its vector to zeros.

        Returns:
            The written payload with the point id under ``i``.
        """
        await self._client.upsert(
            collection_name=self._collection_name,
            points=[
                models.PointStruct(id=id, payload=dict(data), vector=self.zero_vector())
            ],
            wait=True,
        )
        return {**data, "i": id}

    async def update_point(self, id: str, data: dict[str, Any]) -> None:
        """Merge ``data`` over the stored payload and rewrite the point.

        The read and the write are separate calls; a concurrent writer to the
        same id between them is overwritten (last write wins).

        Raises:
            RecordNotFoundError: If no point has this id.
        """
        existing = await self.get(id)
        if existing is None:
            raise RecordNotFoundError(id)

        await self.edit_point(id, {**existing, **data})

    async def set_payload(self, id: str, payload: dict[str, Any]) -> None:
        """Overwrite the given payload keys, keeping the vector and other keys."""
        await self._client.set_payload(
            collection_name=self._collection_name,
            payload=payload,
            points=[id],
            wait=True,
        )

    async def get(
        self,
        id: str,
        payload: PayloadSelector = None,
        with_vector: bool = False,
    ) -> Any:
        """Retrieve one point by id.

        Args:
            id: Point id.
            payload: ``None``/``True`` for all fields, ``False`` for none, a
                list of field names, or a single field name whose value is
                returned directly.
            with_vector: Attach the stored vector under ``vector``.

        Returns:
            The payload dict, a single field value, or None when the point
            is missing or retrieval fails.
        """
        try:
            result = await self._client.retrieve(
                collection_name=self._collection_name,
                ids=[id],
                with_payload=_with_payload(payload),
                with_vectors=with_vector,
            )
        except Exception as exc:
            logger.debug("Retrieve of %s failed, treating as missing: %s", id, exc)
            return None

        if not result:
            return None

        record = result[0]
        res = dict(record.payload or {})
        if with_vector:
            res["vector"] = record.vector
        elif isinstance(payload, str):
            return res.get(payload)
        return res

    async def exists(self, id: str) -> bool:
        return await self.get(id, []) is not None

    async def delete_by_id(self, id: str) -> None:
        await self._client.delete(
            collection_name=self._collection_name,
            points_selector=models.PointIdsList(points=[id]),
            wait=True,
        )

    async def search_by_payload(
        self,
        filters: PayloadFilter,
        payload: PayloadSelector = None,
        limit: int | None = None,
        order_by: str | dict[str, Any] | models.OrderBy | None = None,
    ) -> list[dict[str, Any]]:
        """Scan for points whose payload matches every non-blank filter field.

        Args:
            filters: Field/value pairs to match exactly.
            payload: Payload selection, as for ``get``.
            limit: Maximum number of points (default 144).
            order_by: Optional payload field or ``{"key", "direction"}``
                mapping to order by on the server.

        Returns:
            Payload dicts with the point id under ``i``.
        """
        actual_limit = limit or DEFAULT_SCROLL_LIMIT
        kwargs: dict[str, Any] = {
            "collection_name": self._collection_name,
            "scroll_filter": build_filter(filters),
            "limit": actual_limit,
            "with_payload": _with_payload(payload),
            "with_vectors": False,
        }
        ordering = build_order_by(order_by)
        if ordering is not None:
            kwargs["order_by"] = ordering

        try:
            points, _ = await self._client.scroll(**kwargs)
        except Exception:
            logger.error(
                "search_by_payload failed (filter=%r, payload=%r, limit=%r, order_by=%r)",
                filters,
                payload,
                limit,
                order_by,
                exc_info=True,
            )
            raise

        return [_with_id(point) for point in points]

    async def search_by_vector(
        self,
        vector: list[float],
        limit: int = DEFAULT_SEARCH_LIMIT,
        payload: PayloadSelector = None,
        filters: PayloadFilter | None = None,
    ) -> list[dict[str, Any]]:
        """Nearest-neighbour search, optionally narrowed by a payload filter.

        Returns:
            Payload dicts with the point id under ``i``, closest first.
        """
        kwargs: dict[str, Any] = {
            "collection_name": self._collection_name,
            "query": vector,
            "limit": limit,
            "with_payload": _with_payload(payload),
            "with_vectors": False,
        }
        if filters is not None:
            kwargs["query_filter"] = build_filter(filters)

        try:
            response = await self._client.query_points(**kwargs)
        except Exception:
            logger.error(
                "search_by_vector failed (vector length=%d, filter=%r)",
                len(vector),
                filters,
                exc_info=True,
            )
            raise

        return [_with_id(point) for point in response.points]

    async def get_first(self, filters: PayloadFilter) -> dict[str, Any] | None:
        results = await self.search_by_payload(filters, None, 1)
        if results:
            return results[0]
        return None

    async def get_username_from_label(self, id: str) -> str:
        """Return the ``u`` field of a user point, or a placeholder name."""
        user = await self.get(id)
        if user and user.get("u"):
            return user["u"]
        return UNKNOWN_USERNAME

    async def find_by_tag(self, tag: str) -> dict[str, Any] | None:
        """Find the user point carrying tag ``t``."""
        results = await self.search_by_payload({"s": "u", "t": tag})
        return results[0] if results else None

    def _validate_vector(self, vector: list[float]) -> None:
        if len(vector) != self._vector_size:
            raise ValueError(
                "Embedding size does not match collection vector size: "
                f"{len(vector)} != {self._vector_size}"
            )
