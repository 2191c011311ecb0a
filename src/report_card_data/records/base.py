"""Record store interfaces and error types."""

from abc import ABC, abstractmethod
from typing import Any

PayloadFilter = dict[str, Any]


class Embedder(ABC):
    """Abstract interface for turning text into an embedding vector."""

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        """Generate embedding vector for text."""
        ...


class RecordStoreError(Exception):
    """Base exception for record store failures."""

    pass


class RecordNotFoundError(RecordStoreError):
    """Raised when an operation requires a point that does not exist."""

    def __init__(self, point_id: str) -> None:
        super().__init__(f"Document not found: {point_id}")
        self.point_id = point_id
