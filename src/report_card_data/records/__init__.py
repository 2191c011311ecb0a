"""Record store over the application's Qdrant collection."""

from report_card_data.records.base import (
    Embedder,
    PayloadFilter,
    RecordNotFoundError,
    RecordStoreError,
)
from report_card_data.records.embeddings import EmbeddingError, OpenAIEmbedder
from report_card_data.records.filters import build_filter
from report_card_data.records.qdrant_store import RecordStore, generate_id

__all__ = [
    "Embedder",
    "EmbeddingError",
    "OpenAIEmbedder",
    "PayloadFilter",
    "RecordNotFoundError",
    "RecordStore",
    "RecordStoreError",
    "build_filter",
    "generate_id",
]
