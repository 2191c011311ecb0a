"""Payload filter construction for Qdrant queries."""

from typing import Any

from qdrant_client.http import models

from report_card_data.records.base import PayloadFilter


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def build_filter(filters: PayloadFilter) -> models.Filter:
    """Build an exact-match Qdrant filter from a field/value mapping.

    Fields whose value is None or an empty string are dropped, so a partially
    filled mapping narrows the query less instead of failing.

    Args:
        filters: Mapping of payload field name to required value.

    Returns:
        A Filter whose ``must`` clause holds one match condition per field.
    """
    return models.Filter(
        must=[
            models.FieldCondition(key=key, match=models.MatchValue(value=value))
            for key, value in filters.items()
            if not _is_blank(value)
        ]
    )


def build_order_by(
    order_by: str | dict[str, Any] | models.OrderBy | None,
) -> str | models.OrderBy | None:
    """Normalize an ordering spec to what ``scroll`` accepts."""
    if isinstance(order_by, models.OrderBy):
        return order_by
    if not order_by:
        return None
    if isinstance(order_by, str):
        return order_by
    return models.OrderBy.model_validate(order_by)
