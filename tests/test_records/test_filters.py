from qdrant_client.http import models

from report_card_data.records.filters import build_filter, build_order_by


def _pairs(flt: models.Filter) -> list[tuple[str, object]]:
    return [(condition.key, condition.match.value) for condition in flt.must or []]


def test_build_filter_exact_matches() -> None:
    """Every field becomes an exact-match condition, in order."""
    flt = build_filter({"s": "u", "t": "ada#1", "n": 3, "active": True})

    assert _pairs(flt) == [("s", "u"), ("t", "ada#1"), ("n", 3), ("active", True)]
    assert all(isinstance(c.match, models.MatchValue) for c in flt.must or [])


def test_build_filter_drops_blank_values() -> None:
    """None and empty-string values are omitted; other falsy values stay."""
    flt = build_filter({"s": "u", "t": None, "name": "", "count": 0, "flag": False})

    assert _pairs(flt) == [("s", "u"), ("count", 0), ("flag", False)]


def test_build_filter_all_blank_matches_everything() -> None:
    """A filter with only blank fields has no conditions."""
    assert build_filter({"s": None, "t": ""}).must == []


def test_build_order_by_passes_field_names() -> None:
    assert build_order_by("created") == "created"
    assert build_order_by(None) is None
    assert build_order_by("") is None


def test_build_order_by_validates_mappings() -> None:
    order = build_order_by({"key": "created", "direction": "desc"})

    assert order == models.OrderBy(key="created", direction=models.Direction.DESC)
