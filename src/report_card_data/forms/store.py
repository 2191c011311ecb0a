"""Observable collection of student reports persisted to key-value storage."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterator
from typing import Any

from report_card_data.forms.defaults import (
    DEPRECATED_FIELDS,
    new_affective_skills,
    new_cognitive_subjects,
    new_psychomotor_skills,
    new_student_report,
)
from report_card_data.forms.storage import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "studentReports"

Report = dict[str, Any]
Subscriber = Callable[[list[Report]], None]
Unsubscribe = Callable[[], None]


def _merge_subjects(stored: Any) -> list[dict[str, Any]]:
    """Realign stored subjects position by position against the canonical list.

    The result always has the canonical length and order. Stored values win
    over defaults, unknown keys are kept, and ``remark`` falls back to None
    only when the stored subject has no such key.
    """
    defaults = new_cognitive_subjects()
    stored_subjects = stored if isinstance(stored, list) else []
    if len(stored_subjects) > len(defaults):
        logger.debug(
            "Dropping %d stored subjects beyond the canonical list",
            len(stored_subjects) - len(defaults),
        )

    merged = []
    for i, default in enumerate(defaults):
        subject = stored_subjects[i] if i < len(stored_subjects) else None
        merged.append({**default, **(subject if isinstance(subject, dict) else {})})
    return merged


def _merge_skills(defaults: dict[str, str], stored: Any) -> dict[str, Any]:
    return {**defaults, **(stored if isinstance(stored, dict) else {})}


def normalize_report(stored: Report) -> Report:
    """Reconcile a stored report against a fresh default report.

    Args:
        stored: Report as read from storage.

    Returns:
        A new report with every default field present, stored values taking
        precedence, and deprecated fields removed.

    Raises:
        ValueError: If ``stored`` is not a mapping.
    """
    if not isinstance(stored, dict):
        raise ValueError(f"Stored report must be an object, got {type(stored).__name__}")

    report = {
        key: value for key, value in stored.items() if key not in DEPRECATED_FIELDS
    }
    return {
        **new_student_report(),
        **report,
        "cognitive": _merge_subjects(report.get("cognitive")),
        "psychomotor": _merge_skills(new_psychomotor_skills(), report.get("psychomotor")),
        "affective": _merge_skills(new_affective_skills(), report.get("affective")),
    }


def load_reports(
    storage: KeyValueStorage | None, key: str = DEFAULT_STORAGE_KEY
) -> list[Report]:
    """Read and normalize the persisted reports.

    Falls back to a single default report when there is no storage, nothing
    stored, or the stored data cannot be read. Unparseable data is removed.
    """
    if storage is None:
        return [new_student_report()]

    try:
        raw = storage.get(key)
    except StorageError:
        logger.error("Could not read student reports from storage", exc_info=True)
        return [new_student_report()]

    if raw is None:
        return [new_student_report()]

    try:
        parsed = json.loads(raw)
        if not isinstance(parsed, list):
            raise ValueError("Stored student reports must be a list")
        return [normalize_report(report) for report in parsed]
    except ValueError:
        logger.error("Error parsing student data from storage", exc_info=True)
        try:
            storage.remove(key)
        except StorageError:
            logger.error("Could not clear corrupted student data", exc_info=True)
        return [new_student_report()]


class ReportStore:
    """Ordered, observable collection of student reports.

    Subscribers are called with the current list on subscription and after
    every change. When a storage backend is given, a persistence handler is
    subscribed at construction, so every change (and the initial load) is
    written through immediately.

    Example:
        store = ReportStore(JsonFileStorage("reports.json"))
        unsubscribe = store.subscribe(render)
        report = store.add()
        store.remove(report["id"])
    """

    def __init__(
        self,
        storage: KeyValueStorage | None = None,
        key: str = DEFAULT_STORAGE_KEY,
    ) -> None:
        """Initialize the store from storage.

        Args:
            storage: Persistent backend, or None where no persistent storage
                is available.
            key: Storage slot holding the serialized reports.
        """
        self._storage = storage
        self._key = key
        self._subscribers: list[Subscriber] = []
        self._reports: list[Report] = load_reports(storage, key)

        if storage is not None:
            self.subscribe(self.persist)

    @property
    def value(self) -> list[Report]:
        return self._reports

    def __len__(self) -> int:
        return len(self._reports)

    def __iter__(self) -> Iterator[Report]:
        return iter(self._reports)

    def subscribe(self, callback: Subscriber) -> Unsubscribe:
        """Register a callback and call it once with the current value.

        Returns:
            A function that removes the callback.
        """
        self._subscribers.append(callback)
        callback(self._reports)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def set(self, reports: list[Report]) -> None:
        self._reports = list(reports)
        for callback in list(self._subscribers):
            callback(self._reports)

    def update(self, fn: Callable[[list[Report]], list[Report]]) -> None:
        self.set(fn(self._reports))

    def add(self) -> Report:
        """Append a blank report and return it."""
        report = new_student_report()
        self.update(lambda reports: [*reports, report])
        return report

    def remove(self, report_id: str) -> None:
        self.update(
            lambda reports: [report for report in reports if report.get("id") != report_id]
        )

    def get(self, report_id: str) -> Report | None:
        for report in self._reports:
            if report.get("id") == report_id:
                return report
        return None

    def persist(self, reports: list[Report]) -> None:
        """Write the reports to storage, or clear the slot when there are none.

        Failures are logged and never raised to the caller that mutated the
        store.
        """
        if self._storage is None:
            return
        try:
            if reports:
                self._storage.set(self._key, json.dumps(reports, ensure_ascii=False))
            else:
                self._storage.remove(self._key)
        except (StorageError, TypeError, ValueError):
            logger.error("Error saving student data to storage", exc_info=True)
