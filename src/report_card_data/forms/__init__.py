"""Student report form state, persistence and grading helpers."""

from report_card_data.forms.defaults import (
    AFFECTIVE_SKILLS,
    COGNITIVE_SUBJECTS,
    PSYCHOMOTOR_SKILLS,
    new_affective_skills,
    new_cognitive_subjects,
    new_psychomotor_skills,
    new_student_report,
)
from report_card_data.forms.grading import (
    calculate_grade,
    get_overall_remark,
    subject_total,
)
from report_card_data.forms.storage import (
    JsonFileStorage,
    KeyValueStorage,
    MemoryStorage,
    StorageError,
)
from report_card_data.forms.store import ReportStore, load_reports, normalize_report

__all__ = [
    "AFFECTIVE_SKILLS",
    "COGNITIVE_SUBJECTS",
    "JsonFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "PSYCHOMOTOR_SKILLS",
    "ReportStore",
    "StorageError",
    "calculate_grade",
    "get_overall_remark",
    "load_reports",
    "new_affective_skills",
    "new_cognitive_subjects",
    "new_psychomotor_skills",
    "new_student_report",
    "normalize_report",
    "subject_total",
]
