"""Canonical defaults and constructors for student report records."""

import time
from typing import Any

COGNITIVE_SUBJECTS: tuple[str, ...] = (
    "MATHEMATICS",
    "ENGLISH STUDIES",
    "BASIC SCIENCE",
    "PHY. AND HEALTH EDU.",
    "PREVOCATIONAL STUDIES",
    "NATIONAL VALUES",
    "CUL. AND CREATIVE ART",
    "COMPUTER SCIENCE",
    "FRENCH",
    "HISTORY",
    "MUSIC",
)

PSYCHOMOTOR_SKILLS: tuple[str, ...] = (
    "WRITING",
    "READING",
    "FLUENCY",
    "GAME",
    "SPORT",
    "CREATIVITY",
    "MUSICAL SKILLS",
    "LANGUAGE SKILLS",
)

AFFECTIVE_SKILLS: tuple[str, ...] = (
    "PUNCTUALITY",
    "ATTENDANCE",
    "RELIABILITY",
    "NEATNESS",
    "POLITENESS",
    "HONESTY",
    "RELATIONSHIP WITH STAFF MEMBERS",
    "RELATIONSHIP WITH FELLOW STUDENTS",
    "SELF-CONTROL",
    "CO-OPERATION",
    "SENSE OF RESPONSIBILITY",
    "ATTENTIVENESS",
    "INITIATIVE",
    "ORGANIZATIONAL ABILITY",
    "PERSEVERANCE",
    "PHYSICAL DEVELOPMENT",
)

DEFAULT_SKILL_GRADE = "A"
SCORE_FIELDS: tuple[str, ...] = ("project", "ca1", "ca2", "ca3", "exam")

# Fields dropped from the report form; stripped from stored data on load.
DEPRECATED_FIELDS: tuple[str, ...] = ("dob", "gender", "admissionNo")

_last_report_id = 0


def new_report_id() -> str:
    """Millisecond timestamp id, bumped so ids never repeat in one process."""
    global _last_report_id
    candidate = time.time_ns() // 1_000_000
    if candidate <= _last_report_id:
        candidate = _last_report_id + 1
    _last_report_id = candidate
    return str(candidate)


def new_cognitive_subject(subject: str) -> dict[str, Any]:
    entry: dict[str, Any] = {"subject": subject}
    for field in SCORE_FIELDS:
        entry[field] = None
    entry["remark"] = None
    return entry


def new_cognitive_subjects() -> list[dict[str, Any]]:
    return [new_cognitive_subject(subject) for subject in COGNITIVE_SUBJECTS]


def new_psychomotor_skills() -> dict[str, str]:
    return dict.fromkeys(PSYCHOMOTOR_SKILLS, DEFAULT_SKILL_GRADE)


def new_affective_skills() -> dict[str, str]:
    return dict.fromkeys(AFFECTIVE_SKILLS, DEFAULT_SKILL_GRADE)


def new_student_report() -> dict[str, Any]:
    """Build a blank report with fresh copies of every nested default."""
    return {
        "id": new_report_id(),
        "fullName": "",
        "class": "GRADE ONE",
        "department": "PRIMARY",
        "session": "2024/2025",
        # Performance summary
        "daysPresent": None,
        "daysAbsent": None,
        "daysSchoolOpened": None,
        "totalPupils": None,
        "classAverage": None,
        "cognitive": new_cognitive_subjects(),
        "psychomotor": new_psychomotor_skills(),
        "affective": new_affective_skills(),
        "teacherRemark": "",
        "resumptionDate": "January 8th, 2025",
    }
