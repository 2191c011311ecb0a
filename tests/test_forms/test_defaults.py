from report_card_data.forms import (
    AFFECTIVE_SKILLS,
    COGNITIVE_SUBJECTS,
    PSYCHOMOTOR_SKILLS,
    new_student_report,
)
from report_card_data.forms.defaults import new_report_id


def test_new_student_report_shape() -> None:
    report = new_student_report()

    assert report["fullName"] == ""
    assert report["class"] == "GRADE ONE"
    assert report["department"] == "PRIMARY"
    assert report["session"] == "2024/2025"
    assert report["resumptionDate"] == "January 8th, 2025"
    assert report["daysPresent"] is None
    assert report["classAverage"] is None
    assert [s["subject"] for s in report["cognitive"]] == list(COGNITIVE_SUBJECTS)
    assert report["cognitive"][0] == {
        "subject": "MATHEMATICS",
        "project": None,
        "ca1": None,
        "ca2": None,
        "ca3": None,
        "exam": None,
        "remark": None,
    }
    assert report["psychomotor"] == dict.fromkeys(PSYCHOMOTOR_SKILLS, "A")
    assert report["affective"] == dict.fromkeys(AFFECTIVE_SKILLS, "A")
    assert "dob" not in report


def test_new_student_reports_do_not_share_nested_state() -> None:
    first = new_student_report()
    second = new_student_report()

    first["cognitive"][0]["exam"] = 70
    first["psychomotor"]["WRITING"] = "C"

    assert second["cognitive"][0]["exam"] is None
    assert second["psychomotor"]["WRITING"] == "A"


def test_report_ids_are_increasing_timestamps() -> None:
    ids = [new_report_id() for _ in range(5)]

    assert all(report_id.isdigit() for report_id in ids)
    assert [int(report_id) for report_id in ids] == sorted({int(i) for i in ids})
