import pytest

from app.exceptions import PublishValidationError
from app.pipelines.validator import (
    check_publishable,
    find_duplicate_socs,
    publish_errors,
    validate_all,
    validate_career,
)

from conftest import make_career


def test_valid_career_has_no_errors():
    result = validate_career(make_career())
    assert result.valid is True
    assert result.errors == []
    assert result.warnings == []


def test_missing_required_fields_are_errors():
    result = validate_career(make_career(education="", demand=""))
    assert result.valid is False
    assert "Missing required field: education" in result.errors
    assert "Missing required field: demand" in result.errors


def test_bad_salary_is_error_and_huge_salary_is_warning():
    assert not validate_career(make_career(salary=0)).valid

    result = validate_career(make_career(salary=750000))
    assert result.valid is True
    assert any("Unusually high salary" in w for w in result.warnings)


def test_soc_pattern_and_missing_data_are_warnings():
    result = validate_career(make_career(soc="291141", work_environment="", growth_rate=None))
    assert result.valid is True
    assert any("Invalid SOC format" in w for w in result.warnings)
    assert "Missing work_environment" in result.warnings
    assert "Missing growth rate" in result.warnings


def test_short_description_is_error():
    result = validate_career(make_career(description="Too short"))
    assert result.valid is False


def test_duplicate_detector_groups_by_soc():
    careers = [
        {"id": 1, "soc": "15-1252", "title": "Software Developers"},
        {"id": 2, "soc": "15-1252", "title": "Software QA Analysts"},
        {"id": 3, "soc": "29-1141", "title": "Registered Nurses"},
    ]
    duplicates = find_duplicate_socs(careers)

    assert len(duplicates) == 1
    assert duplicates[0]["soc"] == "15-1252"
    assert duplicates[0]["count"] == 2
    assert [c["id"] for c in duplicates[0]["careers"]] == [1, 2]


def test_validate_all_report_shape():
    careers = [make_career(id=1), make_career(id=2, salary=0), make_career(id=3, soc="15-1252", salary=124200)]
    report = validate_all(careers)

    assert report["summary"]["total_careers"] == 3
    assert report["summary"]["valid_careers"] == 2
    assert report["summary"]["invalid_careers"] == 1
    assert report["summary"]["duplicate_socs"] == 1
    assert report["salary_stats"] == {"min": 81220, "max": 124200, "avg": round((81220 + 124200) / 2)}
    assert len(report["results"]) == 3
    # Advisory only: nothing is removed
    assert len(careers) == 3


def test_publish_check_passes_for_complete_careers():
    check_publishable([make_career(id=1), make_career(id=2, soc="15-1252")])


def test_publish_check_lists_every_failure():
    careers = [
        make_career(id=1),
        make_career(id=2, soc="29-11411"),
        make_career(id=3, skills=["One", "Two"]),
    ]
    with pytest.raises(PublishValidationError) as exc_info:
        check_publishable(careers)

    failures = exc_info.value.failures
    assert [f["id"] for f in failures] == [2, 3]
    assert any("Invalid SOC" in e for e in failures[0]["errors"])
    assert any("3-5 items" in e for e in failures[1]["errors"])


def test_publish_errors_require_source_and_salary():
    errors = publish_errors(make_career(source="", salary=0))
    assert "Missing source" in errors
    assert any("Invalid salary" in e for e in errors)
