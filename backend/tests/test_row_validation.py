import math

import pytest

from ngo_reports.schemas.report import ReportIn
from ngo_reports.services.ingest.errors import (
    DuplicateColumnsError,
    MissingColumnsError,
    RowValidationError,
)
from ngo_reports.services.ingest.rows import (
    REQUIRED_COLUMNS,
    sanitize_row,
    validate_headers,
    validate_row,
)


def _raw(**overrides):
    row = {
        "ngo_id": " NGO1 ",
        "month": "Oct 2025",
        "people_helped": "10",
        "events_conducted": "2",
        "funds_utilized": "5000",
    }
    row.update(overrides)
    return row


def test_headers_in_any_order_with_extras_are_accepted():
    validate_headers(["funds_utilized", "notes", "month", "ngo_id", "events_conducted", "people_helped"])


def test_missing_header_error_names_exactly_the_missing_column():
    headers = [c for c in REQUIRED_COLUMNS if c != "funds_utilized"]
    with pytest.raises(MissingColumnsError) as excinfo:
        validate_headers(headers)
    assert excinfo.value.missing == ["funds_utilized"]
    assert excinfo.value.message == "Missing required columns: funds_utilized"


def test_missing_header_error_lists_every_missing_column():
    with pytest.raises(MissingColumnsError) as excinfo:
        validate_headers(["ngo_id", "extra"])
    assert excinfo.value.missing == ["month", "people_helped", "events_conducted", "funds_utilized"]


def test_no_header_at_all_is_missing_everything():
    with pytest.raises(MissingColumnsError) as excinfo:
        validate_headers(None)
    assert excinfo.value.missing == list(REQUIRED_COLUMNS)


def test_duplicate_required_header_is_rejected():
    with pytest.raises(DuplicateColumnsError) as excinfo:
        validate_headers([*REQUIRED_COLUMNS, "month"])
    assert excinfo.value.duplicated == ["month"]


def test_sanitize_row_produces_typed_candidate():
    candidate = sanitize_row(_raw())
    assert candidate == {
        "ngo_id": "NGO1",
        "month": "2025-10",
        "people_helped": 10,
        "events_conducted": 2,
        "funds_utilized": 5000,
    }


def test_sanitize_row_keeps_shape_for_messy_rows():
    candidate = sanitize_row({"month": "", "people_helped": "abc", "unrelated": "x"})
    assert set(candidate) == set(REQUIRED_COLUMNS)
    assert candidate["ngo_id"] is None
    assert candidate["month"] is None
    assert math.isnan(candidate["people_helped"])
    assert math.isnan(candidate["funds_utilized"])


def test_validate_row_returns_report():
    report = validate_row(sanitize_row(_raw()), 2)
    assert isinstance(report, ReportIn)
    assert report.month == "2025-10"


def test_validate_row_reports_file_line_and_field():
    candidate = sanitize_row(_raw(people_helped="abc"))
    with pytest.raises(RowValidationError) as excinfo:
        validate_row(candidate, 6)
    err = excinfo.value
    assert err.row_number == 6
    assert [field for field, _ in err.issues] == ["people_helped"]
    assert err.message.startswith("Row 6 validation failed: people_helped")


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"ngo_id": "   "}, "ngo_id"),
        ({"month": "garbage"}, "month"),
        ({"month": ""}, "month"),
        ({"events_conducted": "-1"}, "events_conducted"),
        ({"funds_utilized": "12.5"}, "funds_utilized"),
    ],
)
def test_validate_row_rejects_bad_values(overrides, field):
    with pytest.raises(RowValidationError) as excinfo:
        validate_row(sanitize_row(_raw(**overrides)), 2)
    assert excinfo.value.row_number == 2
    assert field in [f for f, _ in excinfo.value.issues]


def test_validate_row_lists_every_failing_field():
    with pytest.raises(RowValidationError) as excinfo:
        validate_row(sanitize_row(_raw(month="nope", people_helped="x")), 2)
    fields = [f for f, _ in excinfo.value.issues]
    assert "month" in fields and "people_helped" in fields
    assert "Month must be in YYYY-MM format" in excinfo.value.message


@pytest.mark.parametrize(
    "field, value",
    [
        ("people_helped", str(2**31)),
        ("events_conducted", "99999999999999999999"),
        ("funds_utilized", str(2**63)),
    ],
)
def test_validate_row_rejects_values_wider_than_the_column(field, value):
    with pytest.raises(RowValidationError) as excinfo:
        validate_row(sanitize_row(_raw(**{field: value})), 3)
    assert excinfo.value.issues[0][0] == field
    assert excinfo.value.issues[0][1].startswith("Must be at most")


def test_validate_row_accepts_column_maximums():
    report = validate_row(
        sanitize_row(_raw(people_helped=str(2**31 - 1), funds_utilized=str(2**63 - 1))), 2
    )
    assert report.funds_utilized == 2**63 - 1
