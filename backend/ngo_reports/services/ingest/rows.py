from __future__ import annotations

from collections import Counter
from typing import Iterable, Mapping

from pydantic import ValidationError

from ngo_reports.schemas.report import ReportIn
from ngo_reports.services.ingest.errors import (
    DuplicateColumnsError,
    MissingColumnsError,
    RowValidationError,
)
from ngo_reports.services.ingest.utils import parse_int, parse_month, strip_or_none


REQUIRED_COLUMNS = (
    "ngo_id",
    "month",
    "people_helped",
    "events_conducted",
    "funds_utilized",
)
NUMERIC_COLUMNS = ("people_helped", "events_conducted", "funds_utilized")

_REASONS = {
    "ngo_id": "NGO ID is required",
    "month": "Month must be in YYYY-MM format",
    "people_helped": "Must be a whole number >= 0",
    "events_conducted": "Must be a whole number >= 0",
    "funds_utilized": "Must be a whole number >= 0",
}


def _reason(field: str, err: dict) -> str:
    if err["type"] == "less_than_equal":
        return f"Must be at most {err['ctx']['le']}"
    return _REASONS.get(field, err["msg"])


def validate_headers(headers: Iterable[str] | None) -> None:
    """
    Raise when a required column is absent or appears more than once.
    Extra columns are fine.
    """
    counts = Counter(headers or ())
    missing = [col for col in REQUIRED_COLUMNS if counts[col] == 0]
    if missing:
        raise MissingColumnsError(missing)
    duplicated = [col for col in REQUIRED_COLUMNS if counts[col] > 1]
    if duplicated:
        raise DuplicateColumnsError(duplicated)


def sanitize_row(row: Mapping[str, str | None]) -> dict:
    """Fixed-shape candidate record, whatever the raw row looked like."""
    candidate = {
        "ngo_id": strip_or_none(row.get("ngo_id")),
        "month": parse_month(row.get("month")),
    }
    for col in NUMERIC_COLUMNS:
        candidate[col] = parse_int(row.get(col))
    return candidate


def validate_row(candidate: Mapping, line_number: int) -> ReportIn:
    """
    Validate the sanitized candidate read from line ``line_number`` of the
    uploaded file. Errors report that line.
    """
    try:
        return ReportIn.model_validate(dict(candidate), strict=True)
    except ValidationError as exc:
        issues = []
        for err in exc.errors():
            field = ".".join(str(part) for part in err["loc"]) or "row"
            issues.append((field, _reason(field, err)))
        raise RowValidationError(line_number, issues) from exc
