from __future__ import annotations


class IngestError(Exception):
    """Base class for failures that end an ingestion job."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MissingColumnsError(IngestError):
    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Missing required columns: {', '.join(self.missing)}")


class DuplicateColumnsError(IngestError):
    def __init__(self, duplicated: list[str]) -> None:
        self.duplicated = list(duplicated)
        super().__init__(f"Duplicate required columns: {', '.join(self.duplicated)}")


class RowValidationError(IngestError):
    """A data row failed validation.

    ``row_number`` is the line number in the uploaded file, so the first data
    row (right after the header) is row 2.
    """

    def __init__(self, row_number: int, issues: list[tuple[str, str]]) -> None:
        self.row_number = row_number
        self.issues = list(issues)
        detail = ", ".join(f"{field} - {reason}" for field, reason in self.issues)
        super().__init__(f"Row {row_number} validation failed: {detail}")


class JobNotFoundError(IngestError):
    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(f"Job {job_id} not found")


class UnreadableFileError(IngestError):
    """The upload is not UTF-8 CSV text."""
