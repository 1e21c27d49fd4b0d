"""
Background CSV ingestion.

``process_csv`` is a plain function: the HTTP layer schedules it after the
upload request has created a ``pending`` job, tests call it directly.

The run has two phases with different failure semantics:

1. validation, all or nothing: a bad header or any bad row fails the job
   before a single report is written;
2. persistence, batch by batch: each committed batch stays committed, a
   storage failure fails the job and abandons the remaining batches.

Rows are streamed from disk but buffered before validation so that
``total`` is known up front. That costs memory proportional to the file,
which the upload size limit keeps bounded.
"""
from __future__ import annotations

import csv
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Sequence

from ngo_reports.core.config import settings
from ngo_reports.models.job import JobStatus
from ngo_reports.schemas.report import ReportIn
from ngo_reports.services.ingest.errors import (
    IngestError,
    JobNotFoundError,
    RowValidationError,
    UnreadableFileError,
)
from ngo_reports.services.ingest.jobs import JobRepository
from ngo_reports.services.ingest.reports import ReportRepository
from ngo_reports.services.ingest.rows import sanitize_row, validate_headers, validate_row
from ngo_reports.services.ingest.uploads import cleanup_file

logger = logging.getLogger(__name__)


@contextmanager
def open_csv(file_path: Path) -> Iterator[csv.DictReader]:
    """
    Lazy, single-pass reader over the data rows of ``file_path``.
    A UTF-8 BOM is dropped and header names are trimmed.
    """
    with open(file_path, newline="", encoding="utf-8-sig") as handle:
        reader = csv.DictReader(handle)
        if reader.fieldnames is not None:
            reader.fieldnames = [name.strip() for name in reader.fieldnames]
        yield reader


def _first_line(reader: csv.DictReader, row: dict) -> int:
    # line_num is where the row ended; quoted values may span lines
    embedded = sum(value.count("\n") for value in row.values() if isinstance(value, str))
    return reader.line_num - embedded


def read_rows(file_path: Path) -> list[tuple[int, dict]]:
    """
    Check the header, then buffer every data row with the file line it
    starts on. Blank lines are skipped but still counted.
    """
    try:
        with open_csv(file_path) as reader:
            validate_headers(reader.fieldnames)
            return [(_first_line(reader, row), row) for row in reader]
    except UnicodeDecodeError as exc:
        raise UnreadableFileError(f"File is not valid UTF-8 text: {exc.reason}") from exc
    except csv.Error as exc:
        raise UnreadableFileError(f"Malformed CSV: {exc}") from exc


def validate_rows(rows: Sequence[tuple[int, dict]]) -> list[ReportIn]:
    """Validate in file order; the first bad row aborts the whole file."""
    validated = []
    for line_number, raw in rows:
        candidate = sanitize_row(raw)
        try:
            validated.append(validate_row(candidate, line_number))
        except RowValidationError as exc:
            logger.error(
                "row_validation_failed row=%s raw_month=%r sanitized_month=%r issues=%s",
                exc.row_number,
                raw.get("month"),
                candidate["month"],
                exc.issues,
            )
            raise
    return validated


def persist_in_batches(
    job_id: str,
    reports: Sequence[ReportIn],
    *,
    jobs: JobRepository,
    report_store: ReportRepository,
    batch_size: int,
) -> int:
    processed = 0
    for start in range(0, len(reports), batch_size):
        batch = [r.model_dump() for r in reports[start:start + batch_size]]
        result = report_store.upsert_many(batch)
        processed += result.written
        jobs.record_progress(job_id, processed)
        logger.info(
            "batch_committed job_id=%s rows=%s written=%s failed=%s processed=%s",
            job_id,
            len(batch),
            result.written,
            len(result.failed),
            processed,
        )
    return processed


def _run(
    file_path: Path,
    job_id: str,
    jobs: JobRepository,
    report_store: ReportRepository,
    batch_size: int,
) -> None:
    job = jobs.get(job_id)
    if job is None:
        raise JobNotFoundError(job_id)
    if job.status != JobStatus.PENDING.value:
        logger.warning("ingest_skipped job_id=%s status=%s", job_id, job.status)
        return

    try:
        rows = read_rows(file_path)
        jobs.mark_processing(job_id, total=len(rows))
        validated = validate_rows(rows)
    except IngestError as exc:
        logger.error("ingest_rejected job_id=%s error=%s", job_id, exc.message)
        jobs.mark_failed(job_id, exc.message)
        return

    try:
        persist_in_batches(job_id, validated, jobs=jobs, report_store=report_store, batch_size=batch_size)
    except Exception as exc:
        logger.exception("ingest_persistence_failed job_id=%s", job_id)
        jobs.mark_failed(job_id, str(exc) or exc.__class__.__name__)
        return

    jobs.mark_success(job_id)
    logger.info("ingest_completed job_id=%s total=%s", job_id, len(validated))


def process_csv(
    file_path: Path | str,
    job_id: str,
    *,
    jobs: JobRepository,
    reports: ReportRepository,
    batch_size: int | None = None,
) -> None:
    """
    Ingest the CSV at ``file_path`` for the pending job ``job_id``.

    Never raises: every outcome is written to the job record. The file is
    deleted once the run ends, whichever way it ends.
    """
    file_path = Path(file_path)
    batch_size = batch_size or settings.INGEST_BATCH_SIZE
    logger.info("ingest_started job_id=%s file=%s", job_id, file_path)
    try:
        _run(file_path, job_id, jobs, reports, batch_size)
    except JobNotFoundError as exc:
        logger.error("ingest_aborted job_id=%s error=%s", job_id, exc.message)
    except Exception as exc:
        logger.exception("ingest_crashed job_id=%s", job_id)
        try:
            jobs.mark_failed(job_id, str(exc) or exc.__class__.__name__)
        except Exception:
            logger.exception("job_status_write_failed job_id=%s", job_id)
    finally:
        cleanup_file(file_path)
