from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".csv"}
CHUNK_SIZE = 512 * 1024


class UploadTooLargeError(ValueError):
    pass


def is_csv_filename(filename: str | None) -> bool:
    return Path(filename or "").suffix.lower() in ALLOWED_EXTENSIONS


def save_upload(job_id: str, source: BinaryIO, upload_dir: Path, max_bytes: int) -> Path:
    """
    Copy the uploaded stream to ``upload_dir`` in chunks.
    The partial file is removed if the size limit is exceeded.
    """
    upload_dir.mkdir(parents=True, exist_ok=True)
    dest_path = upload_dir / f"upload-{job_id}.csv"

    bytes_written = 0
    source.seek(0)
    with dest_path.open("wb") as buffer:
        while True:
            chunk = source.read(CHUNK_SIZE)
            if not chunk:
                break
            bytes_written += len(chunk)
            if bytes_written > max_bytes:
                buffer.close()
                dest_path.unlink(missing_ok=True)
                raise UploadTooLargeError(
                    f"File size exceeds the limit of {max_bytes // (1024 * 1024)}MB"
                )
            buffer.write(chunk)

    logger.info("upload_saved job_id=%s path=%s bytes=%s", job_id, dest_path, bytes_written)
    return dest_path


def cleanup_file(file_path: Path) -> None:
    """Best-effort removal of a temporary upload; failures are only logged."""
    try:
        if file_path.exists():
            file_path.unlink()
            logger.info("temp_file_deleted path=%s", file_path)
    except OSError as exc:
        logger.error("temp_file_cleanup_failed path=%s error=%s", file_path, exc)
