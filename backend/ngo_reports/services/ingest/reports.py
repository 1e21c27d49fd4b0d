from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from sqlalchemy import distinct, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from ngo_reports.models.report import Report

logger = logging.getLogger(__name__)

REPORT_KEY = ("ngo_id", "month")
METRIC_FIELDS = ("people_helped", "events_conducted", "funds_utilized")

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

# Per-item failures; anything else (connection loss, ...) propagates.
ITEM_ERRORS = (IntegrityError, DataError)


@dataclass
class BatchResult:
    written: int = 0
    failed: list[dict] = field(default_factory=list)


def _upsert_statement(session: Session, rows: list[dict]):
    dialect = session.get_bind().dialect.name
    try:
        insert = _INSERTS[dialect]
    except KeyError:
        raise NotImplementedError(f"Report upsert is not supported on {dialect}") from None

    stmt = insert(Report).values([{"id": str(uuid.uuid4()), **row} for row in rows])
    return stmt.on_conflict_do_update(
        index_elements=list(REPORT_KEY),
        set_={
            **{col: stmt.excluded[col] for col in METRIC_FIELDS},
            "updated_at": func.now(),
        },
    )


def _key(row: Mapping) -> tuple:
    return tuple(row[col] for col in REPORT_KEY)


def _last_write_wins(rows: Iterable[Mapping]) -> list[dict]:
    """Collapse rows sharing a key inside one batch, keeping the latest values."""
    by_key: dict[tuple, dict] = {}
    for row in rows:
        payload = {col: row[col] for col in (*REPORT_KEY, *METRIC_FIELDS)}
        by_key.pop(_key(payload), None)
        by_key[_key(payload)] = payload
    return list(by_key.values())


class ReportRepository:
    """Report store keyed by (ngo_id, month); every write is an upsert."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def upsert(self, data: Mapping) -> Report:
        row = _last_write_wins([data])[0]
        with self._session_factory() as session, session.begin():
            session.execute(_upsert_statement(session, [row]))
        return self.get(row["ngo_id"], row["month"])

    def upsert_many(self, rows: Iterable[Mapping]) -> BatchResult:
        """
        Unordered bulk upsert. Tries one statement for the whole batch; if an
        item is rejected the batch is replayed row by row so the other rows
        still land. Failed rows are returned, not raised.
        """
        rows = list(rows)
        payload = _last_write_wins(rows)
        if not payload:
            return BatchResult()

        try:
            with self._session_factory() as session, session.begin():
                session.execute(_upsert_statement(session, payload))
            return BatchResult(written=len(rows))
        except ITEM_ERRORS as exc:
            logger.warning("report_batch_rejected size=%s error=%s; retrying per row", len(payload), exc)

        result = BatchResult()
        for row in payload:
            try:
                with self._session_factory() as session, session.begin():
                    session.execute(_upsert_statement(session, [row]))
            except ITEM_ERRORS as exc:
                logger.error(
                    "report_upsert_failed ngo_id=%s month=%s error=%s",
                    row["ngo_id"],
                    row["month"],
                    exc,
                )
                result.failed.append(row)
        failed_keys = {_key(row) for row in result.failed}
        result.written = sum(1 for row in rows if _key(row) not in failed_keys)
        return result

    def get(self, ngo_id: str, month: str) -> Report | None:
        with self._session_factory() as session:
            return session.scalars(
                select(Report).where(Report.ngo_id == ngo_id, Report.month == month)
            ).first()

    def count(self) -> int:
        with self._session_factory() as session:
            return session.scalar(select(func.count()).select_from(Report)) or 0

    def monthly_summary(self, month: str) -> dict:
        with self._session_factory() as session:
            row = session.execute(
                select(
                    func.count(distinct(Report.ngo_id)),
                    func.coalesce(func.sum(Report.people_helped), 0),
                    func.coalesce(func.sum(Report.events_conducted), 0),
                    func.coalesce(func.sum(Report.funds_utilized), 0),
                ).where(Report.month == month)
            ).one()
        return {
            "month": month,
            "total_ngos_reporting": int(row[0]),
            "total_people_helped": int(row[1]),
            "total_events_conducted": int(row[2]),
            "total_funds_utilized": int(row[3]),
        }
