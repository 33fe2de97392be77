"""
Relationship sync job.

Resolves endpoint types, classifies every raw relationship and upserts the
accepted ones into the relationship store. Each run is recorded in the
``sync_jobs`` table. Rejections are counted, never fatal; store failures
mark the job failed and propagate as StoreError.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.classification.classifier import ClassificationReport, RelationshipClassifier
from app.classification.resolver import EntityTypeResolver
from app.db.models import SyncJobRecord
from app.db.repository import RelationshipStore
from app.ir.entity_ir import Entity, EntityType
from app.ir.errors import StoreError
from app.ir.relationship_ir import RawRelationship

logger = logging.getLogger(__name__)


@dataclass
class SyncSummary:
    job_id: Optional[int]
    status: str
    started_at: datetime
    completed_at: Optional[datetime] = None
    records_synced: int = 0
    created: int = 0
    rejected: int = 0
    error_message: Optional[str] = None
    report: Optional[ClassificationReport] = field(default=None, repr=False)

    def to_dict(self) -> dict:
        return {
            "job_id": self.job_id,
            "status": self.status,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "records_synced": self.records_synced,
            "created": self.created,
            "rejected": self.rejected,
            "error_message": self.error_message,
            "rejections": [r.to_dict() for r in self.report.rejected] if self.report else [],
        }


def _now() -> datetime:
    return datetime.now(timezone.utc)


class RelationshipSync:

    def __init__(self, session: Session):
        self.session = session
        self.store = RelationshipStore(session)

    def run(
        self,
        raw_relationships: Iterable[RawRelationship],
        entities: Iterable[Entity] = (),
    ) -> SyncSummary:
        raw = list(raw_relationships)
        known = list(entities)
        summary = SyncSummary(job_id=None, status="running", started_at=_now())

        job = self._start_job(summary)
        tag = f"[Sync #{summary.job_id}]"
        logger.info("%s Starting: %d relationships, %d entities", tag, len(raw), len(known))

        try:
            for entity in known:
                self.store.upsert_entity(entity)
            self.session.flush()

            # Types already known to the store win over the id prefix
            ids = {r.from_id for r in raw} | {r.to_id for r in raw}
            overrides = self.store.entity_types(ids)
            overrides.update({e.id: e.type for e in known if e.type is not EntityType.UNKNOWN})

            classifier = RelationshipClassifier(resolver=EntityTypeResolver(overrides))
            report = classifier.classify_all(raw)

            for rel in report.classified:
                if self.store.upsert_relationship(rel):
                    summary.created += 1

            summary.report = report
            summary.records_synced = len(report.classified)
            summary.rejected = len(report.rejected)
            summary.status = "completed"
            summary.completed_at = _now()
            self._finish_job(job, summary)
            self.session.commit()

        except SQLAlchemyError as e:
            self.session.rollback()
            summary.status = "failed"
            summary.completed_at = _now()
            summary.error_message = str(e)
            logger.error("%s Failed: %s", tag, e)
            self._record_failure(summary)
            raise StoreError(f"sync job failed: {e}") from e

        logger.info(
            "%s Completed: %d synced (%d new), %d rejected",
            tag, summary.records_synced, summary.created, summary.rejected,
        )
        return summary

    # ---------- sync_jobs bookkeeping ----------

    def _start_job(self, summary: SyncSummary) -> Optional[SyncJobRecord]:
        try:
            job = SyncJobRecord(status="running", started_at=summary.started_at)
            self.session.add(job)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreError(f"could not record sync job: {e}") from e
        summary.job_id = job.id
        return job

    def _finish_job(self, job: Optional[SyncJobRecord], summary: SyncSummary) -> None:
        if job is None:
            return
        job.status = summary.status
        job.completed_at = summary.completed_at
        job.records_synced = summary.records_synced
        job.records_rejected = summary.rejected
        job.error_message = summary.error_message

    def _record_failure(self, summary: SyncSummary) -> None:
        """Best effort: the database may be what failed."""
        try:
            job = self.session.get(SyncJobRecord, summary.job_id)
            if job is not None:
                self._finish_job(job, summary)
                self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.warning("[Sync #%s] Could not record failure: %s", summary.job_id, e)

    def recent_jobs(self, limit: int = 10) -> List[SyncJobRecord]:
        return list(self.session.scalars(
            select(SyncJobRecord).order_by(SyncJobRecord.id.desc()).limit(limit)
        ))
