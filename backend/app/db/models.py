from sqlalchemy import Column, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class EntityRecord(Base):
    __tablename__ = "entities"

    id = Column(String(128), primary_key=True)
    entity_type = Column(String(32), nullable=False, default="Unknown")
    name = Column(String(255))
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class RelationshipRecord(Base):
    __tablename__ = "relationships"
    __table_args__ = (
        UniqueConstraint("from_id", "to_id", "rel_type", name="uq_relationship_key"),
    )

    id = Column(Integer, primary_key=True)
    from_id = Column(String(128), nullable=False, index=True)
    to_id = Column(String(128), nullable=False, index=True)
    rel_type = Column(String(32), nullable=False)
    mode = Column(String(16))
    rw = Column(String(16))
    description = Column(Text)
    synced_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class SyncJobRecord(Base):
    __tablename__ = "sync_jobs"

    id = Column(Integer, primary_key=True)
    status = Column(String(16), nullable=False, default="running")  # running | completed | failed
    started_at = Column(DateTime(timezone=True), server_default=func.now())
    completed_at = Column(DateTime(timezone=True))
    records_synced = Column(Integer, default=0)
    records_rejected = Column(Integer, default=0)
    error_message = Column(Text)

    def to_dict(self) -> dict:
        return {
            "job_id": self.id,
            "status": self.status,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "records_synced": self.records_synced,
            "records_rejected": self.records_rejected,
            "error_message": self.error_message,
        }
