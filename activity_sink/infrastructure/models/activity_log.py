"""SQLAlchemy model for recorded activity."""

from sqlalchemy import Column, DateTime, Float, Integer, String, func

from activity_sink.infrastructure.database import Base


class ActivityLogModel(Base):
    """Database representation of one activity record. Rows are append-only."""

    __tablename__ = "activity_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(
        "timestamp", DateTime(), nullable=False, server_default=func.now()
    )
    user_id = Column("userId", String(255), nullable=False, index=True)
    url = Column("url", String(2048), nullable=False)
    process_type = Column("processType", String(32), nullable=False)
    response_time_ms = Column("responseTimeMs", Float, nullable=False)
    created_by = Column("created_by", String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<ActivityLogModel id={self.id} user={self.user_id}>"


__all__ = ["ActivityLogModel"]
