"""Persistence layer for activity log rows."""

from datetime import timezone, tzinfo

from sqlalchemy.orm import Session

from activity_sink.domain.entities import ActivityLog
from activity_sink.infrastructure.models import ActivityLogModel
from activity_sink.utils import ensure_timezone


class ActivityLogRepository:
    """Insert and read :class:`ActivityLog` rows. Rows are never updated."""

    def __init__(self, session: Session, *, store_timezone: tzinfo = timezone.utc) -> None:
        self.session = session
        self.store_timezone = store_timezone

    def create(self, entry: ActivityLog) -> ActivityLog:
        """Insert ``entry`` and return it with the store generated fields."""

        model = ActivityLogModel()
        self._apply_entity_to_model(model, entry)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def get(self, entry_id: int) -> ActivityLog | None:
        """Return a row by its primary key, if present."""

        model = self.session.get(ActivityLogModel, entry_id)
        if model is None:
            return None
        return self._to_entity(model)

    def list_for_user(self, user_id: str) -> list[ActivityLog]:
        models = (
            self.session.query(ActivityLogModel)
            .filter(ActivityLogModel.user_id == user_id)
            .order_by(ActivityLogModel.id)
            .all()
        )
        return [self._to_entity(model) for model in models]

    def _to_entity(self, model: ActivityLogModel) -> ActivityLog:
        return ActivityLog(
            id=model.id,
            timestamp=ensure_timezone(model.timestamp, self.store_timezone),
            user_id=model.user_id,
            url=model.url,
            process_type=model.process_type,
            response_time_ms=model.response_time_ms,
            created_by=model.created_by,
        )

    @staticmethod
    def _apply_entity_to_model(model: ActivityLogModel, entry: ActivityLog) -> None:
        # id and timestamp are generated by the store.
        model.user_id = entry.user_id
        model.url = entry.url
        model.process_type = entry.process_type
        model.response_time_ms = entry.response_time_ms
        model.created_by = entry.created_by


__all__ = ["ActivityLogRepository"]
