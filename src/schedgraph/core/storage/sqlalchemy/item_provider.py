"""SQLAlchemy-backed ScheduleItemsProvider."""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from schedgraph.core.errors import NotFoundError, StorageError, ValidationError
from schedgraph.core.storage.base import ScheduleItemsProvider
from schedgraph.core.storage.sqlalchemy.models import ScheduleItemModel
from schedgraph.core.types import ScheduleItem
from schedgraph.logger import get_logger

logger = get_logger(__name__)


class SqlScheduleItemsProvider(ScheduleItemsProvider):
    """Reads schedule items from the item table.

    add_item/remove_item exist for the owners of the schedule (CLI,
    examples); the dependency repository only calls list_items.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def list_items(self, schedule_id: str) -> list[ScheduleItem]:
        try:
            with self._session_factory() as session:
                records = (
                    session.query(ScheduleItemModel)
                    .filter(ScheduleItemModel.schedule_id == schedule_id)
                    .order_by(ScheduleItemModel.pk.asc())
                    .all()
                )
                return [record.to_domain() for record in records]
        except SQLAlchemyError as e:
            logger.error("Error listing items for schedule %s: %s", schedule_id, e)
            raise StorageError(f"Failed to list items for schedule {schedule_id}") from e

    def add_item(self, schedule_id: str, item: ScheduleItem) -> None:
        with self._session_factory() as session:
            session.add(ScheduleItemModel.from_domain(schedule_id, item))
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise ValidationError(
                    f"Schedule item '{item.id}' already exists in schedule {schedule_id}",
                    context={"schedule_id": schedule_id, "item_id": item.id},
                ) from e
            logger.info("Added schedule item %s to schedule %s", item.id, schedule_id)

    def remove_item(self, schedule_id: str, item_id: str) -> None:
        with self._session_factory() as session:
            record = (
                session.query(ScheduleItemModel)
                .filter(
                    ScheduleItemModel.schedule_id == schedule_id,
                    ScheduleItemModel.id == item_id,
                )
                .first()
            )
            if record is None:
                raise NotFoundError(f"Schedule item '{item_id}' not found")
            session.delete(record)
            session.commit()
