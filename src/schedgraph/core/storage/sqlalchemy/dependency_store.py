"""SQLAlchemy-backed DependencyStore."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import update as sql_update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from schedgraph.core.errors import (
    ConcurrentModificationError,
    DuplicateDependencyError,
    NotFoundError,
    SchedGraphError,
    StorageError,
)
from schedgraph.core.storage.base import DependencyStore
from schedgraph.core.storage.sqlalchemy.models import (
    ScheduleDependencyModel,
    ScheduleRevisionModel,
)
from schedgraph.core.types import Dependency
from schedgraph.logger import get_logger

logger = get_logger(__name__)


class SqlDependencyStore(DependencyStore):
    """Persists dependency edges, one short session per operation.

    Uniqueness of the edge id and of the ordered pair is backed by table
    constraints; violations surface as DuplicateDependencyError.

    Each write bumps the schedule's row in the revision table in the same
    transaction. With expected_revision set, the bump is a conditional
    UPDATE, so of two writers that loaded the same revision only one
    commits; the other gets ConcurrentModificationError.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def load(self, schedule_id: str) -> list[Dependency]:
        try:
            with self._session_factory() as session:
                records = (
                    session.query(ScheduleDependencyModel)
                    .filter(ScheduleDependencyModel.schedule_id == schedule_id)
                    .order_by(ScheduleDependencyModel.pk.asc())
                    .all()
                )
                return [record.to_domain() for record in records]
        except SQLAlchemyError as e:
            logger.error("Error loading dependencies for schedule %s: %s", schedule_id, e)
            raise StorageError(f"Failed to load dependencies for schedule {schedule_id}") from e

    def revision(self, schedule_id: str) -> int:
        try:
            with self._session_factory() as session:
                value = (
                    session.query(ScheduleRevisionModel.revision)
                    .filter(ScheduleRevisionModel.schedule_id == schedule_id)
                    .scalar()
                )
                return value or 0
        except SQLAlchemyError as e:
            logger.error("Error reading revision of schedule %s: %s", schedule_id, e)
            raise StorageError(f"Failed to read revision of schedule {schedule_id}") from e

    def add(self, dependency: Dependency, expected_revision: Optional[int] = None) -> int:
        with self._session_factory() as session:
            try:
                revision = self._bump_revision(session, dependency.schedule_id, expected_revision)
                session.add(ScheduleDependencyModel.from_domain(dependency))
                session.commit()
                return revision
            except SchedGraphError:
                session.rollback()
                raise
            except IntegrityError as e:
                session.rollback()
                raise DuplicateDependencyError(
                    f"Dependency {dependency.predecessor_id} -> {dependency.successor_id} "
                    f"or id '{dependency.id}' already stored",
                    context={"dependency_id": dependency.id},
                ) from e
            except SQLAlchemyError as e:
                session.rollback()
                logger.error("Error storing dependency %s: %s", dependency.id, e)
                raise StorageError(f"Failed to store dependency {dependency.id}") from e

    def update(self, dependency: Dependency, expected_revision: Optional[int] = None) -> int:
        with self._session_factory() as session:
            try:
                revision = self._bump_revision(session, dependency.schedule_id, expected_revision)
                record = self._get(session, dependency.schedule_id, dependency.id)
                record.type = dependency.type.value
                record.lag = dependency.lag
                session.commit()
                return revision
            except SchedGraphError:
                session.rollback()
                raise
            except SQLAlchemyError as e:
                session.rollback()
                logger.error("Error updating dependency %s: %s", dependency.id, e)
                raise StorageError(f"Failed to update dependency {dependency.id}") from e

    def delete(
        self, schedule_id: str, dependency_id: str, expected_revision: Optional[int] = None
    ) -> int:
        with self._session_factory() as session:
            try:
                revision = self._bump_revision(session, schedule_id, expected_revision)
                session.delete(self._get(session, schedule_id, dependency_id))
                session.commit()
                return revision
            except SchedGraphError:
                session.rollback()
                raise
            except SQLAlchemyError as e:
                session.rollback()
                logger.error("Error deleting dependency %s: %s", dependency_id, e)
                raise StorageError(f"Failed to delete dependency {dependency_id}") from e

    @staticmethod
    def _bump_revision(session: Session, schedule_id: str, expected_revision: Optional[int]) -> int:
        """Advance the schedule revision inside the caller's transaction"""
        statement = sql_update(ScheduleRevisionModel).where(
            ScheduleRevisionModel.schedule_id == schedule_id
        )
        if expected_revision is not None:
            statement = statement.where(ScheduleRevisionModel.revision == expected_revision)
        result = session.execute(
            statement.values(revision=ScheduleRevisionModel.revision + 1).execution_options(
                synchronize_session=False
            )
        )
        if result.rowcount == 1:
            if expected_revision is not None:
                return expected_revision + 1
            return (
                session.query(ScheduleRevisionModel.revision)
                .filter(ScheduleRevisionModel.schedule_id == schedule_id)
                .scalar()
            )

        if expected_revision in (None, 0):
            # First write of the schedule; the primary key settles a race
            session.add(ScheduleRevisionModel(schedule_id=schedule_id, revision=1))
            try:
                session.flush()
            except IntegrityError as e:
                raise ConcurrentModificationError(
                    f"Schedule {schedule_id} was written concurrently",
                    context={"schedule_id": schedule_id},
                ) from e
            return 1

        raise ConcurrentModificationError(
            f"Schedule {schedule_id} is no longer at revision {expected_revision}",
            context={"schedule_id": schedule_id, "expected_revision": expected_revision},
        )

    @staticmethod
    def _get(session: Session, schedule_id: str, dependency_id: str) -> ScheduleDependencyModel:
        record = (
            session.query(ScheduleDependencyModel)
            .filter(
                ScheduleDependencyModel.schedule_id == schedule_id,
                ScheduleDependencyModel.id == dependency_id,
            )
            .first()
        )
        if record is None:
            raise NotFoundError(f"Dependency '{dependency_id}' not found")
        return record
