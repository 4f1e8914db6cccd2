"""
SQLAlchemy models for schedule items and dependency edges
"""

from typing import Any, Dict

from sqlalchemy import Column, Date, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

from schedgraph.core.config_manager import get_config_manager
from schedgraph.core.types import Dependency, DependencyType, ScheduleItem, ScheduleItemKind

Base = declarative_base()

# Table names - support environment variable override
# (SCHEDGRAPH_ITEM_TABLE_NAME / SCHEDGRAPH_DEPENDENCY_TABLE_NAME / SCHEDGRAPH_REVISION_TABLE_NAME)
ITEM_TABLE_NAME = get_config_manager().get_item_table_name()
DEPENDENCY_TABLE_NAME = get_config_manager().get_dependency_table_name()
REVISION_TABLE_NAME = get_config_manager().get_revision_table_name()


class ScheduleItemModel(Base):
    """
    Schedule item reference data

    Written by whoever owns the schedule (CLI, examples, an import job);
    the dependency core only reads it through SqlScheduleItemsProvider.
    """

    __tablename__ = ITEM_TABLE_NAME
    __table_args__ = (UniqueConstraint("schedule_id", "id", name="uq_schedule_item_id"),)

    # Surrogate key keeps insertion order
    pk = Column(Integer, primary_key=True, autoincrement=True)

    schedule_id = Column(String(255), nullable=False, index=True)
    id = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    kind = Column(String(50), nullable=False, default=ScheduleItemKind.task.value)  # Phase, Task, Milestone
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def to_domain(self) -> ScheduleItem:
        return ScheduleItem(
            id=self.id,
            name=self.name,
            kind=ScheduleItemKind.parse(self.kind),
            start=self.start_date,
            end=self.end_date,
        )

    @classmethod
    def from_domain(cls, schedule_id: str, item: ScheduleItem) -> "ScheduleItemModel":
        return cls(
            schedule_id=schedule_id,
            id=item.id,
            name=item.name,
            kind=item.kind.value,
            start_date=item.start,
            end_date=item.end,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = self.to_domain().to_dict()
        data["schedule_id"] = self.schedule_id
        return data

    def __repr__(self):
        return f"<ScheduleItemModel(schedule_id='{self.schedule_id}', id='{self.id}', name='{self.name}')>"


class ScheduleDependencyModel(Base):
    """
    Persisted dependency edge predecessor -> successor

    Unique per (schedule_id, id) and per ordered pair within a schedule.
    """

    __tablename__ = DEPENDENCY_TABLE_NAME
    __table_args__ = (
        UniqueConstraint("schedule_id", "id", name="uq_dependency_id"),
        UniqueConstraint("schedule_id", "predecessor_id", "successor_id", name="uq_dependency_pair"),
    )

    # Surrogate key keeps insertion order
    pk = Column(Integer, primary_key=True, autoincrement=True)

    schedule_id = Column(String(255), nullable=False, index=True)
    id = Column(String(255), nullable=False)
    predecessor_id = Column(String(255), nullable=False, index=True)
    successor_id = Column(String(255), nullable=False, index=True)
    type = Column(String(50), nullable=False, default=DependencyType.finish_to_start.value)
    lag = Column(Integer, nullable=False, default=0)  # Days, >= 0

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def to_domain(self) -> Dependency:
        return Dependency(
            id=self.id,
            schedule_id=self.schedule_id,
            predecessor_id=self.predecessor_id,
            successor_id=self.successor_id,
            type=DependencyType.parse(self.type),
            lag=self.lag,
        )

    @classmethod
    def from_domain(cls, dependency: Dependency) -> "ScheduleDependencyModel":
        return cls(
            schedule_id=dependency.schedule_id,
            id=dependency.id,
            predecessor_id=dependency.predecessor_id,
            successor_id=dependency.successor_id,
            type=dependency.type.value,
            lag=dependency.lag,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary (wire format)"""
        return self.to_domain().to_dict()

    def __repr__(self):
        return (
            f"<ScheduleDependencyModel(id='{self.id}', "
            f"{self.predecessor_id} -> {self.successor_id}, type='{self.type}', lag={self.lag})>"
        )


class ScheduleRevisionModel(Base):
    """
    Write counter of one schedule

    Every dependency write advances it in the same transaction with a
    compare-and-set on the revision the writer loaded, so writers in
    different processes cannot commit against a stale graph.
    """

    __tablename__ = REVISION_TABLE_NAME

    schedule_id = Column(String(255), primary_key=True)
    revision = Column(Integer, nullable=False, default=0)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<ScheduleRevisionModel(schedule_id='{self.schedule_id}', revision={self.revision})>"


__all__ = ["Base", "ScheduleItemModel", "ScheduleDependencyModel", "ScheduleRevisionModel"]
