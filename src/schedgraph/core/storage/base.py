"""
Storage interfaces consumed by the dependency repository

ScheduleItemsProvider supplies read-only schedule items; DependencyStore
persists dependency edges. Both are implemented in memory
(schedgraph.core.storage.memory) and on SQLAlchemy
(schedgraph.core.storage.sqlalchemy).
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from schedgraph.core.types import Dependency, ScheduleItem


class ScheduleItemsProvider(ABC):
    """Source of schedule items; the dependency core never mutates them"""

    @abstractmethod
    def list_items(self, schedule_id: str) -> List[ScheduleItem]:
        """Return every item of the schedule"""


class DependencyStore(ABC):
    """
    Persistence for dependency edges

    Every schedule carries a revision that each successful write advances
    by one. Writers pass the revision their graph was loaded at as
    expected_revision; a mismatch means another writer got there first and
    raises ConcurrentModificationError without changing anything.

    Implementations raise StorageError on unexpected failures and
    DuplicateDependencyError when a uniqueness constraint is hit.
    """

    @abstractmethod
    def load(self, schedule_id: str) -> List[Dependency]:
        """Return the schedule's edges in insertion order"""

    @abstractmethod
    def revision(self, schedule_id: str) -> int:
        """Current revision of the schedule (0 before the first write)"""

    @abstractmethod
    def add(self, dependency: Dependency, expected_revision: Optional[int] = None) -> int:
        """Persist a new edge and return the new revision"""

    @abstractmethod
    def update(self, dependency: Dependency, expected_revision: Optional[int] = None) -> int:
        """Persist changed type/lag of an existing edge and return the new revision"""

    @abstractmethod
    def delete(
        self, schedule_id: str, dependency_id: str, expected_revision: Optional[int] = None
    ) -> int:
        """Remove an edge and return the new revision"""


__all__ = ["ScheduleItemsProvider", "DependencyStore"]
