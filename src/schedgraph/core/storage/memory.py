"""
In-memory implementations of the storage interfaces

Used by tests, the examples and any caller that keeps schedules in process.
A single InMemoryDependencyStore may be shared by several repositories.
"""

import threading
from typing import Dict, Iterable, List, Optional

from schedgraph.core.errors import (
    ConcurrentModificationError,
    DuplicateDependencyError,
    NotFoundError,
)
from schedgraph.core.storage.base import DependencyStore, ScheduleItemsProvider
from schedgraph.core.types import Dependency, ScheduleItem


class InMemoryScheduleItemsProvider(ScheduleItemsProvider):
    """Items held in a dict keyed by schedule id"""

    def __init__(self, items: Optional[Dict[str, Iterable[ScheduleItem]]] = None):
        self._items: Dict[str, Dict[str, ScheduleItem]] = {}
        for schedule_id, schedule_items in (items or {}).items():
            self.set_items(schedule_id, schedule_items)

    def set_items(self, schedule_id: str, items: Iterable[ScheduleItem]) -> None:
        self._items[schedule_id] = {item.id: item for item in items}

    def add_item(self, schedule_id: str, item: ScheduleItem) -> None:
        self._items.setdefault(schedule_id, {})[item.id] = item

    def remove_item(self, schedule_id: str, item_id: str) -> None:
        self._items.get(schedule_id, {}).pop(item_id, None)

    def list_items(self, schedule_id: str) -> List[ScheduleItem]:
        return list(self._items.get(schedule_id, {}).values())


class InMemoryDependencyStore(DependencyStore):
    """Edges held in insertion-ordered dicts keyed by schedule id"""

    def __init__(self) -> None:
        self._edges: Dict[str, Dict[str, Dependency]] = {}
        self._revisions: Dict[str, int] = {}
        self._lock = threading.Lock()

    def load(self, schedule_id: str) -> List[Dependency]:
        with self._lock:
            return list(self._edges.get(schedule_id, {}).values())

    def revision(self, schedule_id: str) -> int:
        with self._lock:
            return self._revisions.get(schedule_id, 0)

    def add(self, dependency: Dependency, expected_revision: Optional[int] = None) -> int:
        with self._lock:
            self._check_revision(dependency.schedule_id, expected_revision)
            edges = self._edges.setdefault(dependency.schedule_id, {})
            if dependency.id in edges:
                raise DuplicateDependencyError(f"Dependency '{dependency.id}' already stored")
            if any(
                (e.predecessor_id, e.successor_id) == (dependency.predecessor_id, dependency.successor_id)
                for e in edges.values()
            ):
                raise DuplicateDependencyError(
                    f"Dependency {dependency.predecessor_id} -> {dependency.successor_id} already stored"
                )
            edges[dependency.id] = dependency
            return self._advance(dependency.schedule_id)

    def update(self, dependency: Dependency, expected_revision: Optional[int] = None) -> int:
        with self._lock:
            self._check_revision(dependency.schedule_id, expected_revision)
            edges = self._edges.get(dependency.schedule_id, {})
            if dependency.id not in edges:
                raise NotFoundError(f"Dependency '{dependency.id}' not found")
            edges[dependency.id] = dependency
            return self._advance(dependency.schedule_id)

    def delete(
        self, schedule_id: str, dependency_id: str, expected_revision: Optional[int] = None
    ) -> int:
        with self._lock:
            self._check_revision(schedule_id, expected_revision)
            edges = self._edges.get(schedule_id, {})
            if dependency_id not in edges:
                raise NotFoundError(f"Dependency '{dependency_id}' not found")
            del edges[dependency_id]
            return self._advance(schedule_id)

    def _check_revision(self, schedule_id: str, expected_revision: Optional[int]) -> None:
        current = self._revisions.get(schedule_id, 0)
        if expected_revision is not None and expected_revision != current:
            raise ConcurrentModificationError(
                f"Schedule {schedule_id} is at revision {current}, expected {expected_revision}",
                context={"schedule_id": schedule_id, "revision": current},
            )

    def _advance(self, schedule_id: str) -> int:
        self._revisions[schedule_id] = self._revisions.get(schedule_id, 0) + 1
        return self._revisions[schedule_id]


__all__ = ["InMemoryScheduleItemsProvider", "InMemoryDependencyStore"]
