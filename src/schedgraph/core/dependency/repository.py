"""
Dependency repository: the mutation surface of the dependency graph

This module provides a DependencyRepository class that owns one GraphStore
per schedule, validates every proposed mutation against it, persists the
change through a DependencyStore and only then commits it to the graph.
Callers (CLI, HTTP routes, UI adapters) should use the repository instead of
touching GraphStore or the store directly.
"""

import threading
import uuid
from typing import Any, Callable, Dict, List, Optional, TypeVar

from schedgraph.core.config_manager import get_config_manager
from schedgraph.core.dependency.cycle_detector import would_create_cycle
from schedgraph.core.dependency.validator import DependencyValidator
from schedgraph.core.errors import BusinessError, ConcurrentModificationError, NotFoundError
from schedgraph.core.graph.store import GraphStore
from schedgraph.core.storage.base import DependencyStore, ScheduleItemsProvider
from schedgraph.core.storage.memory import InMemoryDependencyStore
from schedgraph.core.types import Dependency, DependencyType, ItemDependencies
from schedgraph.logger import get_logger

logger = get_logger(__name__)

_UNSET: Any = object()

T = TypeVar("T")

# Reload-and-revalidate attempts after another writer got in first
MAX_CONFLICT_RETRIES = 3


class DependencyRepository:
    """
    Dependency repository for schedule graphs

    Provides methods for:
    - Creating, updating, and deleting dependencies
    - Listing a schedule's dependencies and one item's predecessors/successors
    - Pre-submit cycle checks (would_create_cycle)
    - Read-only graph snapshots for view projections

    Each operation runs under a per-schedule lock, so at most one mutation
    per schedule is in flight in this process. The cached graph is checked
    against the store revision before every operation and reloaded when
    another repository (or process) wrote in between. Writes carry the
    revision they were validated at; when the store has moved on, the
    repository reloads, revalidates and tries again. A failed operation
    leaves both the graph and the store unchanged.

    Example:
        repo = DependencyRepository(items_provider)
        dep = repo.create("sched-1", "item1-1", "item1-2", type="FS", lag=0)
        repo.update("sched-1", dep.id, lag=3)
        repo.delete("sched-1", dep.id)
    """

    def __init__(
        self,
        items_provider: ScheduleItemsProvider,
        store: Optional[DependencyStore] = None,
        max_lag_days: Optional[int] = _UNSET,
    ):
        """
        Initialize DependencyRepository

        Args:
            items_provider: Source of schedule items (validates endpoints, resolves names)
            store: Persistence for edges (default: InMemoryDependencyStore)
            max_lag_days: Inclusive upper bound for lag. Defaults to the configured
                value (SCHEDGRAPH_MAX_LAG_DAYS); None means unbounded.
        """
        self.items_provider = items_provider
        self.store = store if store is not None else InMemoryDependencyStore()
        self.max_lag_days = (
            get_config_manager().get_max_lag_days() if max_lag_days is _UNSET else max_lag_days
        )
        self._graphs: Dict[str, GraphStore] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    # === Mutations ===

    def create(
        self,
        schedule_id: str,
        predecessor_id: str,
        successor_id: str,
        type: Any = DependencyType.finish_to_start,
        lag: Any = 0,
        dependency_id: Optional[str] = None,
    ) -> Dependency:
        """
        Create a dependency predecessor_id -> successor_id

        Args:
            schedule_id: Schedule the edge belongs to
            predecessor_id: Item that constrains the successor
            successor_id: Item constrained by the predecessor
            type: DependencyType or its wire value/label/abbreviation
            lag: Non-negative integer days
            dependency_id: Explicit id (default: new uuid4)

        Returns:
            The committed Dependency

        Raises:
            SelfDependencyError, MissingEndpointError, InvalidLagError,
            InvalidDependencyTypeError, DuplicateDependencyError,
            CyclicDependencyError: Validation failures
            ConcurrentModificationError: The schedule kept changing underneath
            StorageError: Persisting failed
        """
        parsed_type = DependencyType.parse(type)
        new_id = dependency_id or str(uuid.uuid4())

        def attempt(graph: GraphStore) -> Dependency:
            graph.replace_items(self.items_provider.list_items(schedule_id))
            try:
                self._validator(graph).validate_create(
                    predecessor_id, successor_id, lag=lag, dependency_id=dependency_id
                )
            except BusinessError as e:
                logger.info(f"Rejected dependency {predecessor_id} -> {successor_id}: {e.kind}")
                raise

            dependency = Dependency(
                id=new_id,
                schedule_id=schedule_id,
                predecessor_id=predecessor_id,
                successor_id=successor_id,
                type=parsed_type,
                lag=lag,
            )
            revision = self.store.add(dependency, expected_revision=graph.revision)
            graph.add_edge(dependency)
            graph.revision = revision
            return dependency

        dependency = self._write(schedule_id, attempt)
        logger.info(
            f"Created dependency {dependency.id} in schedule {schedule_id}: "
            f"{predecessor_id} -> {successor_id} ({parsed_type.abbreviation}, +{lag}d)"
        )
        return dependency

    def update(
        self,
        schedule_id: str,
        dependency_id: str,
        type: Any = None,
        lag: Any = None,
    ) -> Dependency:
        """
        Change type and/or lag of an existing dependency

        Endpoints are immutable; to move an edge, delete it and create a new one.

        Raises:
            NotFoundError: Unknown dependency id
            InvalidDependencyTypeError, InvalidLagError: Invalid new values
            StorageError: Persisting failed
        """

        def attempt(graph: GraphStore) -> Dependency:
            updated = self._validator(graph).validate_update(dependency_id, type, lag)
            revision = self.store.update(updated, expected_revision=graph.revision)
            graph.replace_edge(updated)
            graph.revision = revision
            return updated

        updated = self._write(schedule_id, attempt)
        logger.info(
            f"Updated dependency {dependency_id} in schedule {schedule_id}: "
            f"type={updated.type.value}, lag={updated.lag}"
        )
        return updated

    def delete(self, schedule_id: str, dependency_id: str) -> None:
        """
        Remove a dependency

        Removing an edge cannot create a cycle, so no cycle check runs.

        Raises:
            NotFoundError: Unknown dependency id
            StorageError: Persisting failed
        """

        def attempt(graph: GraphStore) -> None:
            if not graph.has_edge(dependency_id):
                raise NotFoundError(
                    f"Dependency '{dependency_id}' not found",
                    context={"schedule_id": schedule_id, "dependency_id": dependency_id},
                )
            revision = self.store.delete(schedule_id, dependency_id, expected_revision=graph.revision)
            graph.remove_edge(dependency_id)
            graph.revision = revision

        self._write(schedule_id, attempt)
        logger.info(f"Deleted dependency {dependency_id} from schedule {schedule_id}")

    # === Queries ===

    def list(self, schedule_id: str) -> List[Dependency]:
        """All dependencies of the schedule in insertion order"""
        with self._lock(schedule_id):
            return self._load(schedule_id).list_edges()

    def get(self, schedule_id: str, dependency_id: str) -> Dependency:
        with self._lock(schedule_id):
            dependency = self._load(schedule_id).get_edge(dependency_id)
        if dependency is None:
            raise NotFoundError(
                f"Dependency '{dependency_id}' not found",
                context={"schedule_id": schedule_id, "dependency_id": dependency_id},
            )
        return dependency

    def would_create_cycle(self, schedule_id: str, predecessor_id: str, successor_id: str) -> bool:
        """Pre-submit check: would predecessor_id -> successor_id close a cycle?"""
        with self._lock(schedule_id):
            edges = self._load(schedule_id).list_edges()
        return would_create_cycle(predecessor_id, successor_id, edges)

    def item_dependencies(self, schedule_id: str, item_id: str) -> ItemDependencies:
        """Incoming (predecessors) and outgoing (successors) edges of one item"""
        with self._lock(schedule_id):
            graph = self._load(schedule_id)
            return ItemDependencies(
                item_id=item_id,
                predecessors=graph.incoming(item_id),
                successors=graph.outgoing(item_id),
            )

    def graph(self, schedule_id: str) -> GraphStore:
        """
        Snapshot of the schedule graph with freshly loaded items

        The snapshot is detached from the repository; later mutations do
        not show up in it.
        """
        with self._lock(schedule_id):
            graph = self._load(schedule_id)
            graph.replace_items(self.items_provider.list_items(schedule_id))
            snapshot = GraphStore(schedule_id, graph.list_items())
            for edge in graph.list_edges():
                snapshot.add_edge(edge)
            snapshot.revision = graph.revision
            return snapshot

    def reload(self, schedule_id: str) -> None:
        """Drop the cached graph so the next call reloads it from the store"""
        with self._lock(schedule_id):
            self._graphs.pop(schedule_id, None)

    # === Internals ===

    def _lock(self, schedule_id: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(schedule_id)
            if lock is None:
                lock = self._locks[schedule_id] = threading.RLock()
            return lock

    def _load(self, schedule_id: str) -> GraphStore:
        """Cached graph of the schedule, reloaded when the store revision moved"""
        # Revision before edges: a write landing in between fails the next CAS
        revision = self.store.revision(schedule_id)
        graph = self._graphs.get(schedule_id)
        if graph is None or graph.revision != revision:
            graph = GraphStore(schedule_id, self.items_provider.list_items(schedule_id))
            for dependency in self.store.load(schedule_id):
                graph.add_edge(dependency)
            graph.revision = revision
            self._graphs[schedule_id] = graph
            logger.debug(
                f"Loaded schedule {schedule_id} at revision {revision}: {len(graph)} dependencies"
            )
        return graph

    def _write(self, schedule_id: str, attempt: Callable[[GraphStore], T]) -> T:
        """
        Run a validate-and-persist step against the current graph

        On ConcurrentModificationError the graph is reloaded from the store
        and the step runs again, so validation always sees the edges the
        write commits against.
        """
        with self._lock(schedule_id):
            conflicts = 0
            while True:
                graph = self._load(schedule_id)
                try:
                    return attempt(graph)
                except ConcurrentModificationError:
                    self._graphs.pop(schedule_id, None)
                    conflicts += 1
                    if conflicts > MAX_CONFLICT_RETRIES:
                        logger.warning(
                            f"Giving up on schedule {schedule_id} after {conflicts} conflicting writes"
                        )
                        raise
                    logger.info(f"Schedule {schedule_id} changed concurrently, revalidating")

    def _validator(self, graph: GraphStore) -> DependencyValidator:
        return DependencyValidator(graph, max_lag_days=self.max_lag_days)


__all__ = ["DependencyRepository", "MAX_CONFLICT_RETRIES"]
