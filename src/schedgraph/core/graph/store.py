"""
In-memory graph of schedule items and dependency edges for one schedule

GraphStore is the single source of truth that the validator, the repository
and every view projection read from. Edges are kept in insertion order and
indexed by predecessor and by successor so that outgoing()/incoming() do not
scan the full edge set.

Only DependencyRepository calls the mutators; everything else is read-only.
"""

from typing import Dict, Iterable, List, Optional

from schedgraph.core.types import Dependency, ScheduleItem


class GraphStore:
    """
    Items and edges of a single schedule

    Example:
        graph = GraphStore("sched-1", items)
        graph.add_edge(dependency)
        graph.outgoing("item1-1")  # edges whose predecessor is item1-1
    """

    def __init__(self, schedule_id: str, items: Optional[Iterable[ScheduleItem]] = None):
        self.schedule_id = schedule_id
        self._items: Dict[str, ScheduleItem] = {}
        self._edges: Dict[str, Dependency] = {}
        # node id -> {edge id: None}; dicts keep insertion order
        self._by_predecessor: Dict[str, Dict[str, None]] = {}
        self._by_successor: Dict[str, Dict[str, None]] = {}
        # Store revision the edges were loaded at; set by the repository
        self.revision = 0
        if items is not None:
            self.replace_items(items)

    # === Read queries ===

    def has_item(self, item_id: str) -> bool:
        return item_id in self._items

    def get_item(self, item_id: str) -> Optional[ScheduleItem]:
        return self._items.get(item_id)

    def list_items(self) -> List[ScheduleItem]:
        return list(self._items.values())

    def get_edge(self, dependency_id: str) -> Optional[Dependency]:
        return self._edges.get(dependency_id)

    def has_edge(self, dependency_id: str) -> bool:
        return dependency_id in self._edges

    def list_edges(self) -> List[Dependency]:
        return list(self._edges.values())

    def outgoing(self, node_id: str) -> List[Dependency]:
        """Edges whose predecessor is node_id"""
        return [self._edges[e] for e in self._by_predecessor.get(node_id, ())]

    def incoming(self, node_id: str) -> List[Dependency]:
        """Edges whose successor is node_id"""
        return [self._edges[e] for e in self._by_successor.get(node_id, ())]

    def edge_between(self, predecessor_id: str, successor_id: str) -> Optional[Dependency]:
        """First edge predecessor_id -> successor_id, or None"""
        for edge_id in self._by_predecessor.get(predecessor_id, ()):
            edge = self._edges[edge_id]
            if edge.successor_id == successor_id:
                return edge
        return None

    def __len__(self) -> int:
        return len(self._edges)

    def __contains__(self, dependency_id: object) -> bool:
        return dependency_id in self._edges

    # === Mutators (repository only) ===

    def replace_items(self, items: Iterable[ScheduleItem]) -> None:
        """Refresh the item reference cache from the provider"""
        self._items = {item.id: item for item in items}

    def add_edge(self, dependency: Dependency) -> None:
        if dependency.id in self._edges:
            raise KeyError(f"Dependency {dependency.id} already in graph")
        self._edges[dependency.id] = dependency
        self._by_predecessor.setdefault(dependency.predecessor_id, {})[dependency.id] = None
        self._by_successor.setdefault(dependency.successor_id, {})[dependency.id] = None

    def replace_edge(self, dependency: Dependency) -> None:
        """Swap an edge for a version with the same id and endpoints"""
        current = self._edges[dependency.id]
        if (current.predecessor_id, current.successor_id) != (
            dependency.predecessor_id,
            dependency.successor_id,
        ):
            raise ValueError("Dependency endpoints are immutable")
        self._edges[dependency.id] = dependency

    def remove_edge(self, dependency_id: str) -> Dependency:
        dependency = self._edges.pop(dependency_id)
        self._unindex(self._by_predecessor, dependency.predecessor_id, dependency_id)
        self._unindex(self._by_successor, dependency.successor_id, dependency_id)
        return dependency

    @staticmethod
    def _unindex(index: Dict[str, Dict[str, None]], node_id: str, dependency_id: str) -> None:
        bucket = index.get(node_id)
        if bucket is None:
            return
        bucket.pop(dependency_id, None)
        if not bucket:
            del index[node_id]

    def __repr__(self) -> str:
        return (
            f"<GraphStore(schedule_id='{self.schedule_id}', items={len(self._items)}, "
            f"edges={len(self._edges)}, revision={self.revision})>"
        )
