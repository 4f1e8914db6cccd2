"""
Cycle detection for candidate dependency edges

Adding predecessor -> successor closes a cycle iff successor can already
reach predecessor through existing edges. Both functions answer that with a
breadth-first search from successor, so the cost is O(V + E) per check.

They take the edge set as an explicit argument and keep no state, which
makes them safe to call before every proposed edge and easy to test alone.
"""

from collections import deque
from typing import Dict, Iterable, List, Optional

from schedgraph.core.types import Dependency


def _adjacency(edges: Iterable[Dependency]) -> Dict[str, List[str]]:
    graph: Dict[str, List[str]] = {}
    for edge in edges:
        graph.setdefault(edge.predecessor_id, []).append(edge.successor_id)
    return graph


def would_create_cycle(
    predecessor_id: str, successor_id: str, edges: Iterable[Dependency]
) -> bool:
    """
    Check whether adding predecessor_id -> successor_id would create a cycle

    Args:
        predecessor_id: Candidate edge source
        successor_id: Candidate edge target
        edges: Current edge set

    Returns:
        True if the candidate edge would close a cycle (including the trivial
        self-cycle), False otherwise
    """
    if predecessor_id == successor_id:
        return True

    graph = _adjacency(edges)
    visited = set()
    queue = deque([successor_id])
    while queue:
        current = queue.popleft()
        if current in visited:
            continue
        visited.add(current)
        for nxt in graph.get(current, ()):
            if nxt == predecessor_id:
                return True
            if nxt not in visited:
                queue.append(nxt)
    return False


def find_cycle_path(
    predecessor_id: str, successor_id: str, edges: Iterable[Dependency]
) -> Optional[List[str]]:
    """
    Return the cycle the candidate edge would close, or None

    The path starts and ends at predecessor_id:
    [predecessor_id, successor_id, ..., predecessor_id]. It follows the
    shortest existing route from successor_id back to predecessor_id.
    """
    if predecessor_id == successor_id:
        return [predecessor_id, predecessor_id]

    graph = _adjacency(edges)
    parents: Dict[str, Optional[str]] = {successor_id: None}
    queue = deque([successor_id])
    while queue:
        current = queue.popleft()
        for nxt in graph.get(current, ()):
            if nxt == predecessor_id:
                route = [current]
                while parents[route[-1]] is not None:
                    route.append(parents[route[-1]])  # type: ignore[arg-type]
                route.reverse()
                return [predecessor_id, *route, predecessor_id]
            if nxt not in parents:
                parents[nxt] = current
                queue.append(nxt)
    return None


__all__ = ["would_create_cycle", "find_cycle_path"]
