"""
Dependency validation for create/update requests

This module composes the cycle detector with the structural rules of the
dependency graph (known endpoints, no self-reference, lag range, one edge
per ordered pair). Checks run cheapest first; the reachability search runs
only once every structural check has passed.

All validation logic for dependency mutations is centralized here.
"""

from typing import Any, Optional

from schedgraph.core.dependency.cycle_detector import find_cycle_path
from schedgraph.core.errors import (
    CyclicDependencyError,
    DuplicateDependencyError,
    InvalidLagError,
    MissingEndpointError,
    NotFoundError,
    SelfDependencyError,
)
from schedgraph.core.graph.store import GraphStore
from schedgraph.core.types import Dependency, DependencyType
from schedgraph.logger import get_logger

logger = get_logger(__name__)


def validate_lag(lag: Any, max_lag_days: Optional[int] = None) -> int:
    """
    Validate a lag value in days

    Args:
        lag: Candidate lag
        max_lag_days: Optional inclusive upper bound

    Returns:
        The lag as int

    Raises:
        InvalidLagError: If lag is not a non-negative integer or exceeds max_lag_days
    """
    if isinstance(lag, bool) or not isinstance(lag, int):
        raise InvalidLagError(
            f"Lag must be an integer number of days, got {lag!r}",
            context={"lag": lag},
        )
    if lag < 0:
        raise InvalidLagError(
            f"Lag must be non-negative, got {lag}",
            what="Negative lag",
            why="Lead time (negative lag) is not supported",
            how_to_fix="Use a lag of 0 or more days",
            context={"lag": lag},
        )
    if max_lag_days is not None and lag > max_lag_days:
        raise InvalidLagError(
            f"Lag {lag} exceeds maximum of {max_lag_days} days",
            context={"lag": lag, "max_lag_days": max_lag_days},
        )
    return lag


class DependencyValidator:
    """
    Accepts or rejects proposed mutations against the current graph

    The validator only reads the graph; committing is the repository's job.
    """

    def __init__(self, graph: GraphStore, max_lag_days: Optional[int] = None):
        self.graph = graph
        self.max_lag_days = max_lag_days

    def validate_create(
        self,
        predecessor_id: str,
        successor_id: str,
        lag: Any = 0,
        dependency_id: Optional[str] = None,
    ) -> None:
        """
        Validate a new edge predecessor_id -> successor_id

        Raises:
            SelfDependencyError: If both endpoints are the same item
            MissingEndpointError: If either endpoint is not a known item
            InvalidLagError: If lag is invalid
            DuplicateDependencyError: If the id or the ordered pair is taken
            CyclicDependencyError: If the edge would close a cycle
        """
        # Self-reference is rejected whether or not the item exists
        if predecessor_id == successor_id:
            raise SelfDependencyError(
                f"Item '{predecessor_id}' cannot depend on itself",
                context={"item_id": predecessor_id},
            )

        missing = [i for i in (predecessor_id, successor_id) if not self.graph.has_item(i)]
        if missing:
            raise MissingEndpointError(
                f"Schedule item(s) not found: {', '.join(repr(m) for m in missing)}",
                context={"schedule_id": self.graph.schedule_id, "missing": missing},
            )

        validate_lag(lag, self.max_lag_days)

        if dependency_id is not None and self.graph.has_edge(dependency_id):
            raise DuplicateDependencyError(
                f"Dependency id '{dependency_id}' already exists",
                context={"dependency_id": dependency_id},
            )

        existing = self.graph.edge_between(predecessor_id, successor_id)
        if existing is not None:
            raise DuplicateDependencyError(
                f"Dependency {predecessor_id} -> {successor_id} already exists ({existing.id})",
                context={"dependency_id": existing.id},
            )

        cycle = find_cycle_path(predecessor_id, successor_id, self.graph.list_edges())
        if cycle:
            names = [self._name(item_id) for item_id in cycle]
            logger.info(
                "Rejected dependency %s -> %s in schedule %s: cycle %s",
                predecessor_id,
                successor_id,
                self.graph.schedule_id,
                " -> ".join(cycle),
            )
            raise CyclicDependencyError(
                f"Circular dependency detected: {' -> '.join(names)}",
                cycle=cycle,
                context={"predecessor_id": predecessor_id, "successor_id": successor_id},
            )

    def validate_update(
        self,
        dependency_id: str,
        new_type: Any = None,
        new_lag: Any = None,
    ) -> Dependency:
        """
        Validate an in-place change of type and/or lag

        Endpoints cannot change on update, so no cycle check is needed.

        Returns:
            The edge with the changes applied (not yet committed)

        Raises:
            NotFoundError: If the edge does not exist
            InvalidDependencyTypeError: If new_type is not a known type
            InvalidLagError: If new_lag is invalid
        """
        current = self.graph.get_edge(dependency_id)
        if current is None:
            raise NotFoundError(
                f"Dependency '{dependency_id}' not found",
                context={"schedule_id": self.graph.schedule_id, "dependency_id": dependency_id},
            )
        parsed_type = DependencyType.parse(new_type) if new_type is not None else None
        if new_lag is not None:
            validate_lag(new_lag, self.max_lag_days)
        return current.with_changes(type=parsed_type, lag=new_lag)

    def _name(self, item_id: str) -> str:
        item = self.graph.get_item(item_id)
        return item.name if item else item_id


__all__ = ["DependencyValidator", "validate_lag"]
