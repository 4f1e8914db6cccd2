"""
Read-only projections of a schedule graph

Each function takes a GraphStore and returns plain dataclasses ready for a
renderer (CLI tables, JSON responses, a UI). Nothing here keeps state or
mutates the graph; call the function again after every change.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from schedgraph.core.graph.store import GraphStore
from schedgraph.core.types import Dependency, ScheduleItem

UNKNOWN_ITEM_NAME = "Unknown Item"


def _name(graph: GraphStore, item_id: str) -> str:
    item = graph.get_item(item_id)
    return item.name if item else UNKNOWN_ITEM_NAME


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def lag_label(lag: int, unit: str = "days") -> str:
    """'+3 days' for positive lag, '' otherwise"""
    return f"+{lag} {unit}" if lag > 0 else ""


@dataclass(frozen=True)
class DependencyRow:
    """One line of the list view"""

    dependency: Dependency
    predecessor_name: str
    successor_name: str

    def to_dict(self) -> Dict[str, Any]:
        data = self.dependency.to_dict()
        data["predecessorName"] = self.predecessor_name
        data["successorName"] = self.successor_name
        return data


def list_view(graph: GraphStore) -> List[DependencyRow]:
    """Edges in insertion order with resolved item names"""
    return [
        DependencyRow(
            dependency=edge,
            predecessor_name=_name(graph, edge.predecessor_id),
            successor_name=_name(graph, edge.successor_id),
        )
        for edge in graph.list_edges()
    ]


@dataclass(frozen=True)
class MatrixCell:
    """
    Cell (predecessor, successor) of the matrix view

    is_self marks the diagonal. For other cells dependency is the edge
    between the pair, or None when the cell offers creation.
    """

    predecessor_id: str
    successor_id: str
    dependency: Optional[Dependency] = None

    @property
    def is_self(self) -> bool:
        return self.predecessor_id == self.successor_id

    @property
    def can_create(self) -> bool:
        return not self.is_self and self.dependency is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "predecessorId": self.predecessor_id,
            "successorId": self.successor_id,
            "self": self.is_self,
            "dependency": self.dependency.to_dict() if self.dependency else None,
        }


@dataclass(frozen=True)
class MatrixRow:
    predecessor: ScheduleItem
    cells: List[MatrixCell] = field(default_factory=list)


@dataclass(frozen=True)
class DependencyMatrix:
    items: List[ScheduleItem]
    rows: List[MatrixRow]

    def cell(self, predecessor_id: str, successor_id: str) -> MatrixCell:
        for row in self.rows:
            if row.predecessor.id != predecessor_id:
                continue
            for cell in row.cells:
                if cell.successor_id == successor_id:
                    return cell
        raise KeyError((predecessor_id, successor_id))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "rows": [
                {
                    "predecessorId": row.predecessor.id,
                    "cells": [cell.to_dict() for cell in row.cells],
                }
                for row in self.rows
            ],
        }


def matrix_view(graph: GraphStore) -> DependencyMatrix:
    """Square predecessor x successor matrix over the schedule's items"""
    items = graph.list_items()
    rows = []
    for predecessor in items:
        cells = []
        for successor in items:
            dependency = None
            if predecessor.id != successor.id:
                dependency = graph.edge_between(predecessor.id, successor.id)
            cells.append(MatrixCell(predecessor.id, successor.id, dependency))
        rows.append(MatrixRow(predecessor=predecessor, cells=cells))
    return DependencyMatrix(items=items, rows=rows)


@dataclass(frozen=True)
class TimelineCard:
    """Predecessor -> successor card with type badge and lag"""

    dependency: Dependency
    predecessor_name: str
    predecessor_start: Optional[date]
    predecessor_end: Optional[date]
    successor_name: str
    successor_start: Optional[date]
    successor_end: Optional[date]

    @property
    def badge(self) -> str:
        return self.dependency.type.label

    @property
    def lag_label(self) -> str:
        return lag_label(self.dependency.lag)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.dependency.id,
            "badge": self.badge,
            "lag": self.dependency.lag,
            "lagLabel": self.lag_label,
            "predecessor": {
                "id": self.dependency.predecessor_id,
                "name": self.predecessor_name,
                "start": _iso(self.predecessor_start),
                "end": _iso(self.predecessor_end),
            },
            "successor": {
                "id": self.dependency.successor_id,
                "name": self.successor_name,
                "start": _iso(self.successor_start),
                "end": _iso(self.successor_end),
            },
        }


def timeline_view(graph: GraphStore) -> List[TimelineCard]:
    """One card per edge in insertion order"""
    cards = []
    for edge in graph.list_edges():
        predecessor = graph.get_item(edge.predecessor_id)
        successor = graph.get_item(edge.successor_id)
        cards.append(
            TimelineCard(
                dependency=edge,
                predecessor_name=predecessor.name if predecessor else UNKNOWN_ITEM_NAME,
                predecessor_start=predecessor.start if predecessor else None,
                predecessor_end=predecessor.end if predecessor else None,
                successor_name=successor.name if successor else UNKNOWN_ITEM_NAME,
                successor_start=successor.start if successor else None,
                successor_end=successor.end if successor else None,
            )
        )
    return cards


__all__ = [
    "UNKNOWN_ITEM_NAME",
    "lag_label",
    "DependencyRow",
    "list_view",
    "MatrixCell",
    "MatrixRow",
    "DependencyMatrix",
    "matrix_view",
    "TimelineCard",
    "timeline_view",
]
