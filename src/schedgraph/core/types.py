"""
Core domain types for the schedule dependency graph

ScheduleItem is reference data owned by the schedule items provider.
Dependency is a typed, lagged edge predecessor -> successor.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from enum import StrEnum
from typing import Any, Dict, List, Optional

from schedgraph.core.errors import InvalidDependencyTypeError, ValidationError


class ScheduleItemKind(StrEnum):
    """Kind of schedule item"""

    phase = "Phase"
    task = "Task"
    milestone = "Milestone"

    @classmethod
    def parse(cls, value: Any) -> "ScheduleItemKind":
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        raise ValidationError(
            f"Unknown schedule item kind '{value}'",
            context={"allowed": [m.value for m in cls]},
        )


class DependencyType(StrEnum):
    """Temporal relationship between predecessor and successor"""

    finish_to_start = "FinishToStart"  # successor starts after predecessor finishes (+lag)
    start_to_start = "StartToStart"  # successor starts after predecessor starts (+lag)
    finish_to_finish = "FinishToFinish"  # successor finishes after predecessor finishes (+lag)
    start_to_finish = "StartToFinish"  # successor finishes after predecessor starts (+lag)

    @property
    def label(self) -> str:
        """Human label, e.g. 'Finish-to-Start'"""
        return _LABELS[self]

    @property
    def abbreviation(self) -> str:
        return _ABBREVIATIONS[self]

    @classmethod
    def parse(cls, value: Any) -> "DependencyType":
        """
        Parse a dependency type from its wire value, label or abbreviation

        Accepts "FinishToStart", "Finish-to-Start" and "FS" (case-insensitive).

        Raises:
            InvalidDependencyTypeError: If the value matches no type
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().replace("-", "").replace("_", "").replace(" ", "").lower()
            for member in cls:
                if key in (member.value.lower(), member.abbreviation.lower()):
                    return member
        raise InvalidDependencyTypeError(
            f"Unknown dependency type '{value}'",
            what="Invalid dependency type",
            why=f"'{value}' is not a recognised relationship type",
            how_to_fix="Use one of FinishToStart, StartToStart, FinishToFinish, StartToFinish",
            context={"value": value},
        )


_LABELS = {
    DependencyType.finish_to_start: "Finish-to-Start",
    DependencyType.start_to_start: "Start-to-Start",
    DependencyType.finish_to_finish: "Finish-to-Finish",
    DependencyType.start_to_finish: "Start-to-Finish",
}

_ABBREVIATIONS = {
    DependencyType.finish_to_start: "FS",
    DependencyType.start_to_start: "SS",
    DependencyType.finish_to_finish: "FF",
    DependencyType.start_to_finish: "SF",
}


def _parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as e:
        raise ValidationError(f"Invalid date '{value}'", context={"value": value}) from e


@dataclass(frozen=True)
class ScheduleItem:
    """A phase, task or milestone of a schedule (read-only reference data)"""

    id: str
    name: str
    kind: ScheduleItemKind = ScheduleItemKind.task
    start: Optional[date] = None
    end: Optional[date] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "kind": self.kind.value,
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScheduleItem":
        """Build an item from a dict; accepts startDate/endDate/type aliases"""
        start = data.get("start", data.get("startDate"))
        end = data.get("end", data.get("endDate"))
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or data["id"]),
            kind=ScheduleItemKind.parse(data.get("kind", data.get("type", "Task"))),
            start=_parse_date(start) if start else None,
            end=_parse_date(end) if end else None,
        )


@dataclass(frozen=True)
class Dependency:
    """
    Directed dependency edge predecessor -> successor

    Endpoints are immutable; type and lag are changed with with_changes(),
    which returns a new instance.
    """

    id: str
    schedule_id: str
    predecessor_id: str
    successor_id: str
    type: DependencyType = DependencyType.finish_to_start
    lag: int = 0

    def with_changes(
        self, type: Optional[DependencyType] = None, lag: Optional[int] = None
    ) -> "Dependency":
        changes: Dict[str, Any] = {}
        if type is not None:
            changes["type"] = type
        if lag is not None:
            changes["lag"] = lag
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire format"""
        return {
            "id": self.id,
            "schedule_id": self.schedule_id,
            "predecessorId": self.predecessor_id,
            "successorId": self.successor_id,
            "type": self.type.value,
            "lag": self.lag,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], schedule_id: Optional[str] = None) -> "Dependency":
        """Parse the wire format (camelCase or snake_case keys)"""
        return cls(
            id=str(data["id"]),
            schedule_id=str(schedule_id or data["schedule_id"]),
            predecessor_id=str(data.get("predecessorId", data.get("predecessor_id"))),
            successor_id=str(data.get("successorId", data.get("successor_id"))),
            type=DependencyType.parse(data.get("type", DependencyType.finish_to_start)),
            lag=data.get("lag", 0),
        )


@dataclass(frozen=True)
class ItemDependencies:
    """Edges touching one item: incoming (predecessors) and outgoing (successors)"""

    item_id: str
    predecessors: List[Dependency] = field(default_factory=list)
    successors: List[Dependency] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_id": self.item_id,
            "predecessors": [d.to_dict() for d in self.predecessors],
            "successors": [d.to_dict() for d in self.successors],
        }


__all__ = [
    "ScheduleItemKind",
    "DependencyType",
    "ScheduleItem",
    "Dependency",
    "ItemDependencies",
]
