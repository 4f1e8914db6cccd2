"""
Tests for core domain types
"""

from datetime import date

import pytest

from schedgraph.core.errors import InvalidDependencyTypeError, ValidationError
from schedgraph.core.types import (
    Dependency,
    DependencyType,
    ItemDependencies,
    ScheduleItem,
    ScheduleItemKind,
)


class TestDependencyType:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("FinishToStart", DependencyType.finish_to_start),
            ("Finish-to-Start", DependencyType.finish_to_start),
            ("finish_to_start", DependencyType.finish_to_start),
            ("FS", DependencyType.finish_to_start),
            ("ss", DependencyType.start_to_start),
            ("Finish-to-Finish", DependencyType.finish_to_finish),
            (" SF ", DependencyType.start_to_finish),
            (DependencyType.start_to_start, DependencyType.start_to_start),
        ],
    )
    def test_parse(self, value, expected):
        assert DependencyType.parse(value) is expected

    @pytest.mark.parametrize("value", ["", "XX", "FinishToMiddle", None, 3])
    def test_parse_invalid(self, value):
        with pytest.raises(InvalidDependencyTypeError) as exc_info:
            DependencyType.parse(value)
        assert exc_info.value.kind == "InvalidDependencyType"

    def test_label_and_abbreviation(self):
        assert DependencyType.start_to_finish.label == "Start-to-Finish"
        assert DependencyType.start_to_finish.abbreviation == "SF"
        assert [t.abbreviation for t in DependencyType] == ["FS", "SS", "FF", "SF"]

    def test_wire_value(self):
        assert DependencyType.finish_to_finish == "FinishToFinish"


class TestScheduleItem:
    def test_from_dict_with_aliases(self):
        item = ScheduleItem.from_dict(
            {"id": "m1", "name": "Handover", "type": "milestone", "startDate": "2024-05-01"}
        )
        assert item.kind == ScheduleItemKind.milestone
        assert item.start == date(2024, 5, 1)
        assert item.end is None

    def test_name_defaults_to_id(self):
        assert ScheduleItem.from_dict({"id": "x"}).name == "x"

    def test_to_dict(self):
        item = ScheduleItem("p1", "Planning", ScheduleItemKind.phase, date(2024, 1, 1), date(2024, 2, 1))
        assert item.to_dict() == {
            "id": "p1",
            "name": "Planning",
            "kind": "Phase",
            "start": "2024-01-01",
            "end": "2024-02-01",
        }

    def test_invalid_kind(self):
        with pytest.raises(ValidationError):
            ScheduleItem.from_dict({"id": "x", "kind": "Epic"})

    def test_invalid_date(self):
        with pytest.raises(ValidationError):
            ScheduleItem.from_dict({"id": "x", "start": "15/01/2024"})


class TestDependency:
    def test_to_dict_wire_format(self):
        dependency = Dependency("d1", "s", "a", "b", DependencyType.start_to_start, 5)
        assert dependency.to_dict() == {
            "id": "d1",
            "schedule_id": "s",
            "predecessorId": "a",
            "successorId": "b",
            "type": "StartToStart",
            "lag": 5,
        }

    def test_from_dict_accepts_snake_case(self):
        dependency = Dependency.from_dict(
            {"id": "d1", "predecessor_id": "a", "successor_id": "b", "type": "FF"},
            schedule_id="s",
        )
        assert dependency.predecessor_id == "a"
        assert dependency.type == DependencyType.finish_to_finish
        assert dependency.lag == 0

    def test_with_changes_returns_new_instance(self):
        original = Dependency("d1", "s", "a", "b")
        changed = original.with_changes(lag=2)
        assert changed is not original
        assert original.lag == 0
        assert changed.lag == 2
        assert changed.type == DependencyType.finish_to_start

    def test_frozen(self):
        dependency = Dependency("d1", "s", "a", "b")
        with pytest.raises(AttributeError):
            dependency.lag = 3


class TestItemDependencies:
    def test_to_dict(self):
        dependency = Dependency("d1", "s", "a", "b")
        result = ItemDependencies("b", predecessors=[dependency])
        assert result.to_dict() == {
            "item_id": "b",
            "predecessors": [dependency.to_dict()],
            "successors": [],
        }
