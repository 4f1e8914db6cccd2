"""
Tests for DependencyValidator and validate_lag
"""

import pytest

from schedgraph.core.dependency.validator import DependencyValidator, validate_lag
from schedgraph.core.errors import (
    CyclicDependencyError,
    DuplicateDependencyError,
    InvalidDependencyTypeError,
    InvalidLagError,
    MissingEndpointError,
    NotFoundError,
    SelfDependencyError,
    ValidationError,
)
from schedgraph.core.graph.store import GraphStore
from schedgraph.core.types import Dependency, DependencyType, ScheduleItem


def make_graph(item_ids, edges=()):
    graph = GraphStore("s", [ScheduleItem(id=i, name=f"Item {i}") for i in item_ids])
    for predecessor_id, successor_id in edges:
        graph.add_edge(
            Dependency(
                id=f"{predecessor_id}->{successor_id}",
                schedule_id="s",
                predecessor_id=predecessor_id,
                successor_id=successor_id,
            )
        )
    return graph


class TestValidateLag:
    @pytest.mark.parametrize("lag", [0, 1, 5, 365])
    def test_accepts_non_negative_integers(self, lag):
        assert validate_lag(lag) == lag

    @pytest.mark.parametrize("lag", [-1, 1.5, "3", None, True])
    def test_rejects_invalid(self, lag):
        with pytest.raises(InvalidLagError) as exc_info:
            validate_lag(lag)
        assert exc_info.value.kind == "InvalidLag"

    def test_max_lag_is_inclusive(self):
        assert validate_lag(30, max_lag_days=30) == 30
        with pytest.raises(InvalidLagError, match="exceeds maximum"):
            validate_lag(31, max_lag_days=30)

    def test_negative_lag_has_structured_hint(self):
        with pytest.raises(InvalidLagError) as exc_info:
            validate_lag(-2)
        assert exc_info.value.what == "Negative lag"
        assert exc_info.value.how_to_fix


class TestValidateCreate:
    def test_valid_edge_passes(self):
        validator = DependencyValidator(make_graph("ABC", [("A", "B")]))
        validator.validate_create("B", "C", lag=2)

    def test_self_dependency(self):
        validator = DependencyValidator(make_graph("A"))
        with pytest.raises(SelfDependencyError) as exc_info:
            validator.validate_create("A", "A")
        assert exc_info.value.kind == "SelfDependency"

    def test_self_dependency_wins_over_missing_item(self):
        """X -> X is a self dependency even when X is unknown."""
        validator = DependencyValidator(make_graph("A"))
        with pytest.raises(SelfDependencyError):
            validator.validate_create("ghost", "ghost")

    @pytest.mark.parametrize("predecessor,successor", [("ghost", "A"), ("A", "ghost")])
    def test_missing_endpoint(self, predecessor, successor):
        validator = DependencyValidator(make_graph("AB"))
        with pytest.raises(MissingEndpointError) as exc_info:
            validator.validate_create(predecessor, successor)
        assert exc_info.value.context["missing"] == ["ghost"]

    def test_missing_endpoint_checked_before_lag(self):
        validator = DependencyValidator(make_graph("A"))
        with pytest.raises(MissingEndpointError):
            validator.validate_create("A", "ghost", lag=-1)

    def test_invalid_lag(self):
        validator = DependencyValidator(make_graph("AB"))
        with pytest.raises(InvalidLagError):
            validator.validate_create("A", "B", lag=-1)

    def test_max_lag(self):
        validator = DependencyValidator(make_graph("AB"), max_lag_days=10)
        with pytest.raises(InvalidLagError):
            validator.validate_create("A", "B", lag=11)

    def test_duplicate_pair(self):
        validator = DependencyValidator(make_graph("AB", [("A", "B")]))
        with pytest.raises(DuplicateDependencyError) as exc_info:
            validator.validate_create("A", "B")
        assert exc_info.value.context["dependency_id"] == "A->B"

    def test_reverse_pair_is_a_cycle_not_a_duplicate(self):
        validator = DependencyValidator(make_graph("AB", [("A", "B")]))
        with pytest.raises(CyclicDependencyError):
            validator.validate_create("B", "A")

    def test_duplicate_id(self):
        validator = DependencyValidator(make_graph("ABC", [("A", "B")]))
        with pytest.raises(DuplicateDependencyError, match="already exists"):
            validator.validate_create("B", "C", dependency_id="A->B")

    def test_cycle_reports_path_and_names(self):
        validator = DependencyValidator(make_graph("ABC", [("A", "B"), ("B", "C")]))
        with pytest.raises(CyclicDependencyError) as exc_info:
            validator.validate_create("C", "A")
        error = exc_info.value
        assert error.kind == "CyclicDependency"
        assert error.cycle == ["C", "A", "B", "C"]
        assert "Item C -> Item A -> Item B -> Item C" in error.message

    def test_all_errors_are_validation_errors(self):
        validator = DependencyValidator(make_graph("AB", [("A", "B")]))
        for args in (("A", "A"), ("A", "ghost"), ("A", "B"), ("B", "A")):
            with pytest.raises(ValidationError):
                validator.validate_create(*args)

    def test_does_not_mutate_graph(self):
        graph = make_graph("ABC", [("A", "B")])
        edges = graph.list_edges()
        DependencyValidator(graph).validate_create("B", "C")
        assert graph.list_edges() == edges
        assert len(graph) == 1


class TestValidateUpdate:
    def test_changes_type_and_lag(self):
        validator = DependencyValidator(make_graph("AB", [("A", "B")]))
        updated = validator.validate_update("A->B", "SS", 4)
        assert updated.type == DependencyType.start_to_start
        assert updated.lag == 4
        assert (updated.predecessor_id, updated.successor_id) == ("A", "B")

    def test_partial_update_keeps_other_field(self):
        validator = DependencyValidator(make_graph("AB", [("A", "B")]))
        updated = validator.validate_update("A->B", new_lag=7)
        assert updated.type == DependencyType.finish_to_start
        assert updated.lag == 7

    def test_lag_zero_is_applied(self):
        graph = make_graph("AB")
        graph.add_edge(
            Dependency(id="d", schedule_id="s", predecessor_id="A", successor_id="B", lag=3)
        )
        assert DependencyValidator(graph).validate_update("d", new_lag=0).lag == 0

    def test_unknown_id(self):
        validator = DependencyValidator(make_graph("AB"))
        with pytest.raises(NotFoundError) as exc_info:
            validator.validate_update("missing", new_lag=1)
        assert exc_info.value.kind == "NotFound"

    def test_invalid_type(self):
        validator = DependencyValidator(make_graph("AB", [("A", "B")]))
        with pytest.raises(InvalidDependencyTypeError):
            validator.validate_update("A->B", new_type="XY")

    def test_invalid_lag(self):
        validator = DependencyValidator(make_graph("AB", [("A", "B")]), max_lag_days=5)
        with pytest.raises(InvalidLagError):
            validator.validate_update("A->B", new_lag=6)

    def test_does_not_commit(self):
        graph = make_graph("AB", [("A", "B")])
        DependencyValidator(graph).validate_update("A->B", new_lag=9)
        assert graph.get_edge("A->B").lag == 0
