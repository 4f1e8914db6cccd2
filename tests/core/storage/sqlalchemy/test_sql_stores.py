"""
Tests for the SQLAlchemy item provider and dependency store
"""

from datetime import date

import pytest

from schedgraph.core.dependency.repository import DependencyRepository
from schedgraph.core.errors import (
    ConcurrentModificationError,
    ConfigurationError,
    CyclicDependencyError,
    DuplicateDependencyError,
    NotFoundError,
    ValidationError,
)
from schedgraph.core.storage.factory import (
    create_session_factory,
    create_sql_repository,
    is_postgresql_url,
    normalize_postgresql_url,
)
from schedgraph.core.storage.sqlalchemy import (
    ScheduleDependencyModel,
    SqlDependencyStore,
    SqlScheduleItemsProvider,
)
from schedgraph.core.types import Dependency, DependencyType, ScheduleItem, ScheduleItemKind

SCHEDULE_ID = "sched-sql"


@pytest.fixture
def provider(session_factory, example_items):
    provider = SqlScheduleItemsProvider(session_factory)
    for item in example_items:
        provider.add_item(SCHEDULE_ID, item)
    return provider


@pytest.fixture
def sql_store(session_factory):
    return SqlDependencyStore(session_factory)


def dep(id, predecessor_id, successor_id, **kwargs):
    return Dependency(
        id=id, schedule_id=SCHEDULE_ID, predecessor_id=predecessor_id, successor_id=successor_id, **kwargs
    )


class TestSqlScheduleItemsProvider:
    def test_list_items_in_insertion_order(self, provider):
        items = provider.list_items(SCHEDULE_ID)
        assert [i.id for i in items][:3] == ["item1", "item1-1", "item1-2"]
        assert items[0].kind == ScheduleItemKind.phase
        assert items[0].start == date(2024, 1, 15)

    def test_schedules_are_isolated(self, provider):
        assert provider.list_items("other") == []

    def test_duplicate_item(self, provider):
        with pytest.raises(ValidationError):
            provider.add_item(SCHEDULE_ID, ScheduleItem(id="item1", name="Again"))

    def test_remove_item(self, provider):
        provider.remove_item(SCHEDULE_ID, "item1")
        assert "item1" not in [i.id for i in provider.list_items(SCHEDULE_ID)]
        with pytest.raises(NotFoundError):
            provider.remove_item(SCHEDULE_ID, "item1")


class TestSqlDependencyStore:
    def test_add_and_load(self, sql_store):
        sql_store.add(dep("d1", "a", "b", type=DependencyType.start_to_start, lag=2))
        sql_store.add(dep("d2", "b", "c"))
        loaded = sql_store.load(SCHEDULE_ID)
        assert [d.id for d in loaded] == ["d1", "d2"]
        assert loaded[0].type == DependencyType.start_to_start
        assert loaded[0].lag == 2

    def test_duplicate_id(self, sql_store):
        sql_store.add(dep("d1", "a", "b"))
        with pytest.raises(DuplicateDependencyError):
            sql_store.add(dep("d1", "c", "d"))

    def test_duplicate_pair(self, sql_store):
        sql_store.add(dep("d1", "a", "b"))
        with pytest.raises(DuplicateDependencyError):
            sql_store.add(dep("d2", "a", "b"))
        assert [d.id for d in sql_store.load(SCHEDULE_ID)] == ["d1"]

    def test_same_id_in_other_schedule(self, sql_store):
        sql_store.add(dep("d1", "a", "b"))
        sql_store.add(Dependency(id="d1", schedule_id="other", predecessor_id="a", successor_id="b"))
        assert len(sql_store.load("other")) == 1

    def test_update(self, sql_store):
        sql_store.add(dep("d1", "a", "b"))
        sql_store.update(dep("d1", "a", "b", type=DependencyType.finish_to_finish, lag=4))
        loaded = sql_store.load(SCHEDULE_ID)[0]
        assert loaded.type == DependencyType.finish_to_finish
        assert loaded.lag == 4

    def test_update_unknown(self, sql_store):
        with pytest.raises(NotFoundError):
            sql_store.update(dep("nope", "a", "b"))

    def test_delete(self, sql_store):
        sql_store.add(dep("d1", "a", "b"))
        sql_store.delete(SCHEDULE_ID, "d1")
        assert sql_store.load(SCHEDULE_ID) == []
        with pytest.raises(NotFoundError):
            sql_store.delete(SCHEDULE_ID, "d1")

    def test_model_to_dict_is_wire_format(self, session_factory, sql_store):
        sql_store.add(dep("d1", "a", "b", lag=1))
        with session_factory() as session:
            record = session.query(ScheduleDependencyModel).one()
            assert record.to_dict()["predecessorId"] == "a"
            assert record.to_dict()["type"] == "FinishToStart"

    def test_revision_advances_per_write(self, sql_store):
        assert sql_store.revision(SCHEDULE_ID) == 0
        assert sql_store.add(dep("d1", "a", "b")) == 1
        assert sql_store.add(dep("d2", "b", "c"), expected_revision=1) == 2
        assert sql_store.update(dep("d1", "a", "b", lag=1), expected_revision=2) == 3
        assert sql_store.delete(SCHEDULE_ID, "d2", expected_revision=3) == 4
        assert sql_store.revision(SCHEDULE_ID) == 4
        assert sql_store.revision("other") == 0

    def test_stale_revision_rejected(self, sql_store):
        sql_store.add(dep("d1", "a", "b"))
        with pytest.raises(ConcurrentModificationError):
            sql_store.add(dep("d2", "b", "c"), expected_revision=0)
        with pytest.raises(ConcurrentModificationError):
            sql_store.update(dep("d1", "a", "b", lag=9), expected_revision=5)
        with pytest.raises(ConcurrentModificationError):
            sql_store.delete(SCHEDULE_ID, "d1", expected_revision=0)

        loaded = sql_store.load(SCHEDULE_ID)
        assert [(d.id, d.lag) for d in loaded] == [("d1", 0)]
        assert sql_store.revision(SCHEDULE_ID) == 1

    def test_first_write_race(self, session_factory):
        """Two stores that both saw an empty schedule: only one commits."""
        first = SqlDependencyStore(session_factory)
        second = SqlDependencyStore(session_factory)
        first.add(dep("d1", "a", "b"), expected_revision=0)
        with pytest.raises(ConcurrentModificationError):
            second.add(dep("d2", "b", "a"), expected_revision=0)
        assert [d.id for d in first.load(SCHEDULE_ID)] == ["d1"]

    def test_failed_write_keeps_revision(self, sql_store):
        sql_store.add(dep("d1", "a", "b"))
        with pytest.raises(DuplicateDependencyError):
            sql_store.add(dep("d2", "a", "b"), expected_revision=1)
        with pytest.raises(NotFoundError):
            sql_store.delete(SCHEDULE_ID, "nope", expected_revision=1)
        assert sql_store.revision(SCHEDULE_ID) == 1


class TestSqlRepository:
    def test_repository_over_sql(self, provider, sql_store):
        repository = DependencyRepository(provider, sql_store, max_lag_days=None)
        repository.create(SCHEDULE_ID, "item1-1", "item1-2", dependency_id="dep1")
        repository.create(SCHEDULE_ID, "item1-2", "item1-3", dependency_id="dep2")
        with pytest.raises(CyclicDependencyError):
            repository.create(SCHEDULE_ID, "item1-3", "item1-1")

        # A fresh repository sees the persisted graph
        fresh = DependencyRepository(provider, sql_store, max_lag_days=None)
        assert [d.id for d in fresh.list(SCHEDULE_ID)] == ["dep1", "dep2"]
        assert fresh.would_create_cycle(SCHEDULE_ID, "item1-3", "item1-1") is True

    def test_two_repositories_cannot_close_a_cycle(self, session_factory, provider):
        """Server and CLI share one database but keep separate caches."""
        server = DependencyRepository(provider, SqlDependencyStore(session_factory), max_lag_days=None)
        cli = DependencyRepository(
            SqlScheduleItemsProvider(session_factory),
            SqlDependencyStore(session_factory),
            max_lag_days=None,
        )
        assert server.list(SCHEDULE_ID) == []

        server.create(SCHEDULE_ID, "item1-1", "item1-2", dependency_id="ab")
        cli.create(SCHEDULE_ID, "item1-2", "item1-3", dependency_id="bc")
        with pytest.raises(CyclicDependencyError):
            server.create(SCHEDULE_ID, "item1-3", "item1-1")

        stored = SqlDependencyStore(session_factory).load(SCHEDULE_ID)
        assert [d.id for d in stored] == ["ab", "bc"]
        assert [d.id for d in server.list(SCHEDULE_ID)] == ["ab", "bc"]

    def test_two_repositories_stay_in_step_on_update_and_delete(self, session_factory, provider):
        server = DependencyRepository(provider, SqlDependencyStore(session_factory), max_lag_days=None)
        cli = DependencyRepository(provider, SqlDependencyStore(session_factory), max_lag_days=None)
        server.create(SCHEDULE_ID, "item1-1", "item1-2", dependency_id="ab")
        assert cli.get(SCHEDULE_ID, "ab").lag == 0

        server.update(SCHEDULE_ID, "ab", lag=3)
        assert cli.get(SCHEDULE_ID, "ab").lag == 3

        cli.delete(SCHEDULE_ID, "ab")
        with pytest.raises(NotFoundError):
            server.update(SCHEDULE_ID, "ab", lag=5)
        assert server.list(SCHEDULE_ID) == []
        # The pair is free again for either side
        server.create(SCHEDULE_ID, "item1-1", "item1-2", dependency_id="ab2")
        assert [d.id for d in cli.list(SCHEDULE_ID)] == ["ab2"]


class TestFactory:
    def test_is_postgresql_url(self):
        assert is_postgresql_url("postgresql://u@h/db")
        assert is_postgresql_url("postgresql+asyncpg://u@h/db")
        assert not is_postgresql_url("sqlite:///x.db")

    def test_normalize_postgresql_url(self):
        assert normalize_postgresql_url("postgresql://u@h/db") == "postgresql+psycopg2://u@h/db"
        assert normalize_postgresql_url("postgresql+psycopg2://u@h/db") == "postgresql+psycopg2://u@h/db"

    def test_unsupported_url(self):
        with pytest.raises(ConfigurationError):
            create_session_factory("mysql://u@h/db")

    def test_in_memory_sqlite_shares_connection(self):
        factory = create_session_factory("sqlite:///:memory:")
        SqlScheduleItemsProvider(factory).add_item("s", ScheduleItem(id="a", name="A"))
        assert [i.id for i in SqlScheduleItemsProvider(factory).list_items("s")] == ["a"]

    def test_sql_repository_on_file(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'nested' / 'graph.db'}"
        repository = create_sql_repository(url)
        repository.items_provider.add_item("s", ScheduleItem(id="a", name="A"))
        repository.items_provider.add_item("s", ScheduleItem(id="b", name="B"))
        repository.create("s", "a", "b", dependency_id="d")

        assert (tmp_path / "nested" / "graph.db").exists()
        assert [d.id for d in create_sql_repository(url).list("s")] == ["d"]
