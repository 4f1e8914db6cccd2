"""
schedgraph - Schedule dependency graph for construction projects

Directed, typed, lagged dependencies between schedule items (phases, tasks,
milestones) that are guaranteed to stay acyclic.

Core modules:
- core.types: ScheduleItem, Dependency, DependencyType
- core.graph: GraphStore (items and edges of one schedule)
- core.dependency: cycle detection, validation, DependencyRepository
- core.storage: item providers and dependency stores (in-memory, SQLAlchemy)
- views: list, matrix and timeline projections

Optional surfaces:
- api: Starlette HTTP routes
- cli: schedgraph command line
"""

__version__ = "0.1.0"

# Lazy imports keep `import schedgraph` light (no SQLAlchemy/Starlette load)
__all__ = [
    # Domain types
    "ScheduleItem",
    "ScheduleItemKind",
    "Dependency",
    "DependencyType",
    "ItemDependencies",
    # Graph and algorithms
    "GraphStore",
    "would_create_cycle",
    "find_cycle_path",
    "DependencyValidator",
    "DependencyRepository",
    # Storage
    "InMemoryScheduleItemsProvider",
    "InMemoryDependencyStore",
    "create_session_factory",
    "create_sql_repository",
    # Version
    "__version__",
]


def __getattr__(name):
    """Lazy import to avoid loading storage backends at package import time"""

    if name in ("ScheduleItem", "ScheduleItemKind", "Dependency", "DependencyType", "ItemDependencies"):
        from schedgraph.core.types import (
            ScheduleItem,  # noqa: F401
            ScheduleItemKind,  # noqa: F401
            Dependency,  # noqa: F401
            DependencyType,  # noqa: F401
            ItemDependencies,  # noqa: F401
        )

        return locals()[name]

    if name == "GraphStore":
        from schedgraph.core.graph import GraphStore

        return GraphStore

    if name in ("would_create_cycle", "find_cycle_path", "DependencyValidator", "DependencyRepository"):
        from schedgraph.core.dependency import (
            would_create_cycle,  # noqa: F401
            find_cycle_path,  # noqa: F401
            DependencyValidator,  # noqa: F401
            DependencyRepository,  # noqa: F401
        )

        return locals()[name]

    if name in ("InMemoryScheduleItemsProvider", "InMemoryDependencyStore"):
        from schedgraph.core.storage.memory import (
            InMemoryScheduleItemsProvider,  # noqa: F401
            InMemoryDependencyStore,  # noqa: F401
        )

        return locals()[name]

    if name in ("create_session_factory", "create_sql_repository"):
        from schedgraph.core.storage.factory import (
            create_session_factory,  # noqa: F401
            create_sql_repository,  # noqa: F401
        )

        return locals()[name]

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
