"""
SQLAlchemy storage implementation
"""

from schedgraph.core.storage.sqlalchemy.models import (
    Base,
    ScheduleDependencyModel,
    ScheduleItemModel,
    ScheduleRevisionModel,
)
from schedgraph.core.storage.sqlalchemy.dependency_store import SqlDependencyStore
from schedgraph.core.storage.sqlalchemy.item_provider import SqlScheduleItemsProvider

__all__ = [
    "Base",
    "ScheduleItemModel",
    "ScheduleDependencyModel",
    "ScheduleRevisionModel",
    "SqlDependencyStore",
    "SqlScheduleItemsProvider",
]
