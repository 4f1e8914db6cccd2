"""
Storage for schedule items and dependency edges
"""

from schedgraph.core.storage.base import DependencyStore, ScheduleItemsProvider
from schedgraph.core.storage.memory import InMemoryDependencyStore, InMemoryScheduleItemsProvider

__all__ = [
    "DependencyStore",
    "ScheduleItemsProvider",
    "InMemoryDependencyStore",
    "InMemoryScheduleItemsProvider",
]
