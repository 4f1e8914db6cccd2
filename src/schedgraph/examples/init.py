"""
Examples data initialization functions

This module loads the example schedule into an item provider and a
dependency repository.
"""

from typing import Callable

from schedgraph.core.dependency.repository import DependencyRepository
from schedgraph.core.types import ScheduleItem
from schedgraph.examples.data import (
    EXAMPLE_SCHEDULE_ID,
    get_example_dependencies,
    get_example_items,
)
from schedgraph.logger import get_logger

logger = get_logger(__name__)


def check_if_examples_initialized(
    repository: DependencyRepository, schedule_id: str = EXAMPLE_SCHEDULE_ID
) -> bool:
    """
    Check if example data has already been initialized

    Returns:
        True if the example schedule already has items or dependencies
    """
    return bool(
        repository.items_provider.list_items(schedule_id) or repository.list(schedule_id)
    )


def init_examples_data(
    repository: DependencyRepository,
    add_item: Callable[[str, ScheduleItem], None],
    schedule_id: str = EXAMPLE_SCHEDULE_ID,
    force: bool = False,
) -> int:
    """
    Initialize example schedule data

    Args:
        repository: Repository that receives the example dependencies
        add_item: Writer for schedule items, e.g. provider.add_item
        schedule_id: Target schedule
        force: If True, clear the schedule's existing dependencies and reload

    Returns:
        Number of dependencies created
    """
    if check_if_examples_initialized(repository, schedule_id):
        if not force:
            logger.info(f"Examples already initialized for schedule {schedule_id}")
            return 0
        for dependency in repository.list(schedule_id):
            repository.delete(schedule_id, dependency.id)

    known_ids = {item.id for item in repository.items_provider.list_items(schedule_id)}
    for data in get_example_items():
        item = ScheduleItem.from_dict(data)
        if item.id not in known_ids:
            add_item(schedule_id, item)

    created = 0
    for data in get_example_dependencies():
        repository.create(
            schedule_id,
            data["predecessorId"],
            data["successorId"],
            type=data["type"],
            lag=data["lag"],
            dependency_id=data["id"],
        )
        created += 1

    logger.info(f"Initialized {created} example dependencies in schedule {schedule_id}")
    return created

