"""
Example schedule data for demos and tests
"""

from schedgraph.examples.data import (
    EXAMPLE_SCHEDULE_ID,
    get_example_dependencies,
    get_example_items,
)

__all__ = ["EXAMPLE_SCHEDULE_ID", "get_example_items", "get_example_dependencies"]
