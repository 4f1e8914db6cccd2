"""
Example schedule data

A two-phase construction schedule (planning, then foundation work) with a
chain of dependencies running from requirements gathering to the foundation
inspection milestone. Demonstrates:
- Phases, tasks and milestones
- All dependencies in a single forward chain (acyclic)
- Finish-to-Start and Start-to-Start relationships with and without lag
"""

from typing import Any, Dict, List

# Schedule id used for the demo data
EXAMPLE_SCHEDULE_ID = "example_schedule"


def get_example_items() -> List[Dict[str, Any]]:
    """
    Get example schedule item definitions

    Returns:
        List of item dictionaries (ScheduleItem.from_dict compatible)
    """
    return [
        {
            "id": "item1",
            "name": "Project Planning Phase",
            "kind": "Phase",
            "start": "2024-01-15",
            "end": "2024-02-15",
        },
        {
            "id": "item1-1",
            "name": "Requirements Gathering",
            "kind": "Task",
            "start": "2024-01-15",
            "end": "2024-01-25",
        },
        {
            "id": "item1-2",
            "name": "Initial Design",
            "kind": "Task",
            "start": "2024-01-20",
            "end": "2024-02-05",
        },
        {
            "id": "item1-3",
            "name": "Planning Complete",
            "kind": "Milestone",
            "start": "2024-02-15",
            "end": "2024-02-15",
        },
        {
            "id": "item2",
            "name": "Foundation Work",
            "kind": "Phase",
            "start": "2024-02-20",
            "end": "2024-04-10",
        },
        {
            "id": "item2-1",
            "name": "Site Preparation",
            "kind": "Task",
            "start": "2024-02-20",
            "end": "2024-03-05",
        },
        {
            "id": "item2-2",
            "name": "Excavation",
            "kind": "Task",
            "start": "2024-03-01",
            "end": "2024-03-20",
        },
        {
            "id": "item2-3",
            "name": "Foundation Pouring",
            "kind": "Task",
            "start": "2024-03-15",
            "end": "2024-04-05",
        },
        {
            "id": "item2-4",
            "name": "Foundation Inspection",
            "kind": "Milestone",
            "start": "2024-04-10",
            "end": "2024-04-10",
        },
    ]


def get_example_dependencies() -> List[Dict[str, Any]]:
    """
    Get example dependency definitions, in creation order

    Returns:
        List of dependency dictionaries in the wire format
    """
    return [
        {"id": "dep1", "predecessorId": "item1-1", "successorId": "item1-2", "type": "FinishToStart", "lag": 0},
        {"id": "dep2", "predecessorId": "item1-2", "successorId": "item1-3", "type": "FinishToStart", "lag": 5},
        {"id": "dep3", "predecessorId": "item1-3", "successorId": "item2-1", "type": "FinishToStart", "lag": 2},
        {"id": "dep4", "predecessorId": "item2-1", "successorId": "item2-2", "type": "StartToStart", "lag": 5},
        {"id": "dep5", "predecessorId": "item2-2", "successorId": "item2-3", "type": "FinishToStart", "lag": 0},
        {"id": "dep6", "predecessorId": "item2-3", "successorId": "item2-4", "type": "FinishToStart", "lag": 3},
    ]
