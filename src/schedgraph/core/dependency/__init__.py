# Dependency module exports
from .cycle_detector import find_cycle_path, would_create_cycle
from .validator import DependencyValidator, validate_lag
from .repository import DependencyRepository

__all__ = [
    # Cycle detection
    "would_create_cycle",
    "find_cycle_path",
    # Validation
    "DependencyValidator",
    "validate_lag",
    # Mutation surface
    "DependencyRepository",
]
