"""
Custom exceptions for the schedule dependency graph.

Exception Hierarchy:
    SchedGraphError (base)
        ├── BusinessError (user/expected errors, no stack trace)
        │   ├── ValidationError (a proposed mutation was rejected)
        │   │   ├── SelfDependencyError
        │   │   ├── MissingEndpointError
        │   │   ├── CyclicDependencyError
        │   │   ├── InvalidLagError
        │   │   ├── InvalidDependencyTypeError
        │   │   ├── DuplicateDependencyError
        │   │   └── NotFoundError
        │   ├── ConcurrentModificationError (schedule changed during a write)
        │   └── ConfigurationError (config/environment issues)
        └── SystemError (unexpected errors, with stack trace)
            └── StorageError (database/storage failures)

Usage Guidelines:
    - Validation outcomes are deterministic: callers surface them, nobody retries
    - Every error carries a stable ``kind`` string for API and CLI surfaces
    - Log BusinessError without exc_info, others with exc_info

Structured Error Format:
    All error classes support optional structured information:
    - what: What went wrong (brief description)
    - why: Why it happened (root cause)
    - how_to_fix: How to resolve it (actionable steps)
    - context: Additional context (dict with relevant details)
"""

from typing import Any, Dict, List, Optional


class SchedGraphError(RuntimeError):
    """
    Base exception for all schedgraph errors.

    Supports structured error information:
    - what: What went wrong
    - why: Why it happened
    - how_to_fix: How to resolve it
    - context: Additional context dict
    """

    kind: str = "Error"

    def __init__(
        self,
        message: str,
        *,
        what: str | None = None,
        why: str | None = None,
        how_to_fix: str | None = None,
        context: dict | None = None,
    ):
        """
        Initialize error with optional structured information.

        Args:
            message: Error message (used if structured info not provided)
            what: Brief description of what went wrong
            why: Root cause explanation
            how_to_fix: Actionable resolution steps
            context: Additional context dictionary
        """
        self.message = message
        self.what = what
        self.why = why
        self.how_to_fix = how_to_fix
        self.context = context or {}

        # Build formatted message
        if what:
            formatted_msg = f"❌ {what}"
            if why:
                formatted_msg += f"\n\n💡 Reason: {why}"
            if how_to_fix:
                formatted_msg += f"\n\n✅ Solution: {how_to_fix}"
            if context:
                context_str = "\n".join(f"  - {k}: {v}" for k, v in context.items())
                formatted_msg += f"\n\n📝 Context:\n{context_str}"
            super().__init__(formatted_msg)
        else:
            super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for API responses"""
        return {
            "kind": self.kind,
            "message": self.message,
            "what": self.what,
            "why": self.why,
            "how_to_fix": self.how_to_fix,
            "context": self.context,
        }


class BusinessError(SchedGraphError):
    """
    Base exception for expected/user-facing failures.

    These errors represent expected failure modes that don't require
    stack traces for debugging.
    """

    kind = "BusinessError"


class ValidationError(BusinessError):
    """
    A proposed dependency mutation was rejected.

    Example:
        >>> raise ValidationError("lag must be an integer")
    """

    kind = "ValidationError"


class SelfDependencyError(ValidationError):
    """Predecessor and successor are the same item"""

    kind = "SelfDependency"


class MissingEndpointError(ValidationError):
    """Predecessor or successor is not a known schedule item"""

    kind = "MissingEndpoint"


class CyclicDependencyError(ValidationError):
    """
    The candidate edge would close a cycle.

    ``cycle`` holds the item ids along the cycle, starting and ending at the
    predecessor, when the caller was able to compute it.
    """

    kind = "CyclicDependency"

    def __init__(self, message: str, *, cycle: Optional[List[str]] = None, **kwargs: Any):
        self.cycle = list(cycle or [])
        super().__init__(message, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["cycle"] = self.cycle
        return data


class InvalidLagError(ValidationError):
    """Lag is negative, not an integer, or above the configured maximum"""

    kind = "InvalidLag"


class InvalidDependencyTypeError(ValidationError):
    """Dependency type is not one of the four relationship types"""

    kind = "InvalidDependencyType"


class DuplicateDependencyError(ValidationError):
    """An edge with the same id or the same ordered pair already exists"""

    kind = "DuplicateDependency"


class NotFoundError(ValidationError):
    """Update/delete referenced an unknown dependency id"""

    kind = "NotFound"


class ConcurrentModificationError(BusinessError):
    """
    The schedule was changed by another writer between load and commit.

    Raised by dependency stores when the expected revision no longer
    matches; the repository reloads and revalidates before giving up.
    """

    kind = "ConcurrentModification"


class ConfigurationError(BusinessError):
    """
    Configuration-specific business error.

    Use this for missing configuration, invalid settings,
    or environment setup issues.
    """

    kind = "ConfigurationError"


class SystemError(SchedGraphError):
    """
    Base exception for unexpected system-level errors.

    These are logged with full stack traces since they represent
    unexpected failures that need investigation.
    """

    kind = "SystemError"


class StorageError(SystemError):
    """
    Database or storage operation error.

    Use this for unexpected database/storage failures that are not
    simple connection errors.
    """

    kind = "StorageError"


__all__ = [
    "SchedGraphError",
    "BusinessError",
    "ValidationError",
    "SelfDependencyError",
    "MissingEndpointError",
    "CyclicDependencyError",
    "InvalidLagError",
    "InvalidDependencyTypeError",
    "DuplicateDependencyError",
    "NotFoundError",
    "ConcurrentModificationError",
    "ConfigurationError",
    "SystemError",
    "StorageError",
]
