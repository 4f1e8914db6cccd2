from .projections import (
    DependencyMatrix,
    DependencyRow,
    MatrixCell,
    TimelineCard,
    list_view,
    matrix_view,
    timeline_view,
)

__all__ = [
    "DependencyMatrix",
    "DependencyRow",
    "MatrixCell",
    "TimelineCard",
    "list_view",
    "matrix_view",
    "timeline_view",
]
