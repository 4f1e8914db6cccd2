"""
schedgraph API module

This module provides the Starlette application exposing dependency
create/update/delete/list, the pre-submit cycle check and the view
projections over HTTP.
"""

from schedgraph.api.app import create_app
from schedgraph.api.routes import DependencyRoutes

__all__ = ["create_app", "DependencyRoutes"]
