"""
Starlette application factory for the dependency API
"""

from __future__ import annotations

from typing import Any, List, Optional

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from schedgraph import __version__
from schedgraph.api.routes import DependencyRoutes
from schedgraph.core.dependency.repository import DependencyRepository
from schedgraph.logger import get_logger

logger = get_logger(__name__)


async def health_handler(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok", "version": __version__})


def create_app(
    repository: Optional[DependencyRepository] = None,
    custom_routes: Optional[List[Route]] = None,
    custom_middleware: Optional[List[Any]] = None,
    debug: bool = False,
) -> Starlette:
    """
    Create the dependency API application

    Args:
        repository: Repository to serve. Defaults to the SQL-backed repository
            on the configured database URL.
        custom_routes: Extra Starlette routes appended after the built-in ones
        custom_middleware: Starlette BaseHTTPMiddleware classes to install
        debug: Starlette debug flag

    Returns:
        Starlette application

    Examples:
        app = create_app(DependencyRepository(InMemoryScheduleItemsProvider()))
    """
    if repository is None:
        from schedgraph.core.storage.factory import create_sql_repository

        repository = create_sql_repository()

    routes = [Route("/health", health_handler, methods=["GET"])]
    routes.extend(DependencyRoutes(repository).routes())
    if custom_routes:
        routes.extend(custom_routes)

    middleware = [Middleware(cls) for cls in (custom_middleware or [])]
    app = Starlette(debug=debug, routes=routes, middleware=middleware)
    app.state.repository = repository
    logger.info(f"Created dependency API with {len(routes)} routes")
    return app


__all__ = ["create_app", "health_handler"]
