"""
HTTP routes for schedule dependencies

Thin Starlette handlers over DependencyRepository. Repository calls are
synchronous and run in the thread pool; validation errors are returned as
JSON with their ``kind`` so a UI can show the specific problem.
"""

import json
from typing import Any, Callable, Dict, List

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from schedgraph.core.dependency.repository import DependencyRepository
from schedgraph.core.errors import (
    BusinessError,
    ConcurrentModificationError,
    CyclicDependencyError,
    DuplicateDependencyError,
    NotFoundError,
    SchedGraphError,
    ValidationError,
)
from schedgraph.core.types import DependencyType
from schedgraph.logger import get_logger
from schedgraph.views.projections import list_view, matrix_view, timeline_view

logger = get_logger(__name__)

VIEWS: Dict[str, Callable[[Any], Any]] = {
    "list": lambda graph: [row.to_dict() for row in list_view(graph)],
    "matrix": lambda graph: matrix_view(graph).to_dict(),
    "timeline": lambda graph: [card.to_dict() for card in timeline_view(graph)],
}


def error_status(error: SchedGraphError) -> int:
    """HTTP status for an error"""
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(
        error, (CyclicDependencyError, DuplicateDependencyError, ConcurrentModificationError)
    ):
        return 409
    if isinstance(error, BusinessError):
        return 400
    return 500


def error_response(error: SchedGraphError) -> JSONResponse:
    status = error_status(error)
    if status >= 500:
        logger.error(f"Unexpected error: {error}", exc_info=True)
    return JSONResponse(status_code=status, content={"error": error.to_dict()})


async def _json_body(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError("Request body must be valid JSON") from e
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


class DependencyRoutes:
    """
    Route handlers for one repository

    Example:
        routes = DependencyRoutes(repository).routes()
        app = Starlette(routes=routes)
    """

    def __init__(self, repository: DependencyRepository):
        self.repository = repository

    def routes(self) -> List[Route]:
        base = "/schedules/{schedule_id}"
        return [
            Route(f"{base}/dependencies", self.list_dependencies, methods=["GET"]),
            Route(f"{base}/dependencies", self.create_dependency, methods=["POST"]),
            Route(f"{base}/dependencies/check", self.check_dependency, methods=["GET"]),
            Route(f"{base}/dependencies/{{dependency_id}}", self.get_dependency, methods=["GET"]),
            Route(f"{base}/dependencies/{{dependency_id}}", self.update_dependency, methods=["PATCH"]),
            Route(f"{base}/dependencies/{{dependency_id}}", self.delete_dependency, methods=["DELETE"]),
            Route(f"{base}/items/{{item_id}}/dependencies", self.item_dependencies, methods=["GET"]),
            Route(f"{base}/views/{{view}}", self.render_view, methods=["GET"]),
        ]

    async def list_dependencies(self, request: Request) -> Response:
        schedule_id = request.path_params["schedule_id"]
        try:
            dependencies = await run_in_threadpool(self.repository.list, schedule_id)
        except SchedGraphError as e:
            return error_response(e)
        return JSONResponse({"dependencies": [d.to_dict() for d in dependencies]})

    async def create_dependency(self, request: Request) -> Response:
        schedule_id = request.path_params["schedule_id"]
        try:
            body = await _json_body(request)
            predecessor_id = body.get("predecessorId")
            successor_id = body.get("successorId")
            if not predecessor_id or not successor_id:
                raise ValidationError("Both predecessorId and successorId are required")
            dependency = await run_in_threadpool(
                self.repository.create,
                schedule_id,
                str(predecessor_id),
                str(successor_id),
                body.get("type", DependencyType.finish_to_start),
                body.get("lag", 0),
                str(body["id"]) if body.get("id") else None,
            )
        except SchedGraphError as e:
            return error_response(e)
        return JSONResponse(status_code=201, content=dependency.to_dict())

    async def get_dependency(self, request: Request) -> Response:
        schedule_id = request.path_params["schedule_id"]
        dependency_id = request.path_params["dependency_id"]
        try:
            dependency = await run_in_threadpool(self.repository.get, schedule_id, dependency_id)
        except SchedGraphError as e:
            return error_response(e)
        return JSONResponse(dependency.to_dict())

    async def update_dependency(self, request: Request) -> Response:
        schedule_id = request.path_params["schedule_id"]
        dependency_id = request.path_params["dependency_id"]
        try:
            body = await _json_body(request)
            if "predecessorId" in body or "successorId" in body:
                raise ValidationError(
                    "Dependency endpoints are immutable",
                    how_to_fix="Delete the dependency and create a new one",
                )
            dependency = await run_in_threadpool(
                self.repository.update,
                schedule_id,
                dependency_id,
                body.get("type"),
                body.get("lag"),
            )
        except SchedGraphError as e:
            return error_response(e)
        return JSONResponse(dependency.to_dict())

    async def delete_dependency(self, request: Request) -> Response:
        schedule_id = request.path_params["schedule_id"]
        dependency_id = request.path_params["dependency_id"]
        try:
            await run_in_threadpool(self.repository.delete, schedule_id, dependency_id)
        except SchedGraphError as e:
            return error_response(e)
        return Response(status_code=204)

    async def check_dependency(self, request: Request) -> Response:
        schedule_id = request.path_params["schedule_id"]
        predecessor_id = request.query_params.get("predecessorId")
        successor_id = request.query_params.get("successorId")
        if not predecessor_id or not successor_id:
            return error_response(
                ValidationError("Query parameters predecessorId and successorId are required")
            )
        try:
            cyclic = await run_in_threadpool(
                self.repository.would_create_cycle, schedule_id, predecessor_id, successor_id
            )
        except SchedGraphError as e:
            return error_response(e)
        return JSONResponse(
            {
                "predecessorId": predecessor_id,
                "successorId": successor_id,
                "wouldCreateCycle": cyclic,
            }
        )

    async def item_dependencies(self, request: Request) -> Response:
        schedule_id = request.path_params["schedule_id"]
        item_id = request.path_params["item_id"]
        try:
            result = await run_in_threadpool(
                self.repository.item_dependencies, schedule_id, item_id
            )
        except SchedGraphError as e:
            return error_response(e)
        return JSONResponse(result.to_dict())

    async def render_view(self, request: Request) -> Response:
        schedule_id = request.path_params["schedule_id"]
        view = request.path_params["view"]
        render = VIEWS.get(view)
        if render is None:
            return error_response(
                NotFoundError(f"Unknown view '{view}'", context={"allowed": sorted(VIEWS)})
            )
        try:
            graph = await run_in_threadpool(self.repository.graph, schedule_id)
        except SchedGraphError as e:
            return error_response(e)
        return JSONResponse({"view": view, "data": render(graph)})


__all__ = ["DependencyRoutes", "error_status", "error_response"]
