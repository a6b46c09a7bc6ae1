"""FastAPI route sink for resource routing.

Receives registrations from ResourceRoutes and adds them to a FastAPI
APIRouter, wrapping each route's request handler with its middleware.
"""

import inspect
import logging
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

from fastapi import APIRouter
from fastapi.routing import APIRoute

from fastapi_resource_routing.core.importer import DEFAULT_CONTROLLER_PATH
from fastapi_resource_routing.core.middleware import build_middleware_chain
from fastapi_resource_routing.core.resource import Registration, ResourceRoutes
from fastapi_resource_routing.exceptions import MiddlewareValidationError

logger = logging.getLogger(__name__)


class FastAPIRouteSink:
    """Route sink registering resource routes on a FastAPI APIRouter.

    Exposes one method per HTTP verb with the signature
    ``(path, middleware, handler)``. Middleware are async
    ``(request, call_next)`` callables; the first runs outermost.

    Example:
        from fastapi import FastAPI
        from fastapi_resource_routing import create_resource_router

        sink = create_resource_router()
        sink.resource().prefix("items").controller("item").resource()

        app = FastAPI()
        app.include_router(sink.router)
    """

    def __init__(self, router: APIRouter | None = None, *, prefix: str = "") -> None:
        self.router = router if router is not None else APIRouter(prefix=prefix)

    def get(self, path: str, middleware: Sequence[Any], handler: Callable[..., Any]) -> None:
        self._add_route("get", path, middleware, handler)

    def post(self, path: str, middleware: Sequence[Any], handler: Callable[..., Any]) -> None:
        self._add_route("post", path, middleware, handler)

    def put(self, path: str, middleware: Sequence[Any], handler: Callable[..., Any]) -> None:
        self._add_route("put", path, middleware, handler)

    def patch(self, path: str, middleware: Sequence[Any], handler: Callable[..., Any]) -> None:
        self._add_route("patch", path, middleware, handler)

    def delete(self, path: str, middleware: Sequence[Any], handler: Callable[..., Any]) -> None:
        self._add_route("delete", path, middleware, handler)

    def head(self, path: str, middleware: Sequence[Any], handler: Callable[..., Any]) -> None:
        self._add_route("head", path, middleware, handler)

    def options(self, path: str, middleware: Sequence[Any], handler: Callable[..., Any]) -> None:
        self._add_route("options", path, middleware, handler)

    def validate(self, registrations: Sequence[Registration]) -> None:
        """Check every registration's middleware before any route is added.

        Raises:
            MiddlewareValidationError: If a middleware is not an async callable.
        """
        for registration in registrations:
            _validate_middleware(
                registration.middleware,
                method=registration.method,
                path=_normalize_path(registration.path),
            )

    def resource(
        self,
        controller_path: str | Path = DEFAULT_CONTROLLER_PATH,
        *,
        registry: Mapping[str, Any] | None = None,
        strict: bool = False,
    ) -> ResourceRoutes:
        """Start a resource builder registering on this sink."""
        return ResourceRoutes(self, controller_path, registry=registry, strict=strict)

    def _add_route(
        self,
        method: str,
        path: str,
        middleware: Sequence[Any],
        handler: Callable[..., Any],
    ) -> None:
        """Add an HTTP route to the router with its middleware.

        Raises:
            MiddlewareValidationError: If a middleware is not an async callable.
        """
        path = _normalize_path(path)
        _validate_middleware(middleware, method=method, path=path)

        kwargs: dict[str, Any] = {
            "tags": _derive_tags(path),
            "description": handler.__doc__,
        }

        if middleware:
            kwargs["route_class_override"] = _make_middleware_route(tuple(middleware))
            logger.debug(
                "Created middleware route class",
                extra={
                    "method": method.upper(),
                    "path": path,
                    "middleware_count": len(middleware),
                },
            )

        self.router.add_api_route(
            path=path,
            endpoint=handler,
            methods=[method.upper()],
            **kwargs,
        )


def create_resource_router(prefix: str = "") -> FastAPIRouteSink:
    """Create a route sink backed by a new APIRouter.

    Args:
        prefix: Optional URL prefix for the APIRouter. Must start with "/"
            when given.

    Returns:
        A FastAPIRouteSink; include ``sink.router`` in the application.
    """
    return FastAPIRouteSink(prefix=prefix)


def _normalize_path(path: str) -> str:
    """Ensure a route path starts with "/"."""
    return path if path.startswith("/") else f"/{path}"


def _validate_middleware(middleware: Sequence[Any], *, method: str, path: str) -> None:
    for i, mw in enumerate(middleware):
        if not callable(mw):
            raise MiddlewareValidationError(
                f"Non-callable middleware at index {i} for {method.upper()} {path}"
            )
        if not inspect.iscoroutinefunction(mw):
            raise MiddlewareValidationError(
                f"Middleware at index {i} for {method.upper()} {path} must be async, "
                f"got sync function {getattr(mw, '__name__', type(mw).__name__)}"
            )


def _derive_tags(path: str) -> list[str]:
    """Derive OpenAPI tags from a URL path.

    Takes the first non-parameter segment from the path.

    Examples:
        /items/show -> ["items"]
        /admin/users/ -> ["admin"]
        / -> ["root"]
    """
    parts = [p for p in path.split("/") if p and not p.startswith("{")]
    return [parts[0]] if parts else ["root"]


def _make_middleware_route(
    middleware_stack: Sequence[Callable[..., Any]],
) -> type[APIRoute]:
    """Create a custom APIRoute subclass that wraps handlers with middleware.

    The wrapping happens in get_route_handler(), called AFTER FastAPI resolves
    dependency injection, so middleware receives (request, call_next).
    """

    class MiddlewareRoute(APIRoute):
        def get_route_handler(self) -> Callable[..., Any]:
            original_handler = super().get_route_handler()
            return build_middleware_chain(original_handler, middleware_stack)

    return MiddlewareRoute
