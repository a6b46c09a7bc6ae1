"""Resource route builder.

Accumulates a resource's configuration through chained calls and, on
finalize, registers the resulting routes on a route sink. The route set
itself is computed by a pure function so it can be inspected without a
live router.
"""

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from fastapi_resource_routing.core.extra import ExtraRoute, ExtraRouteDescriptor
from fastapi_resource_routing.core.importer import (
    DEFAULT_CONTROLLER_PATH,
    resolve_controller,
    resolve_handler,
)
from fastapi_resource_routing.core.middleware import normalize_middleware
from fastapi_resource_routing.core.routes import (
    STANDARD_ROUTES,
    RouteName,
    RouteToggles,
    coerce_route_name,
    coerce_route_names,
)
from fastapi_resource_routing.exceptions import RouteValidationError

logger = logging.getLogger(__name__)

Middleware = Callable[..., Any]


class RouteSink(Protocol):
    """The router collaborator receiving registrations.

    Each method registers one route: (path, middleware, handler). Extra
    routes may use any other verb the sink exposes, such as put, head or
    options on FastAPIRouteSink. A sink may also define
    ``validate(registrations)``, called with every registration of a
    resource before the first one is issued.
    """

    def get(self, path: str, middleware: list[Middleware], handler: Callable[..., Any]) -> Any: ...

    def post(self, path: str, middleware: list[Middleware], handler: Callable[..., Any]) -> Any: ...

    def patch(self, path: str, middleware: list[Middleware], handler: Callable[..., Any]) -> Any: ...

    def delete(self, path: str, middleware: list[Middleware], handler: Callable[..., Any]) -> Any: ...


@dataclass(frozen=True)
class ResourceConfig:
    """Snapshot of a resource's builder configuration.

    Attributes:
        prefix: Path segment prepended to every route of the resource.
        controller: Name used to resolve the controller.
        enabled: Enabled standard routes, in registration order.
        middleware: Route-specific middleware per standard route.
        extra_routes: Extra routes in insertion order.
    """

    prefix: str = ""
    controller: str = ""
    enabled: tuple[RouteName, ...] = tuple(RouteName)
    middleware: Mapping[RouteName, tuple[Middleware, ...]] = field(default_factory=dict)
    extra_routes: tuple[ExtraRouteDescriptor, ...] = ()


@dataclass(frozen=True)
class Registration:
    """A single route registration to be issued to the route sink.

    Attributes:
        method: Lower-case HTTP method, also the sink method name.
        path: Full route path.
        middleware: Global middleware followed by route-specific middleware.
        handler: Controller handler for the route.
        name: Standard route name, or the handler name for extra routes.
    """

    method: str
    path: str
    middleware: tuple[Middleware, ...]
    handler: Callable[..., Any]
    name: str


def compute_registrations(
    config: ResourceConfig,
    controller: Any,
    global_middleware: Sequence[Middleware] = (),
) -> list[Registration]:
    """Compute the ordered route registrations for a resource.

    Standard routes come first in the order index, store, show, delete,
    update, status (enabled ones only), then extra routes in insertion
    order. Every handler is resolved before returning.

    Args:
        config: The resource configuration.
        controller: The resolved controller object.
        global_middleware: Middleware applied before route-specific middleware.

    Returns:
        List of Registration objects in registration order.

    Raises:
        ControllerResolutionError: If a handler is missing from the controller.
    """
    global_mw = tuple(global_middleware)
    registrations: list[Registration] = []

    for standard in STANDARD_ROUTES:
        if standard.name not in config.enabled:
            continue
        registrations.append(
            Registration(
                method=standard.method,
                path=f"{config.prefix}{standard.suffix}",
                middleware=(*global_mw, *config.middleware.get(standard.name, ())),
                handler=resolve_handler(
                    controller, standard.handler, controller_name=config.controller
                ),
                name=standard.name.value,
            )
        )

    for extra in config.extra_routes:
        registrations.append(
            Registration(
                method=extra.method,
                path=f"{config.prefix}/{extra.uri}",
                middleware=(*global_mw, *extra.middleware),
                handler=resolve_handler(controller, extra.handler, controller_name=config.controller),
                name=extra.handler,
            )
        )

    return registrations


def emit_registrations(router: RouteSink, registrations: Iterable[Registration]) -> None:
    """Issue each registration to the route sink, in order.

    A sink exposing ``validate(registrations)`` is handed the full list
    before the first registration, so it can reject the resource as a whole.

    Raises:
        AttributeError: If the sink has no method for a registration's HTTP method.
    """
    registrations = list(registrations)

    validate = getattr(router, "validate", None)
    if validate is not None:
        validate(registrations)

    for registration in registrations:
        register = getattr(router, registration.method)
        register(registration.path, list(registration.middleware), registration.handler)

        logger.debug(
            "Registered route",
            extra={
                "method": registration.method.upper(),
                "path": registration.path,
                "handler": registration.name,
                "middleware_count": len(registration.middleware),
            },
        )


class ResourceRoutes:
    """Fluent builder for a resource's routes.

    Example:
        ResourceRoutes(sink).prefix("items").controller("item").except_(
            ["delete"]
        ).middleware({"store": [auth_required]}).resource([log_request])

    Args:
        router: Route sink receiving the registrations.
        controller_path: Directory holding ``<name>_controller.py`` files.
        registry: Optional mapping of controller name to controller object,
            consulted before controller files.
        strict: Raise on unknown route names and invalid add() arguments
            instead of ignoring them.
    """

    def __init__(
        self,
        router: RouteSink,
        controller_path: str | Path = DEFAULT_CONTROLLER_PATH,
        *,
        registry: Mapping[str, Any] | None = None,
        strict: bool = False,
    ) -> None:
        self._router = router
        self._controller_path = controller_path
        self._registry = registry
        self._strict = strict

        self._prefix = ""
        self._controller = ""
        self._toggles = RouteToggles()
        self._middleware: dict[RouteName, tuple[Middleware, ...]] = {
            name: () for name in RouteName
        }
        self._extra_routes: list[ExtraRouteDescriptor] = []

    def except_(self, names: str | Iterable[str | RouteName]) -> "ResourceRoutes":
        """Disable the given standard routes; others are left unchanged."""
        self._toggles.disable(coerce_route_names(names, strict=self._strict))
        return self

    exclude = except_

    def only(self, names: str | Iterable[str | RouteName]) -> "ResourceRoutes":
        """Keep only the given standard routes.

        Marks the given routes disabled and then inverts every toggle.
        Starting from the defaults this enables exactly the given routes;
        after except_() the two calls combine like an XOR.
        """
        self._toggles.disable(coerce_route_names(names, strict=self._strict))
        self._toggles.invert()
        return self

    def prefix(self, value: str) -> "ResourceRoutes":
        self._prefix = value
        return self

    def controller(self, name: str) -> "ResourceRoutes":
        self._controller = name
        return self

    def middleware(
        self,
        middleware: Mapping[str | RouteName, Middleware | Sequence[Middleware]],
    ) -> "ResourceRoutes":
        """Replace the middleware of individual standard routes.

        Args:
            middleware: Mapping of route name to middleware list. Keys that
                are not standard route names are ignored.
        """
        for key, value in middleware.items():
            name = coerce_route_name(key, strict=self._strict)
            if name is None:
                continue
            self._middleware[name] = normalize_middleware(value, source=f"route {name.value!r}")
        return self

    def add(self, extra: ExtraRoute | ExtraRouteDescriptor) -> "ResourceRoutes":
        """Append an extra route.

        Accepts an ExtraRoute builder (finalized here) or a descriptor.
        Anything else is ignored.
        """
        if isinstance(extra, ExtraRoute):
            extra = extra.create()

        if not isinstance(extra, ExtraRouteDescriptor):
            if self._strict:
                raise RouteValidationError(
                    f"add() expects an ExtraRoute or ExtraRouteDescriptor, "
                    f"got {type(extra).__name__}"
                )
            logger.warning(
                "Ignoring extra route that is not an ExtraRoute",
                extra={"type": type(extra).__name__, "prefix": self._prefix},
            )
            return self

        self._extra_routes.append(extra)
        return self

    @property
    def config(self) -> ResourceConfig:
        """Snapshot of the current configuration."""
        return ResourceConfig(
            prefix=self._prefix,
            controller=self._controller,
            enabled=self._toggles.enabled(),
            middleware=dict(self._middleware),
            extra_routes=tuple(self._extra_routes),
        )

    def registrations(
        self,
        global_middleware: Middleware | Sequence[Middleware] | None = (),
    ) -> list[Registration]:
        """Resolve the controller and compute the registrations.

        Nothing is registered on the route sink.

        Raises:
            ControllerResolutionError: If the controller or a handler
                cannot be resolved.
        """
        global_mw = normalize_middleware(global_middleware, source="global middleware")
        controller = resolve_controller(
            self._controller,
            controller_path=self._controller_path,
            registry=self._registry,
        )
        return compute_registrations(self.config, controller, global_mw)

    def resource(
        self,
        global_middleware: Middleware | Sequence[Middleware] | None = (),
    ) -> None:
        """Register the resource's routes on the route sink.

        Every handler is resolved, and the sink's validate() hook run,
        before the first registration, so a failure leaves the sink untouched.

        Args:
            global_middleware: Middleware run before each route's own middleware.

        Raises:
            ControllerResolutionError: If the controller or a handler
                cannot be resolved.
            MiddlewareValidationError: If the sink rejects a middleware.
        """
        registrations = self.registrations(global_middleware)
        emit_registrations(self._router, registrations)

        logger.info(
            "Resource registration complete",
            extra={
                "prefix": self._prefix or "(none)",
                "controller": self._controller,
                "route_count": len(registrations),
            },
        )

    def __repr__(self) -> str:
        return (
            f"ResourceRoutes(prefix={self._prefix!r}, controller={self._controller!r}, "
            f"enabled={[name.value for name in self._toggles.enabled()]}, "
            f"extra_routes={len(self._extra_routes)})"
        )
