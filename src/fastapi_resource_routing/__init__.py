"""Resource route builder for FastAPI."""

# Primary API: the main entry points
from fastapi_resource_routing.core.extra import ExtraRoute, ExtraRouteDescriptor
from fastapi_resource_routing.core.resource import (
    Registration,
    ResourceConfig,
    ResourceRoutes,
    RouteSink,
    compute_registrations,
)

# Core types: for advanced users and type checking
from fastapi_resource_routing.core.routes import STANDARD_ROUTES, RouteName, StandardRoute

# Exceptions: for error handling
from fastapi_resource_routing.exceptions import (
    ControllerResolutionError,
    MiddlewareValidationError,
    ResourceRoutingError,
    RouteValidationError,
    UnknownRouteError,
)
from fastapi_resource_routing.fastapi.router import FastAPIRouteSink, create_resource_router

__all__ = [
    # Primary API
    "ResourceRoutes",
    "ExtraRoute",
    "create_resource_router",
    "FastAPIRouteSink",
    # Core types
    "ExtraRouteDescriptor",
    "Registration",
    "ResourceConfig",
    "RouteName",
    "RouteSink",
    "STANDARD_ROUTES",
    "StandardRoute",
    "compute_registrations",
    # Exceptions
    "ControllerResolutionError",
    "MiddlewareValidationError",
    "ResourceRoutingError",
    "RouteValidationError",
    "UnknownRouteError",
]

__version__ = "0.1.0"
