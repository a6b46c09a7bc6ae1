"""Exception hierarchy for resource routing errors."""


class ResourceRoutingError(Exception):
    """Base exception for all resource routing errors.

    This is the parent class for all exceptions raised by the
    fastapi-resource-routing package. Catching this exception
    will catch all routing-related errors.

    Example:
        try:
            ResourceRoutes(sink).prefix("items").controller("item").resource()
        except ResourceRoutingError as e:
            logger.error(f"Failed to register resource: {e}")
    """


class ControllerResolutionError(ResourceRoutingError):
    """Raised when a controller or one of its handlers cannot be resolved.

    This is a fatal configuration error raised while finalizing a
    resource, before any route is registered:
        - The controller file does not exist
        - The controller file fails to import
        - The controller name is missing from an explicit registry
        - A handler attribute is missing or not callable

    Example:
        ControllerResolutionError(
            "Controller 'item' has no callable handler 'status'"
        )
    """


class UnknownRouteError(ResourceRoutingError):
    """Raised for an unrecognized resource route name in strict mode.

    Without strict mode, unknown names passed to except_(), only() and
    middleware() are ignored.

    Example:
        UnknownRouteError("Unknown resource route 'edit'")
    """


class RouteValidationError(ResourceRoutingError):
    """Raised when a builder receives an invalid argument in strict mode.

    Example:
        RouteValidationError(
            "add() expects an ExtraRoute or ExtraRouteDescriptor, got dict"
        )
    """


class MiddlewareValidationError(ResourceRoutingError):
    """Raised when middleware configuration is invalid.

    This exception is raised when:
        - A middleware value is neither a callable nor a list/tuple
        - The FastAPI route sink receives a non-callable middleware
        - The FastAPI route sink receives sync middleware

    Example:
        MiddlewareValidationError(
            "Middleware at index 1 for GET /items/ must be async"
        )
    """
