"""Extra routes attached to a resource beyond the six standard ones."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from fastapi_resource_routing.core.middleware import normalize_middleware

DEFAULT_METHOD = "get"


@dataclass(frozen=True)
class ExtraRouteDescriptor:
    """A finalized extra route, consumed by ResourceRoutes.add().

    Attributes:
        uri: Path suffix appended to the resource prefix after a "/".
        method: Lower-case HTTP method; the route sink must expose it.
        middleware: Route-specific middleware, run after global middleware.
        handler: Name of the controller attribute handling the route.
    """

    uri: str
    method: str
    middleware: tuple[Callable[..., Any], ...]
    handler: str


class ExtraRoute:
    """Fluent builder for a single extra route.

    Example:
        ping = ExtraRoute("ping").uri("ping").method("post").middleware([auth])
        ResourceRoutes(sink).prefix("widgets").controller("widget").add(ping)
    """

    def __init__(self, handler: str) -> None:
        self._handler = handler
        self._uri = ""
        self._method = DEFAULT_METHOD
        self._middleware: tuple[Callable[..., Any], ...] = ()

    def uri(self, suffix: str) -> "ExtraRoute":
        self._uri = suffix
        return self

    def method(self, http_method: str) -> "ExtraRoute":
        # Not validated: an unsupported method fails at the route sink.
        self._method = http_method.lower()
        return self

    def middleware(
        self,
        middleware: Callable[..., Any] | Sequence[Callable[..., Any]] | None,
    ) -> "ExtraRoute":
        self._middleware = normalize_middleware(
            middleware,
            source=f"extra route {self._handler!r}",
        )
        return self

    def create(self) -> ExtraRouteDescriptor:
        """Build the immutable descriptor for this route."""
        return ExtraRouteDescriptor(
            uri=self._uri,
            method=self._method,
            middleware=self._middleware,
            handler=self._handler,
        )

    def __repr__(self) -> str:
        return (
            f"ExtraRoute(handler={self._handler!r}, uri={self._uri!r}, "
            f"method={self._method!r}, middleware={len(self._middleware)})"
        )
