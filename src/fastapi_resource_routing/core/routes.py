"""Standard resource routes and their enable/disable toggles.

Every resource exposes up to six conventional routes:

    | Name   | Method | Path      | Handler |
    |--------|--------|-----------|---------|
    | index  | GET    | /         | index   |
    | store  | POST   | /store    | store   |
    | show   | GET    | /show     | show    |
    | delete | DELETE | /delete   | delete  |
    | update | PATCH  | /update   | update  |
    | status | PATCH  | /status   | status  |
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, fields
from enum import Enum

from fastapi_resource_routing.exceptions import UnknownRouteError

logger = logging.getLogger(__name__)


class RouteName(str, Enum):
    """Name of a standard resource route.

    Member order is the registration order.
    """

    INDEX = "index"
    STORE = "store"
    SHOW = "show"
    DELETE = "delete"
    UPDATE = "update"
    STATUS = "status"


@dataclass(frozen=True)
class StandardRoute:
    """A standard resource route: HTTP method and path suffix.

    The controller handler has the same name as the route.
    """

    name: RouteName
    method: str
    suffix: str

    @property
    def handler(self) -> str:
        """Name of the controller attribute handling this route."""
        return self.name.value


STANDARD_ROUTES: tuple[StandardRoute, ...] = (
    StandardRoute(RouteName.INDEX, "get", "/"),
    StandardRoute(RouteName.STORE, "post", "/store"),
    StandardRoute(RouteName.SHOW, "get", "/show"),
    StandardRoute(RouteName.DELETE, "delete", "/delete"),
    StandardRoute(RouteName.UPDATE, "patch", "/update"),
    StandardRoute(RouteName.STATUS, "patch", "/status"),
)


@dataclass
class RouteToggles:
    """Enabled flag for each of the six standard routes.

    All routes are enabled by default.
    """

    index: bool = True
    store: bool = True
    show: bool = True
    delete: bool = True
    update: bool = True
    status: bool = True

    def disable(self, names: Iterable[RouteName]) -> None:
        """Disable the given routes, leaving the others unchanged."""
        for name in names:
            setattr(self, name.value, False)

    def invert(self) -> None:
        """Flip every flag."""
        for field in fields(self):
            setattr(self, field.name, not getattr(self, field.name))

    def is_enabled(self, name: RouteName) -> bool:
        return bool(getattr(self, name.value))

    def enabled(self) -> tuple[RouteName, ...]:
        """Enabled route names in registration order."""
        return tuple(name for name in RouteName if self.is_enabled(name))


def coerce_route_name(name: str | RouteName, *, strict: bool = False) -> RouteName | None:
    """Convert a string or RouteName into a RouteName.

    Args:
        name: Route name such as "show" or RouteName.SHOW.
        strict: Raise instead of returning None for unknown names.

    Returns:
        The matching RouteName, or None if the name is not recognized.

    Raises:
        UnknownRouteError: If strict and the name is not recognized.
    """
    if isinstance(name, RouteName):
        return name
    try:
        return RouteName(name)
    except ValueError:
        if strict:
            valid = ", ".join(r.value for r in RouteName)
            raise UnknownRouteError(
                f"Unknown resource route {name!r}. Expected one of: {valid}"
            ) from None
        logger.warning("Ignoring unknown resource route", extra={"route": name})
        return None


def coerce_route_names(
    names: str | RouteName | Iterable[str | RouteName],
    *,
    strict: bool = False,
) -> list[RouteName]:
    """Convert route names, dropping unknown ones unless strict.

    A bare string is treated as a single name rather than as a sequence
    of characters.

    Raises:
        UnknownRouteError: If strict and any name is not recognized.
    """
    if isinstance(names, str):
        names = [names]

    result: list[RouteName] = []
    for name in names:
        coerced = coerce_route_name(name, strict=strict)
        if coerced is not None:
            result.append(coerced)
    return result
