"""Middleware primitives for resource routing.

Normalizes middleware values supplied to the builders and assembles
request-level middleware chains for the FastAPI route sink.
Zero framework dependencies.
"""

from collections.abc import Callable, Sequence
from typing import Any

from fastapi_resource_routing.exceptions import MiddlewareValidationError


def normalize_middleware(
    middleware_attr: Any,
    *,
    source: str = "",
) -> tuple[Callable[..., Any], ...]:
    """Normalize a middleware value to a tuple of callables.

    Accepts: None, single callable, list, or tuple.
    Returns: tuple of callables (empty if None).

    Args:
        middleware_attr: The middleware value to normalize.
        source: Context for error messages (e.g., "route 'index'").

    Raises:
        MiddlewareValidationError: If middleware_attr is not a valid type.
    """
    if middleware_attr is None:
        return ()
    if callable(middleware_attr) and not isinstance(middleware_attr, (list, tuple)):
        return (middleware_attr,)
    if isinstance(middleware_attr, (list, tuple)):
        return tuple(middleware_attr)
    raise MiddlewareValidationError(
        f"{source + ': ' if source else ''}middleware must be a list or callable, "
        f"got {type(middleware_attr).__name__}"
    )


def build_middleware_chain(
    handler: Callable[..., Any],
    middleware_stack: Sequence[Callable[..., Any]],
) -> Callable[..., Any]:
    """Wrap a request handler with a middleware chain.

    Composes middleware in order so that the first middleware in the list
    is the outermost (executes first). Each middleware receives (request, call_next)
    where call_next invokes the next middleware or handler.

    Args:
        handler: The request handler function.
        middleware_stack: Ordered sequence of middleware (outermost first).

    Returns:
        A wrapped handler function that executes the middleware chain.
        If middleware_stack is empty, returns the handler unchanged.
    """
    if not middleware_stack:
        return handler

    chain = handler
    for mw in reversed(middleware_stack):
        chain = _wrap_with_middleware(chain, mw)
    return chain


def _wrap_with_middleware(
    next_handler: Callable[..., Any],
    middleware: Callable[..., Any],
) -> Callable[..., Any]:
    """Wrap a handler with a single middleware function."""

    async def wrapped(request: Any) -> Any:
        async def call_next(req: Any) -> Any:
            return await next_handler(req)

        return await middleware(request, call_next)

    # Preserve metadata for debugging
    wrapped.__name__ = (
        f"{getattr(middleware, '__name__', 'middleware')}_wrapping_"
        f"{getattr(next_handler, '__name__', 'handler')}"
    )
    wrapped.__qualname__ = wrapped.__name__

    return wrapped
