"""Controller resolution for resource routing.

Resolves a controller name to a controller object, either from an
explicit registry or by importing ``<controller_path>/<name>_controller.py``.
Handlers are looked up as attributes of the resolved controller.
"""

import importlib.util
import logging
import sys
from collections.abc import Callable, Mapping
from pathlib import Path
from types import ModuleType
from typing import Any

from fastapi_resource_routing.exceptions import ControllerResolutionError

logger = logging.getLogger(__name__)

DEFAULT_CONTROLLER_PATH = "controllers"

CONTROLLER_MODULE_SUFFIX = "_controller"

# Parent package for dynamically imported controller modules
_MODULE_NAMESPACE = "_resource_controllers"


def controller_file_path(name: str, controller_path: str | Path) -> Path:
    """Compute the controller file for a controller name.

    Args:
        name: Controller name (e.g., "item").
        controller_path: Directory holding controller files. Relative
            paths are resolved against the current working directory.

    Returns:
        Absolute path to ``<controller_path>/<name>_controller.py``.

    Raises:
        ControllerResolutionError: If the name is empty or contains a
            path traversal.
    """
    if not name:
        raise ControllerResolutionError("Controller name must not be empty")

    relative = Path(f"{name}{CONTROLLER_MODULE_SUFFIX}.py")
    if ".." in relative.parts or relative.is_absolute():
        raise ControllerResolutionError(f"Path traversal detected in controller name: {name!r}")

    return (Path(controller_path) / relative).resolve()


def _path_to_module_name(file_path: Path) -> str:
    """Convert a controller file path to a deterministic module name.

    Args:
        file_path: Absolute path to the controller file.

    Returns:
        Dot-separated module name under the controller namespace.
    """
    try:
        rel_path = file_path.relative_to(Path.cwd())
    except ValueError:
        rel_path = file_path

    parts = [p for p in rel_path.with_suffix("").parts if p != rel_path.anchor]

    converted = []
    for part in parts:
        safe = part.replace("-", "_").replace(".", "_").replace(" ", "_")
        converted.append(safe)

    return ".".join([_MODULE_NAMESPACE, *converted])


def _register_parent_packages(module_name: str) -> None:
    """Register parent packages in sys.modules for nested module names."""
    parts = module_name.split(".")
    for i in range(1, len(parts)):
        parent_name = ".".join(parts[:i])
        if parent_name not in sys.modules:
            # Create a placeholder namespace package
            parent_module = ModuleType(parent_name)
            parent_module.__path__ = []
            parent_module.__package__ = parent_name
            sys.modules[parent_name] = parent_module


def _import_module_from_file(
    file_path: Path,
    module_name: str,
) -> ModuleType:
    """Low-level module import from file path.

    Handles spec creation, sys.modules registration, and error cleanup.

    Raises:
        ControllerResolutionError: If spec creation fails or module execution fails.
    """
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    if spec is None or spec.loader is None:
        raise ControllerResolutionError(f"Cannot create module spec for: {file_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module

    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        del sys.modules[module_name]
        raise ControllerResolutionError(
            f"Failed to import controller module: {file_path}\n"
            f"Error: {type(exc).__name__}: {exc}"
        ) from exc

    return module


def import_controller_module(
    name: str,
    *,
    controller_path: str | Path = DEFAULT_CONTROLLER_PATH,
) -> ModuleType:
    """Import the controller module for a controller name.

    Modules are cached in sys.modules, so resolving the same controller
    twice returns the same module object.

    Args:
        name: Controller name (e.g., "item").
        controller_path: Directory holding controller files.

    Returns:
        The imported controller module.

    Raises:
        ControllerResolutionError: If the file doesn't exist or import fails.
    """
    file_path = controller_file_path(name, controller_path)

    if not file_path.is_file():
        raise ControllerResolutionError(
            f"Controller module does not exist: {file_path}\n"
            f"  Controller: {name!r}\n"
            f"  Hint: controller files are named <name>{CONTROLLER_MODULE_SUFFIX}.py"
        )

    module_name = _path_to_module_name(file_path)

    if module_name in sys.modules:
        return sys.modules[module_name]

    _register_parent_packages(module_name)

    module = _import_module_from_file(file_path, module_name)

    parts = module_name.split(".")
    parent_name = ".".join(parts[:-1])
    if parent_name in sys.modules:
        setattr(sys.modules[parent_name], parts[-1], module)

    logger.debug(
        "Imported controller module",
        extra={"controller": name, "file": str(file_path), "module_name": module_name},
    )

    return module


def resolve_controller(
    name: str,
    *,
    controller_path: str | Path = DEFAULT_CONTROLLER_PATH,
    registry: Mapping[str, Any] | None = None,
) -> Any:
    """Resolve a controller name to a controller object.

    An explicit registry is consulted first; names it doesn't contain
    fall back to importing the controller file.

    Args:
        name: Controller name.
        controller_path: Directory holding controller files.
        registry: Optional mapping of controller name to controller object
            (module, class or instance).

    Returns:
        The controller object whose attributes are the route handlers.

    Raises:
        ControllerResolutionError: If the controller cannot be resolved.
    """
    if registry is not None and name in registry:
        return registry[name]
    return import_controller_module(name, controller_path=controller_path)


def resolve_handler(controller: Any, attr: str, *, controller_name: str) -> Callable[..., Any]:
    """Look up a route handler on a controller.

    Raises:
        ControllerResolutionError: If the attribute is missing or not callable.
    """
    handler = getattr(controller, attr, None)
    if handler is None or not callable(handler):
        raise ControllerResolutionError(
            f"Controller {controller_name!r} has no callable handler {attr!r}"
        )
    return handler
