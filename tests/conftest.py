"""Shared pytest fixtures for fastapi-resource-routing tests."""

from pathlib import Path
from typing import Any

import pytest


class RecordingSink:
    """Route sink that records every registration call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, list[Any], Any]] = []

    def _record(self, method: str, path: str, middleware: list[Any], handler: Any) -> None:
        self.calls.append((method, path, middleware, handler))

    def get(self, path: str, middleware: list[Any], handler: Any) -> None:
        self._record("get", path, middleware, handler)

    def post(self, path: str, middleware: list[Any], handler: Any) -> None:
        self._record("post", path, middleware, handler)

    def patch(self, path: str, middleware: list[Any], handler: Any) -> None:
        self._record("patch", path, middleware, handler)

    def delete(self, path: str, middleware: list[Any], handler: Any) -> None:
        self._record("delete", path, middleware, handler)

    @property
    def paths(self) -> list[str]:
        return [call[1] for call in self.calls]


@pytest.fixture
def recording_sink() -> RecordingSink:
    """Return a fresh route sink recording (method, path, middleware, handler)."""
    return RecordingSink()


@pytest.fixture
def full_controller_source() -> str:
    """Return controller source defining all six standard handlers and ping."""
    return """
def index():
    return {"handler": "index"}

def store():
    return {"handler": "store"}

def show():
    return {"handler": "show"}

def delete():
    return {"handler": "delete"}

def update():
    return {"handler": "update"}

def status():
    return {"handler": "status"}

def ping():
    return {"handler": "ping"}
"""


@pytest.fixture
def create_controller_file(tmp_path: Path):
    """Create a <name>_controller.py file with given content.

    Returns a callable that accepts:
    - name: Controller name (e.g., "item")
    - content: Python code as string
    - parent_dir: Directory to write into (defaults to tmp_path / "controllers")

    Returns the Path to the created controller file.
    """

    def _create(name: str, content: str, parent_dir: Path | None = None) -> Path:
        target_dir = parent_dir or tmp_path / "controllers"
        target_dir.mkdir(parents=True, exist_ok=True)

        controller_file = target_dir / f"{name}_controller.py"
        controller_file.write_text(content)
        return controller_file

    return _create
