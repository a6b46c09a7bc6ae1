"""Tests for core.importer module."""

import sys
from pathlib import Path
from types import ModuleType, SimpleNamespace

import pytest

from fastapi_resource_routing.core.importer import (
    CONTROLLER_MODULE_SUFFIX,
    DEFAULT_CONTROLLER_PATH,
    controller_file_path,
    import_controller_module,
    resolve_controller,
    resolve_handler,
)
from fastapi_resource_routing.exceptions import ControllerResolutionError


class TestDefaults:
    """Test the controller naming convention constants."""

    def test_default_controller_path(self):
        assert DEFAULT_CONTROLLER_PATH == "controllers"

    def test_module_suffix(self):
        assert CONTROLLER_MODULE_SUFFIX == "_controller"


class TestControllerFilePath:
    """Tests for controller_file_path()."""

    def test_follows_naming_convention(self, tmp_path: Path):
        assert controller_file_path("item", tmp_path) == (tmp_path / "item_controller.py").resolve()

    def test_relative_path_resolves_against_cwd(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        assert controller_file_path("item", "controllers") == (
            tmp_path / "controllers" / "item_controller.py"
        ).resolve()

    def test_rejects_empty_name(self, tmp_path: Path):
        with pytest.raises(ControllerResolutionError, match="must not be empty"):
            controller_file_path("", tmp_path)

    def test_rejects_path_traversal(self, tmp_path: Path):
        with pytest.raises(ControllerResolutionError, match="Path traversal"):
            controller_file_path("../secrets/item", tmp_path)

    def test_rejects_absolute_name(self, tmp_path: Path):
        with pytest.raises(ControllerResolutionError, match="Path traversal"):
            controller_file_path("/etc/item", tmp_path)


class TestImportControllerModule:
    """Tests for import_controller_module()."""

    def test_imports_controller_file(self, tmp_path: Path, create_controller_file):
        create_controller_file("item", "def show(): return 'item'")

        module = import_controller_module("item", controller_path=tmp_path / "controllers")

        assert isinstance(module, ModuleType)
        assert module.show() == "item"

    def test_caches_module_in_sys_modules(self, tmp_path: Path, create_controller_file):
        create_controller_file("item", "def show(): pass")

        first = import_controller_module("item", controller_path=tmp_path / "controllers")
        second = import_controller_module("item", controller_path=tmp_path / "controllers")

        assert first is second
        assert sys.modules[first.__name__] is first

    def test_module_name_is_namespaced(self, tmp_path: Path, create_controller_file):
        create_controller_file("item", "def show(): pass")

        module = import_controller_module("item", controller_path=tmp_path / "controllers")

        assert module.__name__.startswith("_resource_controllers.")
        assert module.__name__.endswith("controllers.item_controller")

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(ControllerResolutionError, match="does not exist"):
            import_controller_module("missing", controller_path=tmp_path)

    def test_missing_file_hints_naming_convention(self, tmp_path: Path):
        with pytest.raises(ControllerResolutionError, match="<name>_controller.py"):
            import_controller_module("missing", controller_path=tmp_path)

    def test_syntax_error_is_wrapped(self, tmp_path: Path, create_controller_file):
        create_controller_file("broken", "def show(: pass")

        with pytest.raises(ControllerResolutionError, match="Failed to import") as exc_info:
            import_controller_module("broken", controller_path=tmp_path / "controllers")

        assert isinstance(exc_info.value.__cause__, SyntaxError)

    def test_failed_import_is_not_cached(self, tmp_path: Path, create_controller_file):
        create_controller_file("flaky", "raise RuntimeError('boom')")

        with pytest.raises(ControllerResolutionError, match="RuntimeError: boom"):
            import_controller_module("flaky", controller_path=tmp_path / "controllers")

        assert not any(name.endswith("flaky_controller") for name in sys.modules)

    def test_nested_controller_name(self, tmp_path: Path, create_controller_file):
        create_controller_file("item", "def show(): return 'admin'", parent_dir=tmp_path / "admin")

        module = import_controller_module("admin/item", controller_path=tmp_path)

        assert module.show() == "admin"


class TestResolveController:
    """Tests for resolve_controller()."""

    def test_registry_takes_precedence(self, tmp_path: Path, create_controller_file):
        create_controller_file("item", "def show(): return 'file'")
        registered = SimpleNamespace(show=lambda: "registry")

        controller = resolve_controller(
            "item",
            controller_path=tmp_path / "controllers",
            registry={"item": registered},
        )

        assert controller is registered

    def test_falls_back_to_file(self, tmp_path: Path, create_controller_file):
        create_controller_file("item", "def show(): return 'file'")

        controller = resolve_controller(
            "item",
            controller_path=tmp_path / "controllers",
            registry={"other": object()},
        )

        assert controller.show() == "file"

    def test_unresolvable_name_raises(self, tmp_path: Path):
        with pytest.raises(ControllerResolutionError):
            resolve_controller("nowhere", controller_path=tmp_path, registry={})


class TestResolveHandler:
    """Tests for resolve_handler()."""

    def test_returns_attribute(self):
        def show():
            return "ok"

        assert resolve_handler(SimpleNamespace(show=show), "show", controller_name="item") is show

    def test_missing_attribute_raises(self):
        with pytest.raises(ControllerResolutionError, match="'item' has no callable handler 'status'"):
            resolve_handler(SimpleNamespace(), "status", controller_name="item")

    def test_non_callable_attribute_raises(self):
        with pytest.raises(ControllerResolutionError, match="no callable handler 'index'"):
            resolve_handler(SimpleNamespace(index="not callable"), "index", controller_name="item")

    def test_class_controller_methods(self):
        class ItemController:
            @staticmethod
            def show():
                return "show"

        assert resolve_handler(ItemController, "show", controller_name="item") is ItemController.show
