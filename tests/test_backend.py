# tests/test_backend.py
"""
Tests for the in-memory Node Handle Service.
"""

import pytest

from uiauto_ax.backends.memory import BoxedValue, MemoryHandle, MemoryHandleService
from uiauto_ax.exceptions import ConfigError, InvalidHandleError
from uiauto_ax.values import Point, Range, Rect, Size


class TestFixtureLoading:
    """Tests for building trees from fixtures."""

    def test_from_yaml(self, fixture_file):
        """Should load the same tree from YAML."""
        service = MemoryHandleService.from_yaml(str(fixture_file))
        assert service.read_attribute(service.handle_named("ok"), "AXTitle") == "OK"

    def test_several_applications(self):
        """Should accept a list of applications."""
        service = MemoryHandleService.from_dict({
            "applications": [
                {"role": "AXApplication", "pid": 1},
                {"role": "AXApplication", "pid": 2},
            ],
        })
        assert len(service.applications) == 2
        assert service.application_handle(2) == service.applications[1]

    def test_pid_inherited(self, service):
        """Should give children their application's pid."""
        assert service.pid_of(service.handle_named("label")) == 42

    def test_values_parsed(self, service):
        """Should turn boxed and reference values into wire values."""
        main = service.node(service.handle_named("main"))
        assert main.attributes["AXSize"] == BoxedValue("size", (800, 600))
        app = service.node(service.handle_named("app"))
        assert app.attributes["AXFocusedUIElement"] == service.handle_named("ok")

    @pytest.mark.parametrize("data, message", [
        ({"role": "AXWindow", "title": "x"}, "unknown node keys"),
        ({"attributes": {}}, "'role'"),
        ({"role": "AXWindow", "children": "nope"}, "must be a list"),
        ({"role": "AXWindow", "attributes": {"AXSize": {"size": [1]}}}, "needs 2 numbers"),
        ({"role": "AXWindow", "attributes": {"AXParentWindow": {"ref": "ghost"}}}, "unknown node id"),
        ({"applications": []}, "non-empty list"),
    ])
    def test_invalid_fixtures(self, data, message):
        """Should reject malformed fixtures with ConfigError."""
        with pytest.raises(ConfigError) as exc_info:
            MemoryHandleService.from_dict(data)
        assert message in str(exc_info.value)

    def test_duplicate_ids(self):
        """Should reject duplicate node ids."""
        with pytest.raises(ConfigError):
            MemoryHandleService.from_dict({
                "role": "AXApplication",
                "children": [{"role": "AXButton", "id": "a"}, {"role": "AXButton", "id": "a"}],
            })

    def test_unreadable_file(self, tmp_path):
        """Should raise ConfigError for a missing fixture."""
        with pytest.raises(ConfigError):
            MemoryHandleService.from_yaml(str(tmp_path / "missing.yaml"))


class TestDerivedAttributes:
    """Tests for structure derived attributes."""

    def test_role_and_subrole(self, service):
        """Should report the role and the subrole."""
        close = service.handle_named("close")
        assert service.role_of(close) == ["AXCloseButton", "AXButton"]
        assert service.read_attribute(close, "AXRole") == "AXButton"
        assert service.read_attribute(close, "AXSubrole") == "AXCloseButton"

    def test_children_only_when_declared(self, service):
        """Should report AXChildren only for nodes declaring children."""
        assert "AXChildren" in service.attribute_names(service.handle_named("main"))
        assert "AXChildren" not in service.attribute_names(service.handle_named("ok"))

    def test_parent(self, service):
        """Should report the parent handle."""
        ok = service.handle_named("ok")
        assert service.read_attribute(ok, "AXParent") == service.handle_named("main")
        assert "AXParent" not in service.attribute_names(service.handle_named("app"))


class TestMutation:
    """Tests for tree changes and failure injection."""

    def test_remove(self, service):
        """Should detach and invalidate a subtree."""
        main = service.handle_named("main")
        ok = service.handle_named("ok")
        service.remove(main)
        assert service.read_attribute(service.handle_named("app"), "AXChildren") == [service.handle_named("sidebar")]
        with pytest.raises(InvalidHandleError):
            service.read_attribute(ok, "AXTitle")

    def test_invalidate(self, service):
        """Should hide invalid nodes from their parent's children."""
        service.invalidate(service.handle_named("ok"))
        children = service.read_attribute(service.handle_named("main"), "AXChildren")
        assert children == [service.handle_named("close")]

    def test_unknown_handle(self, service):
        """Should refuse handles it never issued."""
        with pytest.raises(InvalidHandleError):
            service.role_of(MemoryHandle(999))
        with pytest.raises(InvalidHandleError):
            service.role_of("AXButton")

    def test_write_rules(self, service):
        """Should refuse writes to missing or read only attributes."""
        label = service.handle_named("label")
        assert service.write_attribute(label, "AXValue", "Bye") is True
        assert service.write_attribute(label, "AXTitle", "Bye") is False
        assert service.write_attribute(service.handle_named("ok"), "AXTitle", "x") is False


class TestBoxing:
    """Tests for box and unbox."""

    @pytest.mark.parametrize("value", [Point(1, 2), Size(3, 4), Rect(Point(1, 2), Size(3, 4)), Range(5, 6)])
    def test_box(self, service, value):
        """Should box every struct kind."""
        assert service.unbox(service.box(value)) == value

    def test_box_rejects_other_values(self, service):
        """Should only box structs."""
        with pytest.raises(TypeError):
            service.box("text")


class TestHitTesting:
    """Tests for element_at."""

    def test_within_window(self, service):
        """Should pick the deepest node containing the point."""
        assert service.element_at(service.system_wide_handle(), Point(15, 25)) == service.handle_named("ok")
        assert service.element_at(service.system_wide_handle(), Point(300, 300)) == service.handle_named("main")

    def test_scoped_to_application(self, service):
        """Should search under the given node only."""
        assert service.element_at(service.handle_named("sidebar"), Point(15, 25)) is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
