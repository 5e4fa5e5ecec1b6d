# tests/test_roles.py
"""
Tests for the role taxonomy.
"""

import threading

import pytest

from uiauto_ax.element import Application, Element, SystemWide
from uiauto_ax.roles import ROLES, RoleRegistry, class_name_for


@pytest.fixture
def registry():
    reg = RoleRegistry()
    reg.register("Element", Element)
    return reg


class TestResolve:
    """Tests for role chain resolution."""

    def test_builtin_roles(self):
        """Should ship the base, application and system-wide classes."""
        assert ROLES.resolve(["Element"]) is Element
        assert ROLES.resolve(["Application"]) is Application
        assert ROLES.resolve(["SystemWide"]) is SystemWide

    def test_empty_chain_is_base(self, registry):
        """Should fall back to the base class for an empty chain."""
        assert registry.resolve([]) is Element

    def test_synthesizes_subclass(self, registry):
        """Should create a subclass of the base for an unknown role."""
        cls = registry.resolve(["Slider"])
        assert cls.__name__ == "Slider"
        assert issubclass(cls, Element)
        assert registry.is_registered("Slider")

    def test_parent_follows_chain(self, registry):
        """Should parent a subrole class on its role class."""
        close = registry.resolve(["CloseButton", "Button"])
        assert close.__mro__[1] is registry.get("Button")
        assert close.__mro__[2] is Element

    def test_registration_is_idempotent(self, registry):
        """Should return the same class on every resolution."""
        first = registry.resolve(["Button"])
        assert registry.resolve(["Button"]) is first
        assert registry.resolve(["Button", "Whatever"]) is first

    def test_existing_parent_is_reused(self, registry):
        """Should not create a second class for an already known parent."""
        button = registry.resolve(["Button"])
        minimize = registry.resolve(["MinimizeButton", "Button"])
        assert issubclass(minimize, button)

    def test_invalid_role_names_are_sanitized(self, registry):
        """Should turn role names into valid class names."""
        assert class_name_for("Web-Area") == "Web_Area"
        assert class_name_for("3DView") == "_3DView"
        assert registry.resolve(["Web-Area"]).__name__ == "Web_Area"

    def test_missing_base_class(self):
        """Should complain when the base class was never registered."""
        with pytest.raises(RuntimeError):
            RoleRegistry().resolve(["Button"])


class TestRegister:
    """Tests for explicit registration."""

    def test_first_writer_wins(self, registry):
        """Should keep the first class registered under a name."""
        class First(Element):
            pass

        class Second(Element):
            pass

        assert registry.register("Custom", First) is First
        assert registry.register("Custom", Second) is First
        assert registry.get("Custom") is First

    def test_registered_snapshot(self, registry):
        """Should return a copy of the taxonomy."""
        snapshot = registry.registered()
        snapshot["Bogus"] = object
        assert not registry.is_registered("Bogus")

    def test_concurrent_resolution(self, registry):
        """Should bind one class per role when many threads resolve it at once."""
        barrier = threading.Barrier(10)
        results = []

        def worker():
            barrier.wait()
            results.append(registry.resolve(["Popover", "Group"]))

        threads = [threading.Thread(target=worker) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(set(results)) == 1
        assert issubclass(results[0], registry.get("Group"))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
