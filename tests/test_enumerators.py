# tests/test_enumerators.py
"""
Tests for tree traversal order and failure isolation.
"""

import pytest

from uiauto_ax.enumerators import BreadthFirst, DepthFirst, children_of
from uiauto_ax.exceptions import ServiceTimeoutError


def label(element):
    return element.attribute("title") if element.respond_to("title") else element.attribute("value")


def titles(elements):
    return [label(e) for e in elements]


class TestBreadthFirst:
    """Tests for breadth-first traversal."""

    def test_order(self, app):
        """Should visit level by level, children in service order."""
        assert titles(BreadthFirst(app)) == ["Main", "Sidebar", "OK", "Close", "Help", "Hello world"]

    def test_root_excluded(self, app):
        """Should not yield the root."""
        assert app not in list(BreadthFirst(app))

    def test_restartable(self, app):
        """Should start over on every iteration."""
        walk = BreadthFirst(app)
        assert list(walk) == list(walk)

    def test_find_stops_early(self, service, app):
        """Should stop expanding as soon as a match is found."""
        service.calls.clear()
        found = BreadthFirst(app).find(lambda e: e.attribute("title") == "Sidebar")
        assert found.title == "Sidebar"
        expanded = [c[1] for c in service.calls if c[0] == "read_attribute" and c[2] == "AXChildren"]
        assert expanded == [app.handle]

    def test_find_nothing(self, app):
        """Should return None when nothing matches."""
        assert BreadthFirst(app).find(lambda e: False) is None

    def test_leaf_root(self, element):
        """Should yield nothing under a leaf."""
        assert list(BreadthFirst(element("ok"))) == []


class TestDepthFirst:
    """Tests for depth-first traversal."""

    def test_order(self, app):
        """Should visit in pre-order."""
        assert titles(DepthFirst(app)) == ["Main", "OK", "Close", "Sidebar", "Help", "Hello world"]

    def test_each_with_level(self, app):
        """Should report depth relative to the root."""
        levels = [(label(e), depth) for e, depth in DepthFirst(app).each_with_level()]
        assert levels == [
            ("Main", 1), ("OK", 2), ("Close", 2),
            ("Sidebar", 1), ("Help", 2), ("Hello world", 2),
        ]

    def test_find(self, app):
        """Should return the first pre-order match."""
        found = DepthFirst(app).find(lambda e: type(e).__name__ == "Button")
        assert found.title == "OK"


class TestFailureIsolation:
    """Tests for nodes whose children cannot be read."""

    def test_broken_children_is_leaf(self, service, app):
        """Should skip an unreadable subtree and keep walking."""
        service.break_children(service.handle_named("main"))
        assert titles(BreadthFirst(app)) == ["Main", "Sidebar", "Help", "Hello world"]
        assert titles(DepthFirst(app)) == ["Main", "Sidebar", "Help", "Hello world"]

    def test_timeout_is_isolated(self, service, app):
        """Should treat a messaging timeout like any other children failure."""
        sidebar = service.handle_named("sidebar")
        service.break_children(sidebar, ServiceTimeoutError(sidebar, 1.0))
        assert titles(BreadthFirst(app)) == ["Main", "Sidebar", "OK", "Close"]

    def test_children_of_without_children(self, element):
        """Should return an empty list for nodes without children."""
        assert children_of(element("ok")) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
