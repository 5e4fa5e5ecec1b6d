# tests/test_massager.py
"""
Tests for raw value massaging.
"""

import pytest

from uiauto_ax.backends.memory import BoxedValue, MemoryHandle
from uiauto_ax.element import Application, Element
from uiauto_ax.massager import process, process_array, process_element, to_wire
from uiauto_ax.values import Point, Range, Rect, Size


class TestProcess:
    """Tests for process()."""

    def test_none_passes_through(self, service):
        """Should keep a missing value as None."""
        assert process(service, None) is None

    @pytest.mark.parametrize("value", ["text", 3, 2.5, True, {"a": 1}])
    def test_scalars_pass_through(self, service, value):
        """Should return plain values unchanged."""
        assert process(service, value) == value

    def test_handle_becomes_element(self, service):
        """Should wrap a handle in a role specific proxy."""
        el = process(service, service.handle_named("ok"))
        assert isinstance(el, Element)
        assert type(el).__name__ == "Button"
        assert el.handle == service.handle_named("ok")

    def test_subrole_class(self, service):
        """Should pick the subrole class, parented on the role class."""
        el = process(service, service.handle_named("close"))
        assert type(el).__name__ == "CloseButton"
        assert [c.__name__ for c in type(el).__mro__[:3]] == ["CloseButton", "Button", "Element"]

    def test_application_class(self, service):
        """Should map the application role onto Application."""
        assert isinstance(process(service, service.handle_named("app")), Application)

    @pytest.mark.parametrize("raw, expected", [
        (BoxedValue("point", (1, 2)), Point(1, 2)),
        (BoxedValue("size", (3, 4)), Size(3, 4)),
        (BoxedValue("rect", (1, 2, 3, 4)), Rect(Point(1, 2), Size(3, 4))),
        (BoxedValue("range", (0, 5)), Range(0, 5)),
    ])
    def test_boxed_values_unboxed(self, service, raw, expected):
        """Should unbox geometry and range values."""
        assert process(service, raw) == expected


class TestProcessArray:
    """Tests for sequence massaging."""

    def test_empty(self, service):
        """Should return an empty list."""
        assert process_array(service, ()) == []

    def test_plain_items_untouched(self, service):
        """Should not look past the first item of a plain sequence."""
        raw = ["a", "b", MemoryHandle(1)]
        assert process_array(service, raw) == raw

    def test_handles_processed(self, service):
        """Should turn a list of handles into elements."""
        handles = [service.handle_named("ok"), service.handle_named("close")]
        result = process(service, handles)
        assert [type(e).__name__ for e in result] == ["Button", "CloseButton"]

    def test_boxed_items_processed(self, service):
        """Should unbox every item of a boxed sequence."""
        result = process(service, [BoxedValue("point", (0, 0)), BoxedValue("point", (1, 1))])
        assert result == [Point(0, 0), Point(1, 1)]


class TestToWire:
    """Tests for boxing outgoing values."""

    def test_struct_is_boxed(self, service):
        """Should box structs through the service."""
        assert to_wire(service, Point(5, 6)) == BoxedValue("point", (5, 6))
        assert to_wire(service, Range(2, 3)) == BoxedValue("range", (2, 3))

    def test_plain_value_unchanged(self, service):
        """Should leave non-struct values alone."""
        assert to_wire(service, "text") == "text"
        assert to_wire(service, None) is None


class TestProcessElement:
    """Tests for process_element()."""

    def test_same_node_equal_proxies(self, service):
        """Should build equal proxies for the same handle."""
        a = process_element(service, service.handle_named("ok"))
        b = process_element(service, service.handle_named("ok"))
        assert a is not b
        assert a == b
        assert hash(a) == hash(b)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
