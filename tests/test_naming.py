# tests/test_naming.py
"""
Tests for name normalization, resolution tables and singularization.
"""

import threading

import pytest

from uiauto_ax.naming import (
    Inflector,
    ResolutionCache,
    camelize,
    notification_for,
    register_notification_names,
    singularize,
    strip_prefix,
    strip_predicate,
    underscore,
)


NAMES = ("AXTitle", "AXIsApplicationEnabled", "AXFocusedUIElement", "MCAXEnabled", "AXChildren")


class TestStripPrefix:
    """Tests for namespace prefix removal."""

    @pytest.mark.parametrize("const, expected", [
        ("AXTitle", "Title"),
        ("AXIsApplicationEnabled", "ApplicationEnabled"),
        ("MCAXEnabled", "Enabled"),
        ("AXButton", "Button"),
        ("AXIsland", "Island"),
        ("Title", "Title"),
    ])
    def test_strip_prefix(self, const, expected):
        """Should remove the AX namespace and the Is predicate marker only."""
        assert strip_prefix(const) == expected


class TestWordSeparation:
    """Tests for underscore and camelize."""

    def test_underscore_splits_camel_case(self):
        """Should separate words on case changes."""
        assert underscore("ApplicationEnabled") == "application_enabled"

    def test_underscore_keeps_acronyms_together(self):
        """Should treat a run of capitals as one word."""
        assert underscore("FocusedUIElement") == "focused_ui_element"

    def test_camelize_snake_case(self):
        """Should join snake case words into a class name."""
        assert camelize("static_texts") == "StaticTexts"
        assert camelize("button") == "Button"

    def test_camelize_keeps_camel_case(self):
        """Should leave an already camel cased token alone."""
        assert camelize("CheckBox") == "CheckBox"


class TestResolutionCache:
    """Tests for symbolic name resolution."""

    def test_symbolic_name(self):
        """Should resolve a word separated name to its identifier."""
        cache = ResolutionCache()
        assert cache.resolve(NAMES, "title") == "AXTitle"
        assert cache.resolve(NAMES, "focused_ui_element") == "AXFocusedUIElement"

    def test_exact_identifier_resolves_to_itself(self):
        """Should accept the identifier itself."""
        cache = ResolutionCache()
        assert cache.resolve(NAMES, "AXTitle") == "AXTitle"

    def test_camel_case_name(self):
        """Should normalize camel cased input before lookup."""
        cache = ResolutionCache()
        assert cache.resolve(NAMES, "FocusedUIElement") == "AXFocusedUIElement"

    def test_custom_namespace_prefix(self):
        """Should strip prefixes ending in AX."""
        cache = ResolutionCache()
        assert cache.resolve(NAMES, "enabled") == "MCAXEnabled"

    @pytest.mark.parametrize("name", [
        "application_enabled",
        "application_enabled?",
        "is_application_enabled",
        "is_application_enabled?",
    ])
    def test_predicate_markers(self, name):
        """Should resolve predicate spellings to the Is identifier."""
        cache = ResolutionCache()
        assert cache.resolve(NAMES, name) == "AXIsApplicationEnabled"

    def test_unknown_name(self):
        """Should return None for names the array does not carry."""
        cache = ResolutionCache()
        assert cache.resolve(NAMES, "nope") is None
        assert cache.resolve(NAMES, "nope?") is None

    @pytest.mark.parametrize("key, expected", [
        ("enabled?", "enabled"),
        ("is_enabled", "enabled"),
        ("is_enabled?", "enabled"),
        ("enabled", None),
        ("is_", None),
    ])
    def test_strip_predicate(self, key, expected):
        """Should remove the suffix and then the prefix marker."""
        assert strip_predicate(key) == expected

    def test_first_identifier_wins_on_clash(self):
        """Should keep the first identifier when two normalize the same."""
        cache = ResolutionCache()
        assert cache.resolve(("AXTitle", "MCAXTitle"), "title") == "AXTitle"

    def test_tables_keyed_by_exact_shape(self):
        """Should share a table between equal arrays and not between different ones."""
        cache = ResolutionCache()
        first = cache.table_for(list(NAMES))
        second = cache.table_for(list(NAMES))
        other = cache.table_for(NAMES[:2])
        assert first is second
        assert other is not first
        assert len(cache) == 2
        assert cache.resolve(NAMES[:2], "children") is None

    def test_tables_are_read_only(self):
        """Should publish immutable tables."""
        cache = ResolutionCache()
        table = cache.table_for(NAMES)
        with pytest.raises(TypeError):
            table["x"] = "y"

    def test_concurrent_builders_publish_one_table(self):
        """Should let the first writer win when threads race on a new shape."""
        cache = ResolutionCache()
        names = ("AXTitle", "AXValue", "AXRole")
        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(cache.table_for(names))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len({id(t) for t in results}) == 1


class TestNotifications:
    """Tests for notification name canonicalization."""

    def test_symbolic_notification(self):
        """Should map a symbolic name to the canonical identifier."""
        assert notification_for("window_created") == "AXWindowCreated"
        assert notification_for("value_changed") == "AXValueChanged"

    def test_canonical_notification(self):
        """Should keep a canonical identifier as is."""
        assert notification_for("AXTitleChanged") == "AXTitleChanged"

    def test_unknown_falls_back_to_literal(self):
        """Should use the literal string when no canonical form exists."""
        assert notification_for("MyAppReloaded") == "MyAppReloaded"

    def test_registered_names(self):
        """Should resolve names registered at run time."""
        register_notification_names(["MCAXDocumentSaved"])
        assert notification_for("document_saved") == "MCAXDocumentSaved"


class TestSingularize:
    """Tests for the rule based singularizer."""

    @pytest.mark.parametrize("word, expected", [
        ("Buttons", "Button"),
        ("buttons", "button"),
        ("CheckBoxes", "CheckBox"),
        ("StaticTexts", "StaticText"),
        ("RadioButtons", "RadioButton"),
        ("Menus", "Menu"),
        ("Indices", "Index"),
        ("Statuses", "Status"),
        ("People", "Person"),
        ("Children", "Child"),
    ])
    def test_plurals(self, word, expected):
        """Should singularize the last word only."""
        assert singularize(word) == expected

    @pytest.mark.parametrize("word", [
        "Button", "Window", "StaticText", "Status", "News", "Series", "Canvas", "Glass", "",
    ])
    def test_singulars_unchanged(self, word):
        """Should leave singular and uncountable words alone."""
        assert singularize(word) == word

    def test_add_irregular(self):
        """Should honor irregular plurals added at run time."""
        inflector = Inflector()
        inflector.add_irregular("vertices", "vertex")
        assert inflector.singularize("Vertices") == "Vertex"

    def test_add_uncountable(self):
        """Should stop treating an uncountable word as plural."""
        inflector = Inflector()
        assert inflector.is_plural("Chromes")
        inflector.add_uncountable("chromes")
        assert not inflector.is_plural("Chromes")

    def test_reset(self):
        """Should drop run time exceptions."""
        inflector = Inflector()
        inflector.add_uncountable("tabs")
        inflector.reset()
        assert inflector.singularize("Tabs") == "Tab"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
