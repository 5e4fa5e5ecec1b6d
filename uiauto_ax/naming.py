# uiauto_ax/naming.py
"""
@file naming.py
@brief Symbolic-name normalization, resolution tables and singularization.

Attribute, action and notification identifiers arrive from the service as
namespaced constants (``AXTitle``, ``AXIsApplicationEnabled``,
``MCAXEnabled``). Callers use word-separated lower-case names (``title``,
``application_enabled?``). This module maps one onto the other.
"""

from __future__ import annotations

import logging
import re
import threading
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

log = logging.getLogger("uiauto_ax.naming")

_PREFIX_RE = re.compile(r"^[A-Z]*?AX(?:Is(?=[A-Z]))?")
_ACRONYM_RE = re.compile(r"([A-Z\d]+)([A-Z][a-z])")
_WORD_RE = re.compile(r"([a-z\d])([A-Z])")
_LAST_WORD_RE = re.compile(r"^(.*?)([A-Z]?[a-z\d]*)$")

PREDICATE_SUFFIX = "?"
PREDICATE_PREFIX = "is_"


def strip_prefix(const: str) -> str:
    """
    Remove the namespace prefix (and the ``Is`` predicate marker) from an
    accessibility constant.

        strip_prefix("AXTitle")                 -> "Title"
        strip_prefix("AXIsApplicationEnabled")  -> "ApplicationEnabled"
        strip_prefix("MCAXEnabled")             -> "Enabled"
        strip_prefix("AXButton")                -> "Button"
    """
    return _PREFIX_RE.sub("", const, count=1)


def underscore(word: str) -> str:
    """``FocusedUIElement`` -> ``focused_ui_element``."""
    word = _ACRONYM_RE.sub(r"\1_\2", word)
    word = _WORD_RE.sub(r"\1_\2", word)
    return word.replace("-", "_").lower()


def camelize(term: str) -> str:
    """``static_texts`` -> ``StaticTexts``; already camel-cased input is kept."""
    return "".join(part[:1].upper() + part[1:] for part in str(term).split("_") if part)


def normalize(name: object) -> str:
    """Lower-case, word-separated form of a caller supplied name."""
    return underscore(str(name).strip())


def strip_predicate(key: str) -> Optional[str]:
    """
    Return ``key`` without its predicate markers, or None if it has none.
    The ``?`` suffix is removed first, then the ``is_`` prefix, so
    ``is_enabled?`` becomes ``enabled``.
    """
    bare = key
    if bare.endswith(PREDICATE_SUFFIX):
        bare = bare[: -len(PREDICATE_SUFFIX)]
    if bare.startswith(PREDICATE_PREFIX) and len(bare) > len(PREDICATE_PREFIX):
        bare = bare[len(PREDICATE_PREFIX):]
    return bare if bare != key else None


def build_table(names: Iterable[str]) -> Mapping[str, str]:
    """Map normalized names to identifiers. The first identifier wins on a clash."""
    table: Dict[str, str] = {}
    for ident in names:
        table.setdefault(underscore(strip_prefix(ident)), ident)
    return MappingProxyType(table)


class ResolutionCache:
    """
    Resolution tables keyed by the exact name array they were built from.

    Two nodes with the same role almost always report the same names, so
    tables are shared between proxies rather than built per instance. A
    table is only used for the shape it was derived from; a node with a
    different name array gets its own table. Tables are built outside the
    lock and published with setdefault, so the first writer wins and
    readers only ever see complete tables.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tables: Dict[Tuple[str, ...], Mapping[str, str]] = {}

    def table_for(self, names: Sequence[str]) -> Mapping[str, str]:
        key = tuple(names)
        table = self._tables.get(key)
        if table is None:
            built = build_table(key)
            with self._lock:
                table = self._tables.setdefault(key, built)
        return table

    def resolve(self, names: Sequence[str], name: object) -> Optional[str]:
        """
        Resolve a symbolic name against a name array.

        @param names Identifiers reported by the node
        @param name Symbolic name (``title``, ``enabled?``) or exact identifier
        @return The identifier, or None if nothing matches
        """
        if isinstance(name, str) and name in names:
            return name
        key = normalize(name)
        table = self.table_for(names)
        found = table.get(key)
        if found is None:
            bare = strip_predicate(key)
            if bare is not None:
                found = table.get(bare)
        return found

    def clear(self) -> None:
        with self._lock:
            self._tables.clear()

    def __len__(self) -> int:
        return len(self._tables)


RESOLUTION_CACHE = ResolutionCache()


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

KNOWN_NOTIFICATIONS = {
    "AXApplicationActivated",
    "AXApplicationDeactivated",
    "AXApplicationHidden",
    "AXApplicationShown",
    "AXCreated",
    "AXFocusedUIElementChanged",
    "AXFocusedWindowChanged",
    "AXMainWindowChanged",
    "AXMenuClosed",
    "AXMenuItemSelected",
    "AXMenuOpened",
    "AXMoved",
    "AXResized",
    "AXRowCountChanged",
    "AXSelectedChildrenChanged",
    "AXSelectedRowsChanged",
    "AXSelectedTextChanged",
    "AXSheetCreated",
    "AXTitleChanged",
    "AXUIElementDestroyed",
    "AXValueChanged",
    "AXWindowCreated",
    "AXWindowDeminiaturized",
    "AXWindowMiniaturized",
    "AXWindowMoved",
    "AXWindowResized",
}

_notification_lock = threading.Lock()
_notification_table: Mapping[str, str] = build_table(sorted(KNOWN_NOTIFICATIONS))


def register_notification_names(names: Iterable[str]) -> None:
    """Add canonical notification identifiers (e.g. app specific ones)."""
    global _notification_table
    with _notification_lock:
        KNOWN_NOTIFICATIONS.update(names)
        _notification_table = build_table(sorted(KNOWN_NOTIFICATIONS))


def notification_for(name: object) -> str:
    """
    Canonical notification identifier for a symbolic name, falling back to
    the literal string when no canonical form is registered.

        notification_for("window_created") -> "AXWindowCreated"
        notification_for("MyAppReloaded")  -> "MyAppReloaded"
    """
    name = str(name)
    if name in KNOWN_NOTIFICATIONS:
        return name
    return _notification_table.get(normalize(name), name)


# ---------------------------------------------------------------------------
# Singularization
# ---------------------------------------------------------------------------

# checked in order, first match wins
SINGULAR_RULES: List[Tuple[str, str]] = [
    (r"(database)s$", r"\1"),
    (r"(quiz)zes$", r"\1"),
    (r"(matr)ices$", r"\1ix"),
    (r"(vert|ind)ices$", r"\1ex"),
    (r"^(ox)en", r"\1"),
    (r"(alias|status)(es)?$", r"\1"),
    (r"(octop|vir)(us|i)$", r"\1us"),
    (r"^(a)x[ie]s$", r"\1xis"),
    (r"(cris|test)(is|es)$", r"\1is"),
    (r"(shoe)s$", r"\1"),
    (r"(o)es$", r"\1"),
    (r"(bus)(es)?$", r"\1"),
    (r"^(m|l)ice$", r"\1ouse"),
    (r"(x|ch|ss|sh)es$", r"\1"),
    (r"(m)ovies$", r"\1ovie"),
    (r"(s)eries$", r"\1eries"),
    (r"([^aeiouy]|qu)ies$", r"\1y"),
    (r"([lr])ves$", r"\1f"),
    (r"(tive)s$", r"\1"),
    (r"(hive)s$", r"\1"),
    (r"([^f])ves$", r"\1fe"),
    (r"(^analy)(sis|ses)$", r"\1sis"),
    (r"((a)naly|(b)a|(d)iagno|(p)arenthe|(p)rogno|(s)ynop|(t)he)(sis|ses)$", r"\1sis"),
    (r"([ti])a$", r"\1um"),
    (r"(n)ews$", r"\1ews"),
    (r"(ss)$", r"\1"),
    (r"s$", ""),
]

DEFAULT_IRREGULARS: Dict[str, str] = {
    "people": "person",
    "men": "man",
    "women": "woman",
    "children": "child",
    "sexes": "sex",
    "moves": "move",
    "zombies": "zombie",
}

DEFAULT_UNCOUNTABLES = {
    "equipment",
    "information",
    "rice",
    "money",
    "species",
    "series",
    "fish",
    "sheep",
    "jeans",
    "police",
    "news",
    "canvas",
}


class Inflector:
    """
    Rule based singularizer with explicit exception tables.

    Only the last word of a camel-cased or snake-cased token is inflected
    (``CheckBoxes`` -> ``CheckBox``). Role names the rules get wrong must be
    listed as irregular or uncountable rather than patched into the rules.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rules = [(re.compile(p, re.IGNORECASE), r) for p, r in SINGULAR_RULES]
        self._irregulars: Dict[str, str] = dict(DEFAULT_IRREGULARS)
        self._uncountables = set(DEFAULT_UNCOUNTABLES)

    def add_irregular(self, plural: str, singular: str) -> None:
        with self._lock:
            self._irregulars[plural.lower()] = singular.lower()

    def add_uncountable(self, *words: str) -> None:
        with self._lock:
            self._uncountables.update(w.lower() for w in words)

    def reset(self) -> None:
        with self._lock:
            self._irregulars = dict(DEFAULT_IRREGULARS)
            self._uncountables = set(DEFAULT_UNCOUNTABLES)

    def singularize(self, word: str) -> str:
        prefix, last = _LAST_WORD_RE.match(word).groups()
        if not last:
            return word
        lowered = last.lower()
        if lowered in self._uncountables:
            return word
        singular = self._irregulars.get(lowered)
        if singular is not None:
            if last[0].isupper():
                singular = singular[0].upper() + singular[1:]
            return prefix + singular
        for pattern, replacement in self._rules:
            if pattern.search(last):
                return prefix + pattern.sub(replacement, last, count=1)
        return word

    def is_plural(self, word: str) -> bool:
        return self.singularize(word) != word


INFLECTOR = Inflector()


def singularize(word: str) -> str:
    return INFLECTOR.singularize(word)
