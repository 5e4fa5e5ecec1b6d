# uiauto_ax/search.py
"""
@file search.py
@brief Type and filter based search over an element subtree.

Cardinality is inferred from the requested type name: a plural name
(``buttons``) asks for every match, a singular one (``button``) for the
first match in breadth-first order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type, Union

from .element import Element
from .enumerators import BreadthFirst
from .exceptions import LookupFailure, SearchFailure
from .naming import camelize, singularize

log = logging.getLogger("uiauto_ax.search")


@dataclass(frozen=True)
class SearchResult:
    """
    Outcome of a single-element search: either found (``element`` set) or
    not found. It deliberately has no truth value; ask ``found`` or call
    ``unwrap``.
    """
    searchee: Any
    klass: str
    filters: Dict[str, Any] = field(default_factory=dict)
    element: Optional[Element] = None

    @property
    def found(self) -> bool:
        return self.element is not None

    def unwrap(self, searcher: Element, searchee: Any = None) -> Element:
        """
        @return The element that was found
        @throws SearchFailure if nothing was found
        """
        if self.element is None:
            raise SearchFailure(searcher, searchee if searchee is not None else self.searchee, self.filters)
        return self.element

    def __bool__(self) -> bool:
        raise TypeError("SearchResult has no truth value; use .found or .unwrap()")


def plan_search(element_type: Any) -> Tuple[str, bool]:
    """
    Class name and cardinality for a requested type.

        plan_search("buttons")      -> ("Button", True)
        plan_search("static_text")  -> ("StaticText", False)
    """
    token = camelize(str(element_type))
    klass = singularize(token)
    return klass, klass != token


def type_matches(element: Element, klass: str) -> bool:
    """True if the element's class, or an Element ancestor of it, is named ``klass``."""
    return any(
        cls.__name__ == klass
        for cls in type(element).__mro__
        if isinstance(cls, type) and issubclass(cls, Element)
    )


def filters_match(element: Element, filters: Dict[str, Any]) -> bool:
    """All filters must read equal; an attribute the node lacks is a mismatch."""
    for key, expected in filters.items():
        try:
            actual = element.attribute(key)
        except LookupFailure:
            return False
        if actual != expected:
            return False
    return True


class Search:
    """
    Search rooted at one element.

    Breadth-first by default: shallow matches are the common case and the
    walk stops at the first match for single-element searches.
    """

    def __init__(self, root: Element, enumerator: Type[Any] = BreadthFirst):
        self.root = root
        self.enumerator = enumerator

    def matches(self, element: Element, klass: str, filters: Dict[str, Any]) -> bool:
        return type_matches(element, klass) and filters_match(element, filters)

    def find(self, klass: str, filters: Optional[Dict[str, Any]] = None, searchee: Any = None) -> SearchResult:
        filters = dict(filters or {})
        found = self.enumerator(self.root).find(lambda e: self.matches(e, klass, filters))
        log.debug("find %s%s under %s -> %s", klass, filters or "", type(self.root).__name__,
                  "found" if found is not None else "nothing")
        return SearchResult(
            searchee=searchee if searchee is not None else klass,
            klass=klass,
            filters=filters,
            element=found,
        )

    def find_all(self, klass: str, filters: Optional[Dict[str, Any]] = None) -> List[Element]:
        filters = dict(filters or {})
        results = [e for e in self.enumerator(self.root) if self.matches(e, klass, filters)]
        log.debug("find_all %s%s under %s -> %d", klass, filters or "", type(self.root).__name__, len(results))
        return results


def search(
    root: Element,
    element_type: Any,
    filters: Optional[Dict[str, Any]] = None,
) -> Union[SearchResult, List[Element]]:
    """
    Resolve ``(element_type, filters)`` under ``root``.

    @return A list for plural type names, a SearchResult for singular ones
    """
    klass, plural = plan_search(element_type)
    engine = Search(root)
    if plural:
        return engine.find_all(klass, filters)
    return engine.find(klass, filters, searchee=element_type)
