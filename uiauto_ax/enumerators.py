# uiauto_ax/enumerators.py
"""
@file enumerators.py
@brief Lazy breadth-first and depth-first walks over the ``children`` relation.

Both walks are restartable by iterating again (each iteration starts over
from the root) and tolerate nodes that cannot report their children: such a
node is treated as a leaf so one unreachable subtree never hides the rest
of the tree.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Callable, Deque, Iterator, List, Optional, Tuple

log = logging.getLogger("uiauto_ax.enumerators")


def children_of(element: Any) -> List[Any]:
    """Children of an element, or an empty list if they cannot be read."""
    try:
        kids = element.attribute("children")
    except Exception as e:
        log.debug("Treating %s as a leaf, children unavailable: %s: %s",
                  type(element).__name__, type(e).__name__, e)
        return []
    if not isinstance(kids, list):
        return []
    return kids


class BreadthFirst:
    """Visit every element under ``root`` in breadth first order (root excluded)."""

    def __init__(self, root: Any):
        self.root = root

    def __iter__(self) -> Iterator[Any]:
        queue: Deque[Any] = deque([self.root])
        while queue:
            kids = children_of(queue.popleft())
            for kid in kids:
                yield kid
            queue.extend(kids)

    def find(self, predicate: Callable[[Any], bool]) -> Optional[Any]:
        """First element matching ``predicate``; stops expanding as soon as it is found."""
        for element in self:
            if predicate(element):
                return element
        return None


class DepthFirst:
    """Visit every element under ``root`` in pre-order (root excluded)."""

    def __init__(self, root: Any):
        self.root = root

    def __iter__(self) -> Iterator[Any]:
        stack: Deque[Any] = deque(children_of(self.root))
        while stack:
            current = stack.popleft()
            yield current
            # children go ahead of pending siblings, left to right
            stack.extendleft(reversed(children_of(current)))

    def find(self, predicate: Callable[[Any], bool]) -> Optional[Any]:
        for element in self:
            if predicate(element):
                return element
        return None

    def each_with_level(self) -> Iterator[Tuple[Any, int]]:
        """
        Yield ``(element, depth)`` pairs, depth relative to the root (the
        root's children are at depth 1).
        """
        stack: List[Tuple[Any, int]] = [(kid, 1) for kid in reversed(children_of(self.root))]
        while stack:
            element, depth = stack.pop()
            yield element, depth
            stack.extend((kid, depth + 1) for kid in reversed(children_of(element)))
