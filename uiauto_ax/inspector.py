# uiauto_ax/inspector.py
"""
@file inspector.py
@brief Element paths and tree dumps for diagnostics.

Nothing in here raises on a misbehaving node: values that cannot be read are
reported as missing so a dump of a half-broken tree still completes.
"""

from __future__ import annotations

import json
import os
import re
import time
from typing import Any, Callable, Dict, List, Optional

import yaml

from .enumerators import DepthFirst, children_of
from .values import BOXED_TYPES

MAX_PATH_DEPTH = 64

INFO_ATTRIBUTES = ("title", "identifier", "value", "description", "enabled", "focused", "position", "size")


# =========================================================
# Helpers
# =========================================================

def _ts() -> str:
    return time.strftime("%Y%m%d_%H%M%S")


def _safe(fn: Callable[[], Any], default: Any = None) -> Any:
    try:
        return fn()
    except Exception:
        return default


def _read(element: Any, name: str) -> Any:
    """Attribute value if the node has it and it can be read, else None."""
    if not _safe(lambda: element.respond_to(name), False):
        return None
    return _safe(lambda: element.attribute(name))


def _jsonable(value: Any) -> Any:
    if isinstance(value, BOXED_TYPES):
        return list(value.to_tuple())
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return repr(value)


def _compile_query(query: Optional[str]) -> Optional[re.Pattern]:
    if not query:
        return None
    if query.startswith("regex:"):
        return re.compile(query[len("regex:"):], re.IGNORECASE)
    return re.compile(re.escape(query), re.IGNORECASE)


def _matches_query(info: Dict[str, Any], rx: Optional[re.Pattern]) -> bool:
    if not rx:
        return True
    hay = " | ".join(str(info.get(k) or "") for k in ("role", "title", "identifier", "value", "path"))
    return bool(rx.search(hay))


# =========================================================
# Paths
# =========================================================

def _ancestry(element: Any) -> List[Any]:
    """Elements from the root down to ``element``."""
    chain = [element]
    current = element
    while len(chain) < MAX_PATH_DEPTH:
        parent = _read(current, "parent")
        if parent is None or parent in chain:
            break
        chain.append(parent)
        current = parent
    chain.reverse()
    return chain


def render_path(element: Any) -> List[str]:
    """
    Rendered elements from the root down to ``element``, one per entry.
    Used in search failure messages.
    """
    return [_safe(lambda e=e: repr(e), f"<{type(e).__name__}>") for e in _ancestry(element)]


def build_path(element: Any) -> str:
    """
    Positional path such as ``Application[0]/Window[0]/Button[1]``, the
    index counting siblings of the same class only.
    """
    parts: List[str] = []
    chain = _ancestry(element)
    for i, current in enumerate(chain):
        idx = 0
        if i > 0:
            same = [s for s in children_of(chain[i - 1]) if type(s) is type(current)]
            idx = next((n for n, s in enumerate(same) if s == current), 0)
        parts.append(f"{type(current).__name__}[{idx}]")
    return "/".join(parts)


# =========================================================
# Element info and tree dumps
# =========================================================

def element_info(element: Any) -> Dict[str, Any]:
    info: Dict[str, Any] = {"role": type(element).__name__}
    for name in INFO_ATTRIBUTES:
        info[name] = _jsonable(_read(element, name))
    info["actions"] = list(_safe(lambda: element.actions, ()))
    info["path"] = build_path(element)
    return info


def dump_tree(root: Any, max_nodes: int = 5000, query: Optional[str] = None) -> Dict[str, Any]:
    """
    Depth-first snapshot of the tree under ``root``.

    @param root Element to start from (not included in ``elements``)
    @param max_nodes Stop after this many nodes
    @param query Substring, or ``regex:<pattern>``, matched against role,
           title, identifier, value and path
    """
    rx = _compile_query(query)
    elements: List[Dict[str, Any]] = []
    visited = 0
    truncated = False
    for element, depth in DepthFirst(root).each_with_level():
        if visited >= max_nodes:
            truncated = True
            break
        visited += 1
        info = element_info(element)
        if not _matches_query(info, rx):
            continue
        info["depth"] = depth
        elements.append(info)

    return {
        "meta": {
            "root": _safe(lambda: repr(root), type(root).__name__),
            "visited": visited,
            "truncated": truncated,
            "query": query,
        },
        "elements": elements,
    }


def format_tree(result: Dict[str, Any]) -> str:
    """Indented text rendering of a dump."""
    lines = [f"root: {result['meta']['root']}"]
    for info in result["elements"]:
        label = info.get("title") or info.get("identifier") or info.get("value")
        text = f"{'  ' * info['depth']}{info['role']}"
        if label not in (None, ""):
            text += f" {label!r}"
        if info.get("enabled") is False:
            text += " (disabled)"
        lines.append(text)
    return "\n".join(lines)


def write_tree(result: Dict[str, Any], out_path: str, fmt: str = "json") -> str:
    """Write a dump as JSON or YAML; ``out_path`` may be a directory."""
    fmt = fmt.lower()
    if fmt not in ("json", "yaml"):
        raise ValueError(f"Unsupported dump format: {fmt}")
    if os.path.isdir(out_path):
        out_path = os.path.join(out_path, f"tree_{_ts()}.{fmt}")
    os.makedirs(os.path.dirname(os.path.abspath(out_path)) or ".", exist_ok=True)

    with open(out_path, "w", encoding="utf-8") as f:
        if fmt == "json":
            json.dump(result, f, indent=2, ensure_ascii=False)
        else:
            yaml.safe_dump(result, f, sort_keys=False, allow_unicode=True)
    return out_path
