# uiauto_ax/roles.py
"""
@file roles.py
@brief Process-wide role taxonomy: role names mapped onto Element subclasses.

The service reports role chains at run time (``["CloseButton", "Button"]``),
so the class hierarchy is grown lazily as roles are discovered. A role is
bound to exactly one class for the life of the process.
"""

from __future__ import annotations

import logging
import re
import threading
from typing import Dict, Optional, Sequence

log = logging.getLogger("uiauto_ax.roles")

BASE_ROLE = "Element"

_INVALID_CHARS = re.compile(r"\W")


def class_name_for(role: str) -> str:
    """Turn a prefix-stripped role name into a valid class name."""
    name = _INVALID_CHARS.sub("_", role)
    if not name or name[0].isdigit():
        name = "_" + name
    return name


class RoleRegistry:
    """
    Append-only mapping of role name -> Element subclass.

    Lookups for an unknown role synthesize one subclass parented on the
    class of the next role in the chain, or on the base class when the
    chain is exhausted. Registration is first-writer-wins under a lock;
    losing writers observe the class that was registered first.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._classes: Dict[str, type] = {}

    def register(self, name: str, cls: type) -> type:
        """Bind ``name`` to ``cls`` unless it is bound already; return the bound class."""
        with self._lock:
            return self._classes.setdefault(name, cls)

    def get(self, name: str) -> Optional[type]:
        return self._classes.get(class_name_for(name))

    def is_registered(self, name: str) -> bool:
        return class_name_for(name) in self._classes

    def registered(self) -> Dict[str, type]:
        """Snapshot of the current taxonomy."""
        with self._lock:
            return dict(self._classes)

    @property
    def base(self) -> type:
        try:
            return self._classes[BASE_ROLE]
        except KeyError:
            raise RuntimeError("Base Element class has not been registered") from None

    def resolve(self, role_names: Sequence[str]) -> type:
        """
        Class for a role chain, most specific role first.

        @param role_names Prefix-stripped role names, e.g. ["CloseButton", "Button"]
        @return The registered (or newly synthesized) class
        """
        names = [class_name_for(n) for n in role_names if n]
        if not names:
            return self.base

        existing = self._classes.get(names[0])
        if existing is not None:
            return existing

        with self._lock:
            existing = self._classes.get(names[0])
            if existing is not None:
                return existing
            parent = self.resolve(names[1:]) if len(names) > 1 else self.base
            cls = type(names[0], (parent,), {"__module__": parent.__module__})
            self._classes[names[0]] = cls
        log.debug("%s class created (parent %s)", names[0], parent.__name__)
        return cls


ROLES = RoleRegistry()
