# uiauto_ax/timings.py
"""
@file timings.py
@brief Timing presets and defaults for waits, searches and service messaging.
"""

from __future__ import annotations
from copy import deepcopy
from typing import Any, Dict


TIMEOUT_FIELDS: Dict[str, Dict[str, Any]] = {
    "element_wait": {"timeout": 10.0, "interval": 0.2},
}

# messaging_timeout 0 leaves the service's own messaging timeout in place
SCALAR_FIELDS: Dict[str, float] = {
    "notification_timeout": 10.0,
    "messaging_timeout": 0.0,
}

PRESET_OVERRIDES: Dict[str, Dict[str, Any]] = {
    "fast": {
        "element_wait": {"timeout": 5.0, "interval": 0.1},
        "notification_timeout": 5.0,
    },
    "slow": {
        "element_wait": {"timeout": 20.0, "interval": 0.3},
        "notification_timeout": 20.0,
        "messaging_timeout": 10.0,
    },
    "ci": {
        "element_wait": {"timeout": 20.0, "interval": 0.3},
        "notification_timeout": 30.0,
        "messaging_timeout": 15.0,
    },
}


def list_presets() -> Dict[str, Dict[str, Any]]:
    return {"default": {}, **PRESET_OVERRIDES}


def build_preset_values(preset: str) -> Dict[str, Any]:
    preset_key = (preset or "default").lower()
    values: Dict[str, Any] = {}
    values.update(deepcopy(TIMEOUT_FIELDS))
    values.update(deepcopy(SCALAR_FIELDS))

    if preset_key == "default":
        return values

    overrides = PRESET_OVERRIDES.get(preset_key)
    if overrides is None:
        raise ValueError(f"Unknown timing preset: {preset}")

    for key, value in overrides.items():
        if key in TIMEOUT_FIELDS:
            base = deepcopy(values[key])
            base.update(value)
            values[key] = base
        else:
            values[key] = value

    return values
