# uiauto_ax/config.py
"""
@file config.py
@brief Timeout, polling and messaging configuration for the engine.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Dict, Generator, Optional

from .timings import SCALAR_FIELDS, TIMEOUT_FIELDS, build_preset_values, list_presets


@dataclass
class TimeoutSettings:
    """Timeout settings for one kind of wait."""
    timeout: float
    interval: float

    def with_overrides(
        self,
        timeout: Optional[float] = None,
        interval: Optional[float] = None,
    ) -> TimeoutSettings:
        return TimeoutSettings(
            timeout=timeout if timeout is not None else self.timeout,
            interval=interval if interval is not None else self.interval,
        )


class TimeConfig:
    """
    Timing configuration.

    Precedence per run: base defaults -> preset -> overrides. The effective
    config is looked up per thread: an installed run config, then an active
    ``override()`` block, then the process default.
    """

    _default_instance: Optional[TimeConfig] = None
    _default_preset: str = "default"
    _local = threading.local()
    _lock = threading.Lock()

    def __init__(self, preset: Optional[str] = None):
        preset_name = preset or self._default_preset
        self._apply_values(build_preset_values(preset_name))

    @classmethod
    def _timeout_fields(cls) -> Dict[str, Dict[str, Any]]:
        return TIMEOUT_FIELDS

    @classmethod
    def _scalar_fields(cls) -> Dict[str, float]:
        return SCALAR_FIELDS

    def _apply_values(self, values: Dict[str, Any]) -> None:
        for name in self._timeout_fields():
            val = values.get(name)
            if isinstance(val, TimeoutSettings):
                setting = deepcopy(val)
            elif isinstance(val, dict):
                setting = TimeoutSettings(
                    timeout=float(val["timeout"]),
                    interval=float(val["interval"]),
                )
            else:
                raise ValueError(f"Invalid timeout setting for {name}: {val}")
            setattr(self, name, setting)

        for name in self._scalar_fields():
            if name not in values:
                raise ValueError(f"Missing setting for {name}")
            setattr(self, name, float(values[name]))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for name in self._timeout_fields():
            setting: TimeoutSettings = getattr(self, name)
            data[name] = {
                "timeout": setting.timeout,
                "interval": setting.interval,
            }
        for name in self._scalar_fields():
            data[name] = getattr(self, name)
        return data

    def clone(self) -> TimeConfig:
        clone = TimeConfig()
        clone._apply_values(self.to_dict())
        return clone

    @classmethod
    def build_from(
        cls,
        *,
        preset: str = "default",
        overrides: Optional[Dict[str, Any]] = None,
    ) -> TimeConfig:
        """Build a run-scope config snapshot."""
        cfg = cls(preset)
        if overrides:
            _apply_overrides(cfg, overrides)
        return cfg

    @classmethod
    def default(cls) -> TimeConfig:
        """Process default configuration (singleton)."""
        if cls._default_instance is None:
            with cls._lock:
                if cls._default_instance is None:
                    cls._default_instance = cls(cls._default_preset)
        return cls._default_instance

    @classmethod
    def install_run_config(cls, config: TimeConfig) -> None:
        cls._local.run_config = config

    @classmethod
    def clear_run_config(cls) -> None:
        cls._local.run_config = None

    @classmethod
    def current(cls) -> TimeConfig:
        """Effective configuration for the calling thread."""
        run_cfg = getattr(cls._local, "run_config", None)
        if run_cfg is not None:
            return run_cfg

        override = getattr(cls._local, "override", None)
        if override is not None:
            return override

        return cls.default()

    @classmethod
    def apply_preset(cls, preset: str) -> None:
        base = cls.current().clone()
        base._apply_values(build_preset_values(preset))
        cls.install_run_config(base)

    @classmethod
    def apply_overrides(cls, overrides: Dict[str, Any]) -> None:
        config = cls.current().clone()
        _apply_overrides(config, overrides)
        cls.install_run_config(config)

    @classmethod
    @contextmanager
    def override(cls, **kwargs: Any) -> Generator[TimeConfig, None, None]:
        """Temporary configuration overrides for the calling thread."""
        previous_override = getattr(cls._local, "override", None)
        previous_run = getattr(cls._local, "run_config", None)
        new_config = cls.current().clone()
        _apply_overrides(new_config, kwargs)

        cls._local.override = new_config
        cls._local.run_config = None
        try:
            yield new_config
        finally:
            cls._local.override = previous_override
            cls._local.run_config = previous_run

    @classmethod
    def reset_to_defaults(cls) -> None:
        """Reset the default and clear all thread-local state of the caller."""
        with cls._lock:
            cls._default_preset = "default"
            cls._default_instance = cls(cls._default_preset)
        cls._local.override = None
        cls._local.run_config = None


def _apply_overrides(config: TimeConfig, overrides: Dict[str, Any]) -> None:
    for key, value in overrides.items():
        if key in config._timeout_fields():
            base_setting: TimeoutSettings = getattr(config, key)
            if isinstance(value, TimeoutSettings):
                setattr(config, key, deepcopy(value))
            elif isinstance(value, dict):
                setattr(config, key, base_setting.with_overrides(
                    timeout=value.get("timeout"),
                    interval=value.get("interval"),
                ))
            else:
                raise ValueError(f"Invalid override for {key}: {value}")
        elif key in config._scalar_fields():
            setattr(config, key, float(value))
        else:
            raise ValueError(f"Unknown TimeConfig field: {key}")


def available_presets() -> Dict[str, Dict[str, Any]]:
    return list_presets()
