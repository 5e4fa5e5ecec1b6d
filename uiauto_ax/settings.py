# uiauto_ax/settings.py
"""
@file settings.py
@brief Engine settings loaded from YAML and validated against a JSON schema.

Example settings file::

    timing_preset: ci
    timing_overrides:
      element_wait: {timeout: 30}
    messaging_timeout: 5
    logging:
      level: DEBUG
      file: logs/uiauto_ax.log
    inflections:
      irregular: {vertices: vertex}
      uncountable: [chrome]
    notifications: [MyAppDocumentReloaded]
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml
from jsonschema import Draft202012Validator

from .config import TimeConfig
from .exceptions import ConfigError
from .naming import INFLECTOR, register_notification_names

SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schemas", "settings.schema.json")


def load_schema(path: str = SCHEMA_PATH) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def validate_settings(data: Dict[str, Any], schema: Optional[Dict[str, Any]] = None) -> None:
    """
    Validate a settings mapping.

    @throws ConfigError listing every schema violation, one per line
    """
    validator = Draft202012Validator(schema or load_schema())
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = ["Settings schema validation failed:"]
        for e in errors:
            where = ".".join(str(p) for p in e.path) or "<root>"
            lines.append(f"- {where}: {e.message}")
        raise ConfigError("\n".join(lines))


@dataclass
class LoggingSettings:
    level: str = "WARNING"
    file: Optional[str] = None
    timing: bool = False


@dataclass
class EngineSettings:
    """Validated engine settings."""
    timing_preset: str = "default"
    timing_overrides: Dict[str, Any] = field(default_factory=dict)
    messaging_timeout: Optional[float] = None
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    irregular: Dict[str, str] = field(default_factory=dict)
    uncountable: List[str] = field(default_factory=list)
    notifications: List[str] = field(default_factory=list)
    path: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], path: Optional[str] = None) -> EngineSettings:
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError("Settings must be a mapping at root.")
        validate_settings(data)

        log_cfg = data.get("logging") or {}
        inflections = data.get("inflections") or {}
        return cls(
            timing_preset=data.get("timing_preset", "default"),
            timing_overrides=dict(data.get("timing_overrides") or {}),
            messaging_timeout=data.get("messaging_timeout"),
            logging=LoggingSettings(
                level=log_cfg.get("level", "WARNING"),
                file=log_cfg.get("file"),
                timing=bool(log_cfg.get("timing", False)),
            ),
            irregular=dict(inflections.get("irregular") or {}),
            uncountable=list(inflections.get("uncountable") or []),
            notifications=list(data.get("notifications") or []),
            path=path,
        )

    @classmethod
    def load(cls, path: str) -> EngineSettings:
        path = os.path.abspath(path)
        if not os.path.exists(path):
            raise ConfigError(f"Settings YAML not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}") from e
        return cls.from_dict(data, path=path)

    def time_config(self) -> TimeConfig:
        overrides = dict(self.timing_overrides)
        if self.messaging_timeout is not None:
            overrides["messaging_timeout"] = self.messaging_timeout
        return TimeConfig.build_from(preset=self.timing_preset, overrides=overrides)

    def apply(self) -> TimeConfig:
        """
        Install the timing config for the calling thread and register the
        extra inflections and notification names process-wide.

        @return The installed TimeConfig
        """
        config = self.time_config()
        TimeConfig.install_run_config(config)
        for plural, singular in self.irregular.items():
            INFLECTOR.add_irregular(plural, singular)
        if self.uncountable:
            INFLECTOR.add_uncountable(*self.uncountable)
        if self.notifications:
            register_notification_names(self.notifications)
        return config
