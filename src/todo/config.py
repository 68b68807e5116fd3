"""
Configuration for the todo CLI.

Values come from a YAML file (optional) and are then overridden by
``TODO_*`` environment variables; command-line flags win over both.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = Path("~/.config/todo/config.yaml")


def _section(yaml_data: Dict[str, Any], name: str, config_path: Path) -> Dict[str, Any]:
    section = yaml_data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"'{name}' must be a mapping: {config_path}")
    return section


@dataclass
class Config:
    """Application settings"""

    db_path: str = "todos.db"
    log_level: str = "WARNING"
    log_file: Optional[str] = None
    editor: Optional[str] = None

    @classmethod
    def from_yaml(cls, config_path: Path) -> "Config":
        """Read settings from a YAML file.

        Args:
            config_path: path to the YAML file

        Returns:
            Config: settings with defaults for any missing key

        Raises:
            FileNotFoundError: the file does not exist
            ConfigurationError: the file is not valid YAML or not a mapping
        """
        config_path = Path(config_path).expanduser()
        with open(config_path, "r", encoding="utf-8") as f:
            try:
                yaml_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(yaml_data, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {config_path}")

        database_data = _section(yaml_data, "database", config_path)
        log_data = _section(yaml_data, "log", config_path)
        editor_data = _section(yaml_data, "editor", config_path)

        defaults = cls()
        return cls(
            db_path=str(database_data.get("path", defaults.db_path)),
            log_level=str(log_data.get("level", defaults.log_level)),
            log_file=log_data.get("file", defaults.log_file),
            editor=editor_data.get("command", defaults.editor),
        )

    @classmethod
    def from_env(cls, base: Optional["Config"] = None) -> "Config":
        """Apply TODO_* environment overrides on top of ``base``."""
        base = base or cls()
        return replace(
            base,
            db_path=os.getenv("TODO_DB_PATH", base.db_path),
            log_level=os.getenv("TODO_LOG_LEVEL", base.log_level),
            log_file=os.getenv("TODO_LOG_FILE", base.log_file),
            editor=os.getenv("TODO_EDITOR", base.editor),
        )

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Resolve the config file (argument, $TODO_CONFIG, default path) and apply env overrides."""
        if config_path is None and os.getenv("TODO_CONFIG"):
            config_path = Path(os.environ["TODO_CONFIG"])

        if config_path is not None:
            base = cls.from_yaml(config_path)
        elif DEFAULT_CONFIG_PATH.expanduser().exists():
            base = cls.from_yaml(DEFAULT_CONFIG_PATH)
        else:
            base = cls()

        return cls.from_env(base)
