"""Workspace root and configuration loading for habitlog."""

from __future__ import annotations

import os
from pathlib import Path

import structlog
import yaml

from habitlog.fileio import read_yaml, write_yaml_atomic
from habitlog.models import HabitConfig

logger = structlog.get_logger()

CONFIG_FILENAME = "config.yaml"


def workspace_root() -> Path:
    """Get the vault directory (contains config.yaml and the journals folder)."""
    return Path(
        os.environ.get("HABITLOG_ROOT", str(Path.home() / "habitlog"))
    ).expanduser().resolve()


def config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / CONFIG_FILENAME


def load_config(path: Path | None = None) -> HabitConfig:
    """Load and validate the habit configuration.

    A missing or empty document yields the defaults, and so does one that
    is not valid YAML (logged). A document that parses but breaks the
    config invariants raises ConfigError.
    """
    if path is None:
        path = config_path()
    try:
        data = read_yaml(path)
    except yaml.YAMLError as e:
        logger.warning("config_unreadable_using_defaults", path=str(path), error=str(e))
        data = {}
    return HabitConfig.from_dict(data).validate()


def ensure_config(root: Path | None = None) -> Path:
    """Write the default config document if none exists yet."""
    path = config_path(root)
    if not path.exists():
        write_yaml_atomic(path, HabitConfig().to_dict())
        logger.info("config_created", path=str(path))
    return path
