"""File helpers for the vault: tolerant reads and in-place journal rewrites."""

from __future__ import annotations

import fcntl
import os
import stat
import tempfile
from pathlib import Path
from typing import Any

import yaml

NEW_FILE_MODE = 0o666


def read_text(path: Path) -> str:
    """Read a text file, returning empty string if missing."""
    if not path.exists():
        return ""
    return path.read_text(encoding="utf-8")


def read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML mapping, returning empty dict if missing or empty.

    Raises yaml.YAMLError on malformed documents; callers decide the fallback.
    """
    text = read_text(path)
    if not text.strip():
        return {}
    result = yaml.safe_load(text)
    return result if isinstance(result, dict) else {}


def _target_mode(path: Path) -> int:
    """Permissions the rewritten file should carry.

    An existing journal keeps its own mode; a new one gets the usual
    umask-filtered default rather than mkstemp's owner-only 0600.
    """
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return NEW_FILE_MODE & ~umask


def write_text_atomic(path: Path, content: str) -> None:
    """Replace *path* with *content* in one step: temp file + flock + rename.

    Readers of the vault see either the old journal or the new one, never a
    partial write. The temp file ends in `.tmp` so it is never listed as a
    journal while it exists.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    mode = _target_mode(path)
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp_", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
                os.fchmod(f.fileno(), mode)
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        os.replace(temp_path, path)
    except Exception:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


def write_yaml_atomic(path: Path, data: dict[str, Any]) -> None:
    """Atomic YAML write; non-ASCII habit names are written as-is."""
    content = yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
    write_text_atomic(path, content)
