"""Shared test fixtures for habitlog tests."""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path

import pytest
import yaml

from habitlog.clock import FixedClock
from habitlog.models import HabitConfig

TODAY = date(2024, 5, 10)


@pytest.fixture
def config() -> HabitConfig:
    return HabitConfig(
        habits={
            "reading": "阅读",
            "read": "读",
            "exercise": "运动",
            "water": "喝水",
        },
        habit_prefix="#",
        journals_path="journals",
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(TODAY, now=1000.0)


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    """Create a temporary vault with a config and a few journal files."""
    root = tmp_path / "vault"
    (root / "journals").mkdir(parents=True)
    (root / "notes").mkdir()

    config = {
        "app_name": "Habits",
        "habits": {"reading": "阅读", "exercise": "运动", "water": "喝水"},
        "habit_prefix": "#",
        "journals_path": "journals",
    }
    (root / "config.yaml").write_text(
        yaml.dump(config, allow_unicode=True, default_flow_style=False), encoding="utf-8"
    )

    journals = {
        "2024-05-08.md": "# 2024-05-08\n\n- #reading 30 pages\n- #water\n",
        "2024-05-09.md": "# 2024-05-09\n\n- #reading finished chapter 3 #exercise\n",
        "2024-05-10.md": "# 2024-05-10\n\n- #reading\n- went for a walk\n",
        "2024-04-20.md": "- #exercise 5km run\n",
        "scratch.md": "- #reading not a dated file\n",
    }
    for name, content in journals.items():
        (root / "journals" / name).write_text(content, encoding="utf-8")

    # Dated, but outside the journals folder
    (root / "notes" / "2024-05-09.md").write_text("- #water\n", encoding="utf-8")

    os.environ["HABITLOG_ROOT"] = str(root)
    yield root
    # Cleanup
    if "HABITLOG_ROOT" in os.environ:
        del os.environ["HABITLOG_ROOT"]
