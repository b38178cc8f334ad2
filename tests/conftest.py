"""Pytest configuration for Profile Calculator tests."""

import json
import logging
from pathlib import Path

import pytest

from profile_calculator.logging_setup import JsonlHandler

ENV_VARS = (
    "PROFILE_CALC_CATALOG_URL",
    "PROFILE_CALC_CATALOG_TIMEOUT",
    "PROFILE_CALC_DEFAULT_TARGET",
    "PROFILE_CALC_LOG_PATH",
    "PROFILE_CALC_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep settings, history, logs and default outputs inside tmp_path."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()

    monkeypatch.setattr(Path, "home", lambda: home)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PROFILE_CALC_LOG_PATH", str(tmp_path / "logs" / "calculator.log.jsonl"))
    monkeypatch.chdir(work)

    root = logging.getLogger()
    original_level = root.level
    yield work
    for handler in list(root.handlers):
        if isinstance(handler, JsonlHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(original_level)


@pytest.fixture
def write_profile(tmp_path):
    """Factory writing a profile document and returning its path."""

    def _write(name: str, enabled: list[str], directory: Path | None = None, **extra) -> Path:
        target_dir = directory or tmp_path
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / name
        document = {"EnabledList": enabled, "DisabledList": [], "Operation": 0, **extra}
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write


def read_enabled(path: Path) -> list[str]:
    return json.loads(path.read_text(encoding="utf-8"))["EnabledList"]


@pytest.fixture
def read_profile():
    return read_enabled
