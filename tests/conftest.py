import asyncio
import io
import sys
from contextlib import redirect_stderr, redirect_stdout
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import fncli
import pytest

from ritual import config
from ritual.core.errors import RitualError
from ritual.core.models import HabitInput
from ritual.lib import clock
from ritual.storage import MemoryStorage
from ritual.store import HabitStore


@dataclass
class Result:
    exit_code: int
    stdout: str
    stderr: str


class FnCLIRunner:
    """Runs `ritual` subcommands in-process and captures their output."""

    _discovered = False

    def __init__(self):
        if not FnCLIRunner._discovered:
            fncli.autodiscover(Path(config.__file__).parent, "ritual")
            FnCLIRunner._discovered = True

    def invoke(self, args: list[str]) -> Result:
        out, err = io.StringIO(), io.StringIO()
        code = 0
        with redirect_stdout(out), redirect_stderr(err):
            try:
                code = fncli.dispatch(["ritual", *args]) or 0
            except SystemExit as e:
                code = e.code if isinstance(e.code, int) else 1
            except RitualError as e:
                sys.stderr.write(f"{e}\n")
                code = 1
        return Result(exit_code=code, stdout=out.getvalue(), stderr=err.getvalue())


@pytest.fixture
def tmp_ritual_dir(tmp_path, monkeypatch):
    ritual_dir = tmp_path / ".ritual"
    ritual_dir.mkdir()
    monkeypatch.setattr(config, "RITUAL_DIR", ritual_dir)
    monkeypatch.setattr(config, "DB_PATH", ritual_dir / "ritual.db")
    monkeypatch.setattr(config, "CONFIG_PATH", ritual_dir / "config.yaml")
    monkeypatch.setattr(config.Config, "_instance", None)
    return ritual_dir


@pytest.fixture
def set_today(monkeypatch):
    """Pin the clock: set_today("2024-01-03")."""

    def _set(day: str, time: str = "09:00:00") -> None:
        fixed = datetime.fromisoformat(f"{day}T{time}")
        monkeypatch.setattr(clock, "now", lambda: fixed)

    return _set


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    habit_store = HabitStore(storage)
    asyncio.run(habit_store.hydrate())
    return habit_store


def make_input(name: str = "read", **kwargs) -> HabitInput:
    kwargs.setdefault("icon", "📚")
    kwargs.setdefault("color", "#6366F1")
    return HabitInput(name=name, **kwargs)
