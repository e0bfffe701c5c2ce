"""Shared fixtures for field builder tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Generator

import pytest

from designfields.lib.conditions import add_condition
from designfields.lib.store import add_field
from designfields.lib.values import add_option
from designfields.models import FieldCollection, FieldKind

FROZEN_TIME = 1718000000.0


@pytest.fixture
def frozen_clock() -> Callable[[], float]:
    """Clock that never advances, so every id candidate collides."""
    return lambda: FROZEN_TIME


@pytest.fixture
def empty() -> FieldCollection:
    return FieldCollection()


@pytest.fixture
def three_fields(frozen_clock: Callable[[], float]) -> FieldCollection:
    """Text field A followed by dropdowns B and C."""
    snapshot = FieldCollection()
    snapshot = add_field(snapshot, "A", FieldKind.SINGLE, clock=frozen_clock)
    snapshot = add_field(snapshot, "B", FieldKind.MULTI, clock=frozen_clock)
    snapshot = add_field(snapshot, "C", FieldKind.MULTI, clock=frozen_clock)
    return snapshot


@pytest.fixture
def sized_chair(frozen_clock: Callable[[], float]) -> FieldCollection:
    """Size and Color dropdowns plus a Finish dropdown shown for large red chairs."""
    snapshot = FieldCollection()
    for label in ("Size", "Color", "Finish"):
        snapshot = add_field(snapshot, label, FieldKind.MULTI, clock=frozen_clock)
    size, color, finish = snapshot.ids()

    for option in ("S", "L"):
        snapshot = add_option(snapshot, size, option)
    for option in ("Red", "Blue"):
        snapshot = add_option(snapshot, color, option)
    for option in ("Matte", "Gloss"):
        snapshot = add_option(snapshot, finish, option)

    snapshot = add_condition(snapshot, finish, size, "L")
    snapshot = add_condition(snapshot, finish, color, "Red")
    return snapshot


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Isolated working directory with no DESIGNFIELDS_ variables set."""
    import os

    for name in list(os.environ):
        if name.startswith("DESIGNFIELDS_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    yield tmp_path


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """Put the root logger back after a test calls setup_logging."""
    import logging

    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            handler.close()
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
