"""Shared pytest fixtures for metafilter tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from metafilter.domain import tables


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _restore_table_registry() -> Generator[None]:
    """Undo table registrations made by a test."""
    snapshot = dict(tables.TABLE_REGISTRY)
    yield
    tables.TABLE_REGISTRY.clear()
    tables.TABLE_REGISTRY.update(snapshot)


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of config discovery."""
    monkeypatch.delenv("METAFILTER_CONFIG", raising=False)
    monkeypatch.delenv("METAFILTER_FILTER__TABLES", raising=False)
    monkeypatch.delenv("METAFILTER_FILTER__UNTIL_STABLE", raising=False)


@pytest.fixture
def config_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary working directory holding a metafilter.toml with one user table.

    The CWD is switched to it so walk-up discovery finds the file.
    """
    (tmp_path / "metafilter.toml").write_text(
        """\
[filter]
tables = ["radio", "trim-whitespace"]

[[rules.radio.rules]]
pattern = '\\s*\\(radio edit\\)'
ignore_case = true

[[rules.radio.rules]]
pattern = "&"
replacement = "and"
literal = true
""",
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path
