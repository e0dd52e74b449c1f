"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from crafty.config import Settings
from crafty.console import LOG

from tests.helpers import CATALOG, ZSTD_BYTES, FakeResponse, FakeSession, listing_html


@pytest.fixture(autouse=True)
def reset_logger():
    LOG.quiet = False
    LOG.verbose = False
    yield
    LOG.quiet = False
    LOG.verbose = False


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        tree_url="https://example.test/tree/x86_64",
        download_base_url="https://example.test/raw/x86_64/",
        ledger_path=tmp_path / "config" / ".crafty" / "installed.json",
        download_dir=tmp_path / "downloads",
        use_sudo=False,
    )


@pytest.fixture
def session(settings: Settings) -> FakeSession:
    routes = {settings.tree_url: FakeResponse(text=listing_html(CATALOG))}
    for name in CATALOG:
        routes[settings.archive_url(name)] = FakeResponse(content=ZSTD_BYTES)
    return FakeSession(routes)
