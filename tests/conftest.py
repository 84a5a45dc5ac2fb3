from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import List

import pytest

from starlist.models import CatalogResponse, RawRecord
from starlist.stars.normalizer import parse_repo
from tests._fixtures.graphql import edge, repo_node


@pytest.fixture(autouse=True)
def _starlist_logs_propagate():
    """Let caplog see starlist records even after configure_logging ran."""
    logger = logging.getLogger("starlist")
    previous = logger.propagate
    logger.propagate = True
    yield
    logger.propagate = previous


@pytest.fixture(autouse=True)
def _no_github_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        "GITHUB_ACTIONS",
        "GITHUB_REPOSITORY",
        "GITHUB_REF",
        "GITHUB_TOKEN",
        "STARLIST_TOKEN",
        "STARLIST_GRAPHQL_URL",
        "GITHUB_GRAPHQL_URL",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def raw_records() -> List[RawRecord]:
    return [
        parse_repo(edge(repo_node("octo/cli", topics=[("cli", "/t/cli")]))),
        parse_repo(edge(repo_node("octo/web", languages=[("TypeScript", 3), ("CSS", 1)]))),
    ]


@pytest.fixture
def catalog(raw_records: List[RawRecord]) -> CatalogResponse:
    return CatalogResponse(
        login="octocat",
        total=2,
        truncated=False,
        updated_at=datetime(2024, 3, 1, 10, 20, 30, tzinfo=UTC),
        stars=raw_records,
    )


@pytest.fixture
def repo_dir(tmp_path: Path) -> Path:
    root = tmp_path / "repo"
    root.mkdir()
    return root
