"""Tests for edge normalization and display formatting."""

from __future__ import annotations

from starlist.models import Language, RawRelease, Timestamp, Topic
from starlist.stars.normalizer import (
    UNKNOWN_LICENSE,
    parse_languages,
    parse_license,
    parse_release,
    parse_repo,
    parse_topics,
    to_display,
)
from starlist.timestamp import IsoDateTimeConfig
from tests._fixtures.graphql import edge, repo_node


def test_parse_repo_flattens_node_fields() -> None:
    node = repo_node(
        "octo/fork",
        parent={"nameWithOwner": "upstream/fork"},
        isFork=True,
        homepageUrl="https://example.com",
        topics=[("cli", "/t/cli")],
    )

    record = parse_repo(edge(node, starred_at="2024-03-01T10:20:30Z"))

    assert record.name == "octo/fork"
    assert record.url == "https://github.com/octo/fork"
    assert record.forks == 3
    assert record.stars == 42
    assert record.is_fork is True
    assert record.parent_repo == "upstream/fork"
    assert record.homepage_url == "https://example.com"
    assert record.starred_at == "2024-03-01T10:20:30Z"
    assert record.pushed_at == "2024-02-10T08:00:00Z"
    assert record.license == "MIT"
    assert record.topics == [Topic(name="cli", url="/t/cli")]


def test_license_fallback_chain() -> None:
    assert parse_license({"nickname": "GPLv3", "spdxId": "GPL-3.0"}) == "GPLv3"
    assert parse_license({"nickname": None, "spdxId": "Apache-2.0"}) == "Apache-2.0"
    assert parse_license({"nickname": None, "spdxId": None}) == UNKNOWN_LICENSE
    assert parse_license(None) == UNKNOWN_LICENSE


def test_languages_are_rounded_shares() -> None:
    count, languages = parse_languages(
        {
            "totalCount": 3,
            "totalSize": 8,
            "edges": [
                {"size": 5, "node": {"name": "Go"}},
                {"size": 2, "node": {"name": "Shell"}},
                {"size": 1, "node": {"name": "Makefile"}},
            ],
        }
    )

    assert count == 3
    assert languages == [
        Language("Go", 63),
        Language("Shell", 25),
        Language("Makefile", 13),
    ]


def test_missing_languages_become_unclassified() -> None:
    unclassified = (1, [Language("Unclassified", 100)])

    assert parse_languages(None) == unclassified
    assert parse_languages({"totalCount": 0, "totalSize": 0, "edges": []}) == unclassified
    assert parse_languages({"totalCount": 1, "totalSize": 0, "edges": [None]}) == unclassified

    record = parse_repo(edge(repo_node(languages=None)))
    assert record.languages == [Language("Unclassified", 100)]


def test_topics_without_nodes_are_none() -> None:
    assert parse_topics(None) == (0, None)
    assert parse_topics({"totalCount": 0, "nodes": []}) == (0, None)

    count, topics = parse_topics(
        {"totalCount": 2, "nodes": [{"url": "/t/a", "topic": {"name": "a"}}, None]}
    )
    assert count == 2
    assert topics == [Topic("a", "/t/a")]


def test_release_requires_a_name() -> None:
    assert parse_release(None) is None
    assert parse_release({"name": "", "publishedAt": "2024-01-01T00:00:00Z"}) is None
    assert parse_release({"name": "v1.0", "publishedAt": "2024-01-01T00:00:00Z"}) == RawRelease(
        "v1.0", "2024-01-01T00:00:00Z"
    )


def test_to_display_formats_every_instant() -> None:
    node = repo_node(
        archivedAt="2024-02-20T00:00:00Z",
        latestRelease={"name": "v2", "publishedAt": "2024-01-05T12:00:00Z"},
    )
    record = parse_repo(edge(node, starred_at="2024-03-01T10:20:30Z"))

    display = to_display(record, IsoDateTimeConfig())

    assert display.starred_on == Timestamp("2024-03-01", "10:20:30")
    assert display.pushed_on == Timestamp("2024-02-10", "08:00:00")
    assert display.archived_on == Timestamp("2024-02-20", "00:00:00")
    assert display.latest_release is not None
    assert display.latest_release.published_on == Timestamp("2024-01-05", "12:00:00")
    assert display.primary_language == "Python"


def test_to_display_leaves_absent_archive_empty() -> None:
    display = to_display(parse_repo(edge(repo_node())), IsoDateTimeConfig())

    assert display.archived_on is None
    assert display.latest_release is None
    assert display.topics is None
