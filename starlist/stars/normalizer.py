"""Turn raw GraphQL edges into flat, display-ready repository records."""

from __future__ import annotations

import math
from typing import Any, List, Mapping, Optional, Tuple

from ..models import (
    UNCLASSIFIED_LANGUAGE,
    DisplayRecord,
    Language,
    RawRecord,
    RawRelease,
    Release,
    Topic,
)
from ..timestamp import DateTimeConfig, timestamp

UNKNOWN_LICENSE = "Unknown license"


def parse_repo(edge: Mapping[str, Any]) -> RawRecord:
    """Normalize one ``starredRepositories`` edge.

    Callers filter out private repositories before calling this.
    """
    node = edge.get("node") or {}

    language_count, languages = parse_languages(node.get("languages"))
    topic_count, topics = parse_topics(node.get("repositoryTopics"))

    return RawRecord(
        name=node.get("nameWithOwner") or "",
        url=node.get("url") or "",
        description=node.get("description") or None,
        forks=int(node.get("forkCount") or 0),
        stars=int(node.get("stargazerCount") or 0),
        homepage_url=node.get("homepageUrl") or None,
        is_fork=bool(node.get("isFork")),
        is_template=bool(node.get("isTemplate")),
        license=parse_license(node.get("licenseInfo")),
        parent_repo=(node.get("parent") or {}).get("nameWithOwner") or None,
        pushed_at=node.get("pushedAt"),
        starred_at=edge.get("starredAt"),
        archived_at=node.get("archivedAt") or None,
        language_count=language_count,
        languages=languages,
        topic_count=topic_count,
        topics=topics,
        latest_release=parse_release(node.get("latestRelease")),
    )


def parse_license(info: Optional[Mapping[str, Any]]) -> str:
    if not info:
        return UNKNOWN_LICENSE
    return info.get("nickname") or info.get("spdxId") or UNKNOWN_LICENSE


def parse_languages(connection: Optional[Mapping[str, Any]]) -> Tuple[int, List[Language]]:
    """Return ``(count, languages)``; never an empty language list."""
    unclassified = (1, [Language(name=UNCLASSIFIED_LANGUAGE, percent=100)])
    if not connection:
        return unclassified

    edges = [edge for edge in connection.get("edges") or [] if edge and edge.get("node")]
    total_count = connection.get("totalCount") or 0
    total_size = connection.get("totalSize") or 0
    if not edges or total_count == 0 or total_size == 0:
        return unclassified

    languages = [
        Language(
            name=edge["node"]["name"],
            percent=_round_half_up((edge.get("size") or 0) / total_size * 100),
        )
        for edge in edges
    ]
    return total_count, languages


def parse_topics(connection: Optional[Mapping[str, Any]]) -> Tuple[int, Optional[List[Topic]]]:
    """Return ``(count, topics)``; ``topics`` is ``None`` when there is nothing to group."""
    if not connection:
        return 0, None

    topics = [
        Topic(name=node["topic"]["name"], url=node.get("url") or "")
        for node in connection.get("nodes") or []
        if node and node.get("topic")
    ]
    if not topics:
        return 0, None
    return connection.get("totalCount") or len(topics), topics


def parse_release(release: Optional[Mapping[str, Any]]) -> Optional[RawRelease]:
    if not release or not release.get("name"):
        return None
    return RawRelease(name=release["name"], published_at=release.get("publishedAt"))


def to_display(record: RawRecord, config: DateTimeConfig) -> DisplayRecord:
    """Format every instant of ``record``; pure and total."""
    release: Optional[Release] = None
    if record.latest_release is not None:
        release = Release(
            name=record.latest_release.name,
            published_on=timestamp(config, record.latest_release.published_at),
        )

    return DisplayRecord(
        name=record.name,
        url=record.url,
        description=record.description,
        forks=record.forks,
        stars=record.stars,
        homepage_url=record.homepage_url,
        is_fork=record.is_fork,
        is_template=record.is_template,
        license=record.license,
        parent_repo=record.parent_repo,
        pushed_on=timestamp(config, record.pushed_at),
        starred_on=timestamp(config, record.starred_at),
        archived_on=timestamp(config, record.archived_at) if record.archived_at else None,
        language_count=record.language_count,
        languages=list(record.languages),
        topic_count=record.topic_count,
        topics=list(record.topics) if record.topics is not None else None,
        latest_release=release,
    )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


__all__ = [
    "UNKNOWN_LICENSE",
    "parse_languages",
    "parse_license",
    "parse_release",
    "parse_repo",
    "parse_topics",
    "to_display",
]
