"""Index display records by language and topic for rendering."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from ..models import (
    NO_TOPICS_KEY,
    NO_TOPICS_URL,
    CatalogGroups,
    DisplayRecord,
    Topic,
    TopicGroup,
)

LanguageGroups = Dict[str, List[DisplayRecord]]
TopicGroups = Dict[str, TopicGroup]


def group_by_first_language(records: Iterable[DisplayRecord]) -> LanguageGroups:
    groups: LanguageGroups = {}
    for record in records:
        groups.setdefault(record.primary_language, []).append(record)
    return groups


def group_by_all_languages(records: Iterable[DisplayRecord]) -> LanguageGroups:
    groups: LanguageGroups = {}
    for record in records:
        for language in record.languages:
            groups.setdefault(language.name, []).append(record)
    return groups


def group_by_topics(records: Iterable[DisplayRecord]) -> TopicGroups:
    """File each record under every topic it carries, or under ``no-topics``.

    If two records give different URLs for the same topic, the last URL wins.
    """
    groups: TopicGroups = {}
    for record in records:
        if record.topics is None:
            groups.setdefault(NO_TOPICS_KEY, TopicGroup(url=NO_TOPICS_URL)).entries.append(record)
            continue
        for topic in record.topics:
            group = groups.setdefault(topic.name, TopicGroup(url=topic.url))
            group.url = topic.url
            group.entries.append(record)
    return groups


def sorted_languages(groups: LanguageGroups) -> List[str]:
    return sorted(groups)


def sorted_topics(groups: TopicGroups) -> List[Topic]:
    return [
        Topic(name=name, url=groups[name].url)
        for name in sorted(groups)
        if name != NO_TOPICS_KEY
    ]


def build_groups(records: Sequence[DisplayRecord]) -> CatalogGroups:
    by_language = group_by_first_language(records)
    by_topic = group_by_topics(records)
    return CatalogGroups(
        by_language=by_language,
        by_all_languages=group_by_all_languages(records),
        by_topic=by_topic,
        languages=sorted_languages(by_language),
        topics=sorted_topics(by_topic),
    )


__all__ = [
    "LanguageGroups",
    "TopicGroups",
    "build_groups",
    "group_by_all_languages",
    "group_by_first_language",
    "group_by_topics",
    "sorted_languages",
    "sorted_topics",
]
