"""Core data models shared across starlist components."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

# Bump whenever the serialized RawRecord shape changes incompatibly.
DATA_VERSION = 1

UNCLASSIFIED_LANGUAGE = "Unclassified"
NO_TOPICS_KEY = "no-topics"
NO_TOPICS_URL = "#"


@dataclass(frozen=True)
class Timestamp:
    """Display-ready date and time strings."""

    date: str
    time: str


@dataclass(frozen=True)
class Language:
    """One language share of a repository, as a rounded percentage."""

    name: str
    percent: int


@dataclass(frozen=True)
class Topic:
    name: str
    url: str


@dataclass(frozen=True)
class RawRelease:
    name: str
    published_at: Optional[str]


@dataclass(frozen=True)
class Release:
    name: str
    published_on: Timestamp


@dataclass
class RawRecord:
    """Normalized starred repository with instants kept as upstream ISO strings."""

    name: str
    url: str
    description: Optional[str]
    forks: int
    stars: int
    homepage_url: Optional[str]
    is_fork: bool
    is_template: bool
    license: str
    parent_repo: Optional[str]
    pushed_at: Optional[str]
    starred_at: Optional[str]
    archived_at: Optional[str]
    language_count: int
    languages: List[Language]
    topic_count: int
    topics: Optional[List[Topic]]
    latest_release: Optional[RawRelease]


@dataclass
class DisplayRecord:
    """RawRecord with every instant formatted for templates."""

    name: str
    url: str
    description: Optional[str]
    forks: int
    stars: int
    homepage_url: Optional[str]
    is_fork: bool
    is_template: bool
    license: str
    parent_repo: Optional[str]
    pushed_on: Timestamp
    starred_on: Timestamp
    archived_on: Optional[Timestamp]
    language_count: int
    languages: List[Language]
    topic_count: int
    topics: Optional[List[Topic]]
    latest_release: Optional[Release]

    @property
    def primary_language(self) -> str:
        return self.languages[0].name


@dataclass
class CatalogResponse:
    """Versioned snapshot of one account's starred repositories."""

    login: str
    total: int
    truncated: bool
    updated_at: datetime
    stars: List[RawRecord] = field(default_factory=list)
    data_version: int = DATA_VERSION


@dataclass
class TopicGroup:
    url: str
    entries: List[DisplayRecord] = field(default_factory=list)


@dataclass
class CatalogGroups:
    """Indexes derived from the display records for rendering."""

    by_language: Dict[str, List[DisplayRecord]]
    by_all_languages: Dict[str, List[DisplayRecord]]
    by_topic: Dict[str, TopicGroup]
    languages: List[str]
    topics: List[Topic]


@dataclass
class TemplateVars:
    """Everything a report template can reference."""

    login: str
    truncated: bool
    total: int
    stars: List[DisplayRecord]
    updated_at: Timestamp
    groups: CatalogGroups

    def as_context(self) -> Dict[str, Any]:
        return {
            "login": self.login,
            "truncated": self.truncated,
            "total": self.total,
            "stars": self.stars,
            "updated_at": self.updated_at,
            "by_language": self.groups.by_language,
            "by_all_languages": self.groups.by_all_languages,
            "by_topic": self.groups.by_topic,
            "languages": self.groups.languages,
            "topics": self.groups.topics,
        }
