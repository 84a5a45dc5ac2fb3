"""Persistent snapshot of the star catalog (``data.json``)."""

from __future__ import annotations

import json
import threading
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from ..models import (
    DATA_VERSION,
    CatalogResponse,
    Language,
    RawRecord,
    RawRelease,
    Topic,
)


class CacheIncompatibleError(RuntimeError):
    """Raised when the cache slot cannot be trusted; ``reason`` is human readable."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class CacheSlot(Protocol):
    """A single named text slot."""

    def exists(self) -> bool: ...

    def read_text(self) -> str: ...

    def write_text(self, text: str) -> None: ...


class FileCacheSlot:
    """Cache slot backed by one file on disk."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        return self.path.is_file()

    def read_text(self) -> str:
        return self.path.read_text(encoding="utf-8")

    def write_text(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(text, encoding="utf-8")

    def __repr__(self) -> str:
        return f"FileCacheSlot({self.path})"


class CatalogCache:
    """Reads and writes a ``CatalogResponse`` through a cache slot.

    A snapshot whose ``dataVersion`` differs from ``DATA_VERSION`` is rejected
    as a whole; there is no field-level migration.
    """

    def __init__(self, slot: CacheSlot) -> None:
        self.slot = slot
        self._lock = threading.Lock()

    def load(self) -> CatalogResponse:
        with self._lock:
            if not self.slot.exists():
                raise CacheIncompatibleError(f"{self.slot} does not exist")
            try:
                text = self.slot.read_text()
            except (OSError, UnicodeDecodeError) as exc:
                raise CacheIncompatibleError(f"{self.slot} is unreadable: {exc}") from exc
        return self.loads(text)

    def save(self, response: CatalogResponse) -> None:
        text = self.dumps(response)
        with self._lock:
            self.slot.write_text(text)

    @staticmethod
    def dumps(response: CatalogResponse) -> str:
        payload = {
            "dataVersion": response.data_version,
            "login": response.login,
            "total": response.total,
            "truncated": response.truncated,
            "updatedAt": _format_instant(response.updated_at),
            "stars": [_record_to_dict(record) for record in response.stars],
        }
        return json.dumps(payload, indent=2) + "\n"

    @staticmethod
    def loads(text: str) -> CatalogResponse:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise CacheIncompatibleError(f"snapshot is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise CacheIncompatibleError("snapshot is not a JSON object")

        version = data.get("dataVersion")
        if version != DATA_VERSION:
            raise CacheIncompatibleError(
                f"snapshot dataVersion {version!r} does not match {DATA_VERSION}"
            )

        try:
            stars = data["stars"]
            if not isinstance(stars, list):
                raise TypeError("stars is not a list")
            return CatalogResponse(
                login=str(data["login"]),
                total=int(data["total"]),
                truncated=bool(data["truncated"]),
                updated_at=_parse_instant(data["updatedAt"]),
                stars=[_record_from_dict(item) for item in stars],
                data_version=version,
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise CacheIncompatibleError(f"snapshot is malformed: {exc}") from exc


# ----------------------------------------------------------------------
# Serialisation helpers


def _format_instant(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


def _parse_instant(value: Any) -> datetime:
    if not isinstance(value, str):
        raise TypeError("updatedAt is not a string")
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def _record_to_dict(record: RawRecord) -> Dict[str, Any]:
    release: Optional[Dict[str, Any]] = None
    if record.latest_release is not None:
        release = {
            "name": record.latest_release.name,
            "publishedAt": record.latest_release.published_at,
        }
    topics: Optional[List[Dict[str, str]]] = None
    if record.topics is not None:
        topics = [{"name": topic.name, "url": topic.url} for topic in record.topics]
    return {
        "archivedAt": record.archived_at,
        "description": record.description,
        "forks": record.forks,
        "homepageUrl": record.homepage_url,
        "isFork": record.is_fork,
        "isTemplate": record.is_template,
        "languageCount": record.language_count,
        "languages": [
            {"name": language.name, "percent": language.percent}
            for language in record.languages
        ],
        "latestRelease": release,
        "license": record.license,
        "name": record.name,
        "parentRepo": record.parent_repo,
        "pushedAt": record.pushed_at,
        "starredAt": record.starred_at,
        "stars": record.stars,
        "topicCount": record.topic_count,
        "topics": topics,
        "url": record.url,
    }


def _record_from_dict(payload: Any) -> RawRecord:
    if not isinstance(payload, dict):
        raise TypeError("star entry is not an object")
    languages = [
        Language(name=str(item["name"]), percent=int(item["percent"]))
        for item in payload["languages"]
    ]
    if not languages:
        raise ValueError(f"{payload.get('name')} has no languages")
    raw_topics = payload.get("topics")
    topics = (
        [Topic(name=str(item["name"]), url=str(item["url"])) for item in raw_topics]
        if raw_topics is not None
        else None
    )
    raw_release = payload.get("latestRelease")
    release = (
        RawRelease(name=str(raw_release["name"]), published_at=raw_release.get("publishedAt"))
        if raw_release
        else None
    )
    return RawRecord(
        name=str(payload["name"]),
        url=str(payload["url"]),
        description=payload.get("description"),
        forks=int(payload["forks"]),
        stars=int(payload["stars"]),
        homepage_url=payload.get("homepageUrl"),
        is_fork=bool(payload["isFork"]),
        is_template=bool(payload["isTemplate"]),
        license=str(payload["license"]),
        parent_repo=payload.get("parentRepo"),
        pushed_at=payload.get("pushedAt"),
        starred_at=payload.get("starredAt"),
        archived_at=payload.get("archivedAt"),
        language_count=int(payload["languageCount"]),
        languages=languages,
        topic_count=int(payload["topicCount"]),
        topics=topics,
        latest_release=release,
    )


__all__ = ["CacheIncompatibleError", "CacheSlot", "CatalogCache", "FileCacheSlot"]
