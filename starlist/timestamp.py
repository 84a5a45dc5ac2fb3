"""Convert instants into display-ready ``Timestamp`` pairs.

Two modes are supported:

``iso``
    The instant's ISO-8601 form is split at ``T`` and the time part is cut
    before the zone marker or fractional seconds. A non-UTC zone is applied as
    a fixed offset resolved once when the configuration is built, so instants
    on the other side of a DST transition are shifted by the same amount.

``locale``
    Date and time halves are produced by two ``LocaleFormatter`` objects
    built once at configuration time (Babel locale data, CLDR patterns).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta, tzinfo
from typing import Literal, Optional, Union
from zoneinfo import ZoneInfo

from babel import Locale
from babel.dates import format_date, format_datetime, format_time, match_skeleton

from .models import Timestamp

STYLES = ("full", "long", "medium", "short")

# Pattern letters that share one field; text widths (3+) are copied from the skeleton.
_TEXT_FIELDS = ("ML", "Ec", "G")

Instant = Union[datetime, str, None]


@dataclass(frozen=True)
class IsoDateTimeConfig:
    """ISO mode; ``utc_offset`` is derived from ``time_zone`` by the config layer."""

    time_zone: str = "UTC"
    utc_offset: timedelta = timedelta(0)
    mode: Literal["iso"] = field(default="iso", init=False)


class LocaleFormatter:
    """Formats the date or the time half of an instant for one locale and zone."""

    def __init__(
        self,
        kind: Literal["date", "time"],
        locale: Locale,
        zone: tzinfo,
        *,
        style: str | None = None,
        skeleton: str | None = None,
    ) -> None:
        if kind not in ("date", "time"):
            raise ValueError(f"Unknown formatter kind: {kind}")
        if style is not None and style not in STYLES:
            raise ValueError(f"Unknown {kind} style: {style}")
        self.kind = kind
        self.locale = locale
        self.zone = zone
        self.skeleton = skeleton or None
        self.style = style if self.skeleton is None else None
        if self.skeleton is None and self.style is None:
            self.style = "short"
        self.pattern = _skeleton_pattern(self.skeleton, locale) if self.skeleton else None

    def format(self, value: datetime) -> str:
        local = value.astimezone(self.zone)
        if self.pattern:
            return format_datetime(local, format=self.pattern, tzinfo=self.zone, locale=self.locale)
        if self.kind == "date":
            return format_date(local, format=self.style, locale=self.locale)
        return format_time(local, format=self.style, tzinfo=self.zone, locale=self.locale)

    def __repr__(self) -> str:
        detail = f"skeleton={self.skeleton!r}" if self.skeleton else f"style={self.style!r}"
        return f"LocaleFormatter({self.kind}, {self.locale}, {self.zone}, {detail})"


@dataclass(frozen=True)
class LocaleDateTimeConfig:
    date: LocaleFormatter
    time: LocaleFormatter
    mode: Literal["locale"] = field(default="locale", init=False)


DateTimeConfig = Union[IsoDateTimeConfig, LocaleDateTimeConfig]


def timestamp(config: DateTimeConfig, value: Instant = None) -> Timestamp:
    """Format ``value`` (default: now) according to ``config``."""
    instant = to_utc(value)
    if config.mode == "iso":
        return _format_iso(instant, config)
    return Timestamp(date=config.date.format(instant), time=config.time.format(instant))


def to_utc(value: Instant) -> datetime:
    """Coerce an instant to an aware UTC datetime; naive values are read as UTC."""
    if value is None:
        return datetime.now(UTC)
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def fixed_offset(time_zone: str, at: Optional[datetime] = None) -> timedelta:
    """Return the UTC offset of ``time_zone`` at ``at`` (default: now)."""
    if time_zone == "UTC":
        return timedelta(0)
    return to_utc(at).astimezone(ZoneInfo(time_zone)).utcoffset() or timedelta(0)


def _skeleton_pattern(skeleton: str, locale: Locale) -> str:
    """Resolve a CLDR skeleton to a pattern, keeping the requested text widths.

    Babel's fuzzy match returns the closest available skeleton (``yMMMd`` for
    ``yMMMMd``) without widening its fields back.
    """
    available = locale.datetime_skeletons
    matched = skeleton if skeleton in available else match_skeleton(skeleton, available)
    if matched is None:
        return skeleton
    return _widen_text_fields(available[matched].pattern, skeleton)


def _widen_text_fields(pattern: str, skeleton: str) -> str:
    widths = {}
    for group in _TEXT_FIELDS:
        for letter in group:
            if letter in skeleton:
                widths[group] = skeleton.count(letter)

    pieces = []
    quoted = False
    index = 0
    while index < len(pattern):
        char = pattern[index]
        if char == "'":
            quoted = not quoted
            pieces.append(char)
            index += 1
            continue
        end = index
        while end < len(pattern) and pattern[end] == char:
            end += 1
        run = end - index
        group = next((fields for fields in _TEXT_FIELDS if char in fields), None)
        if not quoted and group in widths and run >= 3 and widths[group] >= 3:
            run = widths[group]
        pieces.append(char * run)
        index = end
    return "".join(pieces)


def _format_iso(instant: datetime, config: IsoDateTimeConfig) -> Timestamp:
    if config.time_zone != "UTC":
        instant = instant + config.utc_offset
    return _split_iso(instant)


def _split_iso(instant: datetime) -> Timestamp:
    text = instant.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"
    date, time_z = text.split("T", 1)
    time = re.split(r"[Z.]", time_z, maxsplit=1)[0]
    return Timestamp(date=date, time=time)


__all__ = [
    "DateTimeConfig",
    "IsoDateTimeConfig",
    "LocaleDateTimeConfig",
    "LocaleFormatter",
    "fixed_offset",
    "timestamp",
    "to_utc",
]
