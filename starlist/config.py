"""Configuration loading for starlist (.starlist.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from babel import Locale, UnknownLocaleError

from .logging import get_logger
from .timestamp import (
    STYLES,
    DateTimeConfig,
    IsoDateTimeConfig,
    LocaleDateTimeConfig,
    LocaleFormatter,
    fixed_offset,
)

CONFIG_FILENAME = ".starlist.yml"
DEFAULT_TEMPLATE = "TEMPLATE.md.j2"
PACKAGE_TEMPLATES_DIR = Path(__file__).with_name("templates")
ENV_TOKEN_KEYS = ("STARLIST_TOKEN", "GITHUB_TOKEN")

DEFAULT_COMMIT_MESSAGE = "chore(updates): updated entries in files"
DEFAULT_GIT_EMAIL = "actions@users.noreply.github.com"
DEFAULT_GIT_NAME = "GitHub Actions"

_logger = get_logger("config")

# CLDR skeleton fields for component-style date and time options.
_WEEKDAY = {"narrow": "EEEEE", "short": "E", "long": "EEEE"}
_ERA = {"narrow": "GGGGG", "short": "G", "long": "GGGG"}
_YEAR = {"numeric": "y", "2-digit": "yy"}
_MONTH = {"numeric": "M", "2-digit": "MM", "short": "MMM", "long": "MMMM", "narrow": "MMMMM"}
_DAY = {"numeric": "d", "2-digit": "dd"}
_DAY_PERIOD = {"narrow": "BBBBB", "short": "B", "long": "BBBB"}
_TIME_ZONE_NAME = {
    "short": "z",
    "long": "zzzz",
    "shortOffset": "O",
    "longOffset": "OOOO",
    "shortGeneric": "v",
    "longGeneric": "vvvv",
}
_HOUR_CYCLES = {"h11": "K", "h12": "h", "h23": "H", "h24": "k"}


class ConfigError(RuntimeError):
    """Raised when the configuration cannot be resolved."""


@dataclass
class FormatConfig:
    """General data formatting settings."""

    date_time: DateTimeConfig = field(default_factory=IsoDateTimeConfig)


@dataclass
class GitConfig:
    """Commit identity and behaviour for publishing generated files."""

    commit_message: str = DEFAULT_COMMIT_MESSAGE
    email: str = DEFAULT_GIT_EMAIL
    name: str = DEFAULT_GIT_NAME
    pull_flags: str = ""
    local: bool = False


@dataclass
class OutputConfig:
    filename: str = "README.md"


@dataclass
class StarsConfig:
    """Where star data comes from: the GraphQL API or the cached ``data.json``."""

    source: str = "api"
    filename: str = "data.json"


@dataclass
class FileReference:
    """A resolved file; ``name`` is for display, ``path`` is absolute."""

    name: str
    path: Path


@dataclass
class TemplateConfig:
    source: FileReference


@dataclass
class StarlistConfig:
    """Represents the settings defined in .starlist.yml plus the API token."""

    root: Path
    token: Optional[str]
    template: TemplateConfig
    format: FormatConfig = field(default_factory=FormatConfig)
    git: GitConfig = field(default_factory=GitConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    stars: StarsConfig = field(default_factory=StarsConfig)


def load_config(
    config_path: Path,
    *,
    token: str | None = None,
    root: Path | None = None,
) -> StarlistConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    repo_root = (root or config_file.parent).resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)

    return StarlistConfig(
        root=repo_root,
        token=_resolve_token(token),
        template=resolve_template_config(_section(data, "template"), repo_root),
        format=FormatConfig(
            date_time=resolve_date_time_config(_section(_section(data, "format"), "date_time"))
        ),
        git=resolve_git_config(_section(data, "git")),
        output=resolve_output_config(_section(data, "output")),
        stars=resolve_stars_config(_section(data, "stars")),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _resolve_token(token: str | None) -> Optional[str]:
    if token:
        return token.strip()
    for key in ENV_TOKEN_KEYS:
        value = os.getenv(key)
        if value:
            return value.strip()
    return None


def _section(data: Optional[Dict[str, Any]], key: str) -> Optional[Dict[str, Any]]:
    if not data:
        return None
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        _logger.warning("config.%s is not a dictionary or null", key)
        return None
    return value


# ----------------------------------------------------------------------
# Date and time


def resolve_date_time_config(value: Optional[Dict[str, Any]]) -> DateTimeConfig:
    """Build the timestamp configuration; formatters are created here, once."""
    if value is None:
        return IsoDateTimeConfig()
    if value.get("mode") == "iso" or value.get("locale") == "iso":
        zone = _resolve_time_zone(value)
        return IsoDateTimeConfig(time_zone=zone, utc_offset=fixed_offset(zone))
    return _resolve_locale_config(value)


def _resolve_locale_config(value: Dict[str, Any]) -> LocaleDateTimeConfig:
    locale_name = _resolve_string("locale", value.get("locale")) or "en"
    try:
        locale = Locale.parse(locale_name.replace("-", "_"))
    except (UnknownLocaleError, ValueError):
        _logger.warning("locale %s is not known; using en", locale_name)
        locale = Locale.parse("en")

    zone = ZoneInfo(_resolve_time_zone(value))

    date_style = _aliased(value, "date_style", "dateStyle")
    if date_style is not None and date_style not in STYLES:
        _logger.warning("date_style %s is invalid", date_style)
        date_style = None
    date_skeleton = "" if date_style else _date_skeleton(value)

    time_style = _aliased(value, "time_style", "timeStyle")
    if time_style is not None and time_style not in STYLES:
        _logger.warning("time_style %s is invalid", time_style)
        time_style = None
    time_skeleton = "" if time_style else _time_skeleton(value, locale)

    return LocaleDateTimeConfig(
        date=LocaleFormatter(
            "date",
            locale,
            zone,
            style=date_style or (None if date_skeleton else "short"),
            skeleton=date_skeleton or None,
        ),
        time=LocaleFormatter(
            "time",
            locale,
            zone,
            style=time_style or (None if time_skeleton else "short"),
            skeleton=time_skeleton or None,
        ),
    )


def _date_skeleton(value: Dict[str, Any]) -> str:
    parts = [
        _choice(value, "era", _ERA),
        _choice(value, "year", _YEAR),
        _choice(value, "month", _MONTH),
        _choice(value, "weekday", _WEEKDAY),
        _choice(value, "day", _DAY),
    ]
    return "".join(parts)


def _time_skeleton(value: Dict[str, Any], locale: Locale) -> str:
    hour_symbol = _hour_symbol(value, locale)
    hour = _choice(value, "hour", {"numeric": hour_symbol, "2-digit": hour_symbol * 2})
    minute = _choice(value, "minute", {"numeric": "m", "2-digit": "mm"})
    second = _choice(value, "second", {"numeric": "s", "2-digit": "ss"})

    digits = value.get("fractional_second_digits")
    if digits is None and "fractionalSecondDigits" in value:
        _logger.warning("fractionalSecondDigits is deprecated, use fractional_second_digits")
        digits = value.get("fractionalSecondDigits")
    fraction = "S" * digits if digits in (1, 2, 3) else ""

    period = ""
    period_name = _aliased(value, "day_period", "dayPeriod")
    if period_name in _DAY_PERIOD:
        period = _DAY_PERIOD[period_name]

    zone_name = ""
    zone_key = _aliased(value, "time_zone_name", "timeZoneName")
    if zone_key in _TIME_ZONE_NAME:
        zone_name = _TIME_ZONE_NAME[zone_key]

    return f"{period}{hour}{minute}{second}{fraction}{zone_name}"


def _hour_symbol(value: Dict[str, Any], locale: Locale) -> str:
    cycle = _aliased(value, "hour_cycle", "hourCycle")
    if cycle in _HOUR_CYCLES:
        return _HOUR_CYCLES[cycle]
    hour12 = value.get("hour12")
    if isinstance(hour12, bool):
        return "h" if hour12 else "H"
    pattern = getattr(locale.time_formats.get("short"), "pattern", "H")
    return "h" if "h" in pattern else "H"


def _choice(value: Dict[str, Any], key: str, options: Dict[str, str]) -> str:
    chosen = _resolve_string(key, value.get(key)) if key in value else None
    if chosen is None:
        return ""
    if chosen not in options:
        _logger.warning("%s has an unsupported value: %s", key, chosen)
        return ""
    return options[chosen]


def _resolve_time_zone(value: Dict[str, Any]) -> str:
    zone = _aliased(value, "time_zone", "timeZone") or "UTC"
    if zone == "UTC":
        return zone
    try:
        ZoneInfo(zone)
    except (ZoneInfoNotFoundError, ValueError):
        _logger.warning("time_zone %s is not a known time zone; using UTC", zone)
        return "UTC"
    return zone


# ----------------------------------------------------------------------
# Git, output, stars, template


def resolve_git_config(value: Optional[Dict[str, Any]]) -> GitConfig:
    value = value or {}
    return GitConfig(
        commit_message=_resolve_string("commit_message", value.get("commit_message"))
        or DEFAULT_COMMIT_MESSAGE,
        email=_resolve_string("email", value.get("email")) or DEFAULT_GIT_EMAIL,
        name=_resolve_string("name", value.get("name")) or DEFAULT_GIT_NAME,
        pull_flags=_resolve_string("pull_flags", value.get("pull_flags"), allow_empty=True) or "",
        local=_as_bool(value.get("local")) or False,
    )


def resolve_output_config(value: Optional[Dict[str, Any]]) -> OutputConfig:
    value = value or {}
    return OutputConfig(filename=_resolve_string("filename", value.get("filename")) or "README.md")


def resolve_stars_config(value: Optional[Dict[str, Any]]) -> StarsConfig:
    value = value or {}
    source = _resolve_string("source", value.get("source"))
    if source is not None:
        source = source.lower()
        if source not in ("api", "file"):
            _logger.warning("config.stars.source must be either api or file")
            source = None
    return StarsConfig(source=source or "api")


def resolve_template_config(value: Optional[Dict[str, Any]], root: Path) -> TemplateConfig:
    value = value or {}
    wanted = _resolve_string("source", value.get("source")) or DEFAULT_TEMPLATE
    return TemplateConfig(source=resolve_file_reference(wanted, root))


def resolve_file_reference(wanted: str, root: Path) -> FileReference:
    """Find ``wanted`` in the repository first, then among the packaged templates."""
    in_root = (root / wanted).resolve()
    if in_root.is_file():
        try:
            name = in_root.relative_to(root).as_posix()
        except ValueError:
            name = in_root.as_posix()
        return FileReference(name=name, path=in_root)

    in_package = (PACKAGE_TEMPLATES_DIR / wanted).resolve()
    if in_package.is_file():
        return FileReference(name=f"package:{wanted}", path=in_package)

    raise ConfigError(
        f"Cannot find template path {wanted} in {root} or in the starlist package templates"
    )


# ----------------------------------------------------------------------
# Value helpers


def _resolve_string(key: str, value: Any, *, allow_empty: bool = False) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        _logger.warning("%s has an invalid value: %r", key, value)
        return None
    result = value.strip()
    if not result and not allow_empty:
        _logger.warning("%s is invalid", key)
        return None
    return result


def _aliased(value: Dict[str, Any], key: str, deprecated: str) -> Optional[str]:
    result = _resolve_string(key, value.get(key)) if key in value else None
    if result is None and deprecated in value:
        _logger.warning("%s is deprecated, use %s", deprecated, key)
        result = _resolve_string(deprecated, value.get(deprecated))
    return result


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "FileReference",
    "FormatConfig",
    "GitConfig",
    "OutputConfig",
    "StarlistConfig",
    "StarsConfig",
    "TemplateConfig",
    "load_config",
    "resolve_date_time_config",
    "resolve_file_reference",
]
