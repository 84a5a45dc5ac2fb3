"""Tests for starlist.config."""

from __future__ import annotations

import logging
from datetime import timedelta
from pathlib import Path

import pytest

from starlist.config import (
    DEFAULT_COMMIT_MESSAGE,
    ConfigError,
    StarlistConfig,
    load_config,
    resolve_date_time_config,
)
from starlist.timestamp import IsoDateTimeConfig, LocaleDateTimeConfig


def _write(root: Path, text: str) -> None:
    (root / ".starlist.yml").write_text(text, encoding="utf-8")


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, StarlistConfig)
    assert config.root == tmp_path.resolve()
    assert config.token is None
    assert config.template.source.name == "package:TEMPLATE.md.j2"
    assert config.template.source.path.is_file()
    assert config.format.date_time == IsoDateTimeConfig()
    assert config.git.commit_message == DEFAULT_COMMIT_MESSAGE
    assert config.git.local is False
    assert config.output.filename == "README.md"
    assert config.stars.source == "api"
    assert config.stars.filename == "data.json"


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    (tmp_path / "STARS.md.j2").write_text("# {{ login }}\n", encoding="utf-8")
    _write(
        tmp_path,
        """
git:
  commit_message: "docs: refresh stars"
  email: bot@example.com
  name: Star Bot
  pull_flags: "--ff-only"
  local: true
output:
  filename: STARS.md
stars:
  source: FILE
template:
  source: STARS.md.j2
""",
    )

    config = load_config(tmp_path)

    assert config.git.commit_message == "docs: refresh stars"
    assert config.git.email == "bot@example.com"
    assert config.git.name == "Star Bot"
    assert config.git.pull_flags == "--ff-only"
    assert config.git.local is True
    assert config.output.filename == "STARS.md"
    assert config.stars.source == "file"
    assert config.template.source.name == "STARS.md.j2"


def test_token_prefers_argument_then_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "from-github")
    assert load_config(tmp_path).token == "from-github"

    monkeypatch.setenv("STARLIST_TOKEN", "from-starlist")
    assert load_config(tmp_path).token == "from-starlist"

    assert load_config(tmp_path, token=" explicit ").token == "explicit"


def test_invalid_source_warns_and_uses_api(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    _write(tmp_path, "stars:\n  source: ftp\n")

    with caplog.at_level(logging.WARNING, logger="starlist"):
        config = load_config(tmp_path)

    assert config.stars.source == "api"
    assert "config.stars.source must be either api or file" in caplog.text


def test_missing_template_raises(tmp_path: Path) -> None:
    _write(tmp_path, "template:\n  source: NOPE.md.j2\n")

    with pytest.raises(ConfigError, match="NOPE.md.j2"):
        load_config(tmp_path)


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    _write(tmp_path, "git: [unclosed\n")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)


def test_non_mapping_root_raises(tmp_path: Path) -> None:
    _write(tmp_path, "- just\n- a list\n")

    with pytest.raises(ConfigError, match="mapping"):
        load_config(tmp_path)


def test_iso_mode_with_named_zone_resolves_offset() -> None:
    config = resolve_date_time_config({"mode": "iso", "time_zone": "Asia/Tokyo"})

    assert isinstance(config, IsoDateTimeConfig)
    assert config.time_zone == "Asia/Tokyo"
    assert config.utc_offset == timedelta(hours=9)


def test_locale_alias_for_iso_mode() -> None:
    assert isinstance(resolve_date_time_config({"locale": "iso"}), IsoDateTimeConfig)


def test_locale_mode_builds_formatters() -> None:
    config = resolve_date_time_config(
        {"locale": "en-US", "time_zone": "UTC", "date_style": "long", "hour": "2-digit",
         "minute": "2-digit", "hour12": False}
    )

    assert isinstance(config, LocaleDateTimeConfig)
    assert config.date.style == "long"
    assert config.time.skeleton == "HHmm"


def test_deprecated_camel_case_keys_warn(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="starlist"):
        config = resolve_date_time_config({"locale": "en", "dateStyle": "medium"})

    assert isinstance(config, LocaleDateTimeConfig)
    assert config.date.style == "medium"
    assert "dateStyle is deprecated" in caplog.text


def test_unknown_zone_and_locale_fall_back(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="starlist"):
        config = resolve_date_time_config({"locale": "xx-NOPE", "time_zone": "Mars/Base"})

    assert isinstance(config, LocaleDateTimeConfig)
    assert str(config.date.locale) == "en"
    assert str(config.date.zone) == "UTC"
    assert config.date.style == "short"
    assert config.time.style == "short"
    assert "Mars/Base" in caplog.text
