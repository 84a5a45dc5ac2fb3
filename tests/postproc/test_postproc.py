"""Tests for Markdown post-processing."""

from __future__ import annotations

from starlist.postproc import MarkdownLinter, Slugger, TableOfContentsBuilder, github_slug, postprocess


def test_github_slug_matches_github_anchors() -> None:
    assert github_slug("Hello World") == "hello-world"
    assert github_slug("C++ / C#") == "c--c"
    assert github_slug("Jupyter Notebook") == "jupyter-notebook"
    assert github_slug("Überblick & Ziele") == "überblick--ziele"
    assert github_slug("snake_case-name") == "snake_case-name"


def test_slugger_numbers_duplicates() -> None:
    slugger = Slugger()

    assert [slugger.slug("Go"), slugger.slug("Go"), slugger.slug("Go")] == ["go", "go-1", "go-2"]


def test_toc_lists_headings_after_the_contents_section() -> None:
    markdown = "\n".join(
        [
            "# Stars",
            "",
            "Intro.",
            "",
            "## Contents",
            "",
            "old list",
            "",
            "## Go",
            "",
            "### Tools",
            "",
            "## Python",
            "",
        ]
    )

    result = TableOfContentsBuilder().build(markdown)

    assert "old list" not in result
    assert "- [Go](#go)\n  - [Tools](#tools)\n- [Python](#python)" in result
    assert "[Stars]" not in result
    assert result.index("## Contents") < result.index("- [Go](#go)") < result.index("## Go")


def test_toc_slugs_account_for_earlier_duplicates() -> None:
    markdown = "# Go\n\n## Table of Contents\n\n## Go\n"

    result = TableOfContentsBuilder().build(markdown)

    assert "- [Go](#go-1)" in result


def test_toc_ignores_headings_inside_fences() -> None:
    markdown = "## ToC\n\n## Real\n\n```\n## Fake\n```\n"

    result = TableOfContentsBuilder().build(markdown)

    assert "[Real](#real)" in result
    assert "Fake](" not in result


def test_toc_without_contents_heading_is_unchanged() -> None:
    markdown = "# Title\n\n## Go\n"

    assert TableOfContentsBuilder().build(markdown) == markdown


def test_linter_normalizes_whitespace_outside_fences() -> None:
    markdown = "# Title\r\nText   \n\n\n\n## Next\n```\nkeep   \n\n\n```\n\n\n"

    result = MarkdownLinter().lint(markdown)

    assert result == "# Title\n\nText\n\n## Next\n\n```\nkeep   \n\n\n```\n"


def test_postprocess_builds_toc_then_lints() -> None:
    markdown = "# Stars\n## Contents\n## Rust\n- [a/b](https://github.com/a/b)   \n"

    result = postprocess(markdown)

    assert result == (
        "# Stars\n\n## Contents\n\n- [Rust](#rust)\n\n## Rust\n\n"
        "- [a/b](https://github.com/a/b)\n"
    )
