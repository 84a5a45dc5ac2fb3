"""Markdown post-processing applied to the rendered report."""

from .lint import MarkdownLinter
from .toc import Slugger, TableOfContentsBuilder, github_slug


def postprocess(markdown: str) -> str:
    """Fill the table of contents, then normalise whitespace."""
    with_toc = TableOfContentsBuilder().build(markdown)
    return MarkdownLinter().lint(with_toc)


__all__ = ["MarkdownLinter", "Slugger", "TableOfContentsBuilder", "github_slug", "postprocess"]
