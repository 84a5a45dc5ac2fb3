"""Automatic table-of-contents generation.

Mirrors the behaviour of ``remark-toc``: the first heading whose text reads
"Contents", "Table of contents" or "ToC" opens the TOC section. Everything up
to the next heading of the same or a shallower depth is replaced by a nested
list of links to that heading and every heading after it.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Dict, List, Optional

TOC_HEADING = re.compile(r"^(table[ -]of[ -])?contents?$|^toc$", re.IGNORECASE)
_ATX_HEADING = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$")
_FENCE = re.compile(r"^ {0,3}(```|~~~)")
_LINK = re.compile(r"!?\[([^\]]*)\]\([^)]*\)")
_INLINE_MARKUP = re.compile(r"[*_`~]")


@dataclass
class Heading:
    line: int
    depth: int
    text: str
    slug: str


class Slugger:
    """GitHub-compatible anchor generator; repeated titles get ``-1``, ``-2``..."""

    def __init__(self) -> None:
        self._seen: Dict[str, int] = {}

    def slug(self, title: str) -> str:
        base = github_slug(title)
        result = base
        while result in self._seen:
            self._seen[base] += 1
            result = f"{base}-{self._seen[base]}"
        self._seen[result] = 0
        return result


def github_slug(title: str) -> str:
    """Lower-case, drop punctuation, turn each space into a hyphen."""
    lowered = title.strip().lower()
    kept = [
        char
        for char in lowered
        if char in (" ", "-", "_") or unicodedata.category(char)[0] in ("L", "N", "M")
    ]
    return "".join(kept).replace(" ", "-")


class TableOfContentsBuilder:
    """Fills the "Contents" section of a Markdown document."""

    def build(self, markdown: str) -> str:
        lines = markdown.split("\n")
        headings = self._headings(lines)

        opening: Optional[Heading] = None
        closing_index: Optional[int] = None
        for index, heading in enumerate(headings):
            if opening is None:
                if TOC_HEADING.match(heading.text):
                    opening = heading
                continue
            if heading.depth <= opening.depth:
                closing_index = index
                break

        if opening is None or closing_index is None:
            return markdown

        entries = [heading for heading in headings[closing_index:] if heading.text]
        if not entries:
            return markdown

        block = self._render(entries)
        closing_line = headings[closing_index].line
        rebuilt = lines[: opening.line + 1] + [""] + block + [""] + lines[closing_line:]
        return "\n".join(rebuilt)

    @staticmethod
    def _headings(lines: List[str]) -> List[Heading]:
        slugger = Slugger()
        headings: List[Heading] = []
        in_code = False
        for number, line in enumerate(lines):
            if _FENCE.match(line):
                in_code = not in_code
                continue
            if in_code:
                continue
            match = _ATX_HEADING.match(line)
            if not match:
                continue
            text = _plain_text(match.group(2) or "")
            headings.append(
                Heading(line=number, depth=len(match.group(1)), text=text, slug=slugger.slug(text))
            )
        return headings

    @staticmethod
    def _render(entries: List[Heading]) -> List[str]:
        base = min(heading.depth for heading in entries)
        return [
            f"{'  ' * (heading.depth - base)}- [{heading.text}](#{heading.slug})"
            for heading in entries
        ]


def _plain_text(raw: str) -> str:
    text = _LINK.sub(r"\1", raw)
    text = _INLINE_MARKUP.sub("", text)
    return text.strip()


__all__ = ["Slugger", "TableOfContentsBuilder", "github_slug"]
