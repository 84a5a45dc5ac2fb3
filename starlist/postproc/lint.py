"""Whitespace normalisation for rendered Markdown."""

from __future__ import annotations

import re
from typing import List

_FENCE = re.compile(r"^ {0,3}(```|~~~)")
_HEADING = re.compile(r"^ {0,3}#{1,6}(\s|$)")


class MarkdownLinter:
    """Tidies blank lines around headings and trims trailing whitespace.

    Fenced code blocks are passed through untouched.
    """

    def lint(self, markdown: str) -> str:
        normalized = markdown.replace("\r\n", "\n").replace("\r", "\n")
        cleaned: List[str] = []
        fence: str | None = None

        for line in normalized.split("\n"):
            if fence is not None:
                cleaned.append(line)
                if line.strip().startswith(fence):
                    fence = None
                continue

            stripped = line.rstrip()
            opening = _FENCE.match(stripped)
            if opening:
                fence = opening.group(1)
                cleaned.append(stripped)
                continue

            if not stripped:
                if cleaned and cleaned[-1] != "":
                    cleaned.append("")
                continue

            if _HEADING.match(stripped):
                if cleaned and cleaned[-1] != "":
                    cleaned.append("")
                cleaned.append(stripped)
                cleaned.append("")
                continue

            cleaned.append(stripped)

        while cleaned and cleaned[-1] == "":
            cleaned.pop()
        return "\n".join(cleaned) + "\n"


__all__ = ["MarkdownLinter"]
