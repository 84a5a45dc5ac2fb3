"""Render the star catalog through a Jinja2 template."""

from __future__ import annotations

from pathlib import Path
from typing import List

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Undefined

from ..config import PACKAGE_TEMPLATES_DIR, FileReference
from ..models import TemplateVars
from ..postproc.toc import github_slug


class TemplateRenderer:
    """Compiles one template and renders ``TemplateVars`` into Markdown."""

    def __init__(self, source: FileReference, *, strict: bool = False) -> None:
        self.source = source
        self._env = self._create_env(source.path.parent, strict=strict)
        self._template = self._env.get_template(source.path.name)

    def render(self, variables: TemplateVars) -> str:
        rendered = self._template.render(**variables.as_context())
        return rendered.strip() + "\n"

    @staticmethod
    def _create_env(template_dir: Path, *, strict: bool) -> Environment:
        directories: List[str] = [str(template_dir)]
        # Packaged partials stay includable from repository templates.
        if template_dir.resolve() != PACKAGE_TEMPLATES_DIR.resolve():
            directories.append(str(PACKAGE_TEMPLATES_DIR))
        env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined if strict else Undefined,
        )
        env.filters["slug"] = github_slug
        return env


__all__ = ["TemplateRenderer"]
