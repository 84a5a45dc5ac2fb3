"""Template rendering for star reports."""

from .template import TemplateRenderer

__all__ = ["TemplateRenderer"]
