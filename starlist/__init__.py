"""starlist: render a Markdown catalog of a GitHub account's starred repositories."""

__version__ = "1.0.0"
