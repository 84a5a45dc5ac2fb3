"""Git helpers used to publish the generated report."""

from .publisher import GitError, Publisher

__all__ = ["GitError", "Publisher"]
