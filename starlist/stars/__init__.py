"""Star catalog acquisition, normalization and grouping."""

from .assembler import (
    CatalogAssemblyError,
    ResponseAssembler,
    RetriesExhaustedError,
    RetryBudget,
    RetryPolicy,
)
from .client import (
    GitHubGraphQLClient,
    GraphQLError,
    PrimaryRateLimitError,
    RateLimitError,
    SecondaryRateLimitError,
)
from .grouping import build_groups
from .normalizer import parse_repo, to_display
from .selector import CachedSource, CatalogSelector, LiveSource

__all__ = [
    "CachedSource",
    "CatalogAssemblyError",
    "CatalogSelector",
    "GitHubGraphQLClient",
    "GraphQLError",
    "LiveSource",
    "PrimaryRateLimitError",
    "RateLimitError",
    "ResponseAssembler",
    "RetriesExhaustedError",
    "RetryBudget",
    "RetryPolicy",
    "SecondaryRateLimitError",
    "build_groups",
    "parse_repo",
    "to_display",
]
