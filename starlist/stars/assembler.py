"""Page through the viewer's stars and assemble one ``CatalogResponse``."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol

from ..logging import get_logger
from ..models import DATA_VERSION, CatalogResponse, RawRecord
from ..stores.catalog_cache import CatalogCache
from .client import PRIMARY, SECONDARY, RateLimitError
from .normalizer import parse_repo
from .query import STARRED_REPOSITORIES_QUERY

MAX_RETRIES = 3


class CatalogAssemblyError(RuntimeError):
    """Raised when the upstream response is structurally unusable."""


class RetriesExhaustedError(RuntimeError):
    """Raised when a rate-limit trigger used up its retry budget."""

    def __init__(self, message: str, *, kind: str, attempts: int) -> None:
        super().__init__(message)
        self.kind = kind
        self.attempts = attempts


class QueryClient(Protocol):
    def execute(self, query: str, variables: Mapping[str, Any] | None = None) -> Dict[str, Any]: ...


@dataclass
class RetryBudget:
    """Retry state for one trigger on one page."""

    attempts: int = 0
    limit: int = MAX_RETRIES

    @property
    def remaining(self) -> int:
        return self.limit - self.attempts

    def exhausted(self) -> bool:
        return self.attempts >= self.limit


class RetryPolicy:
    """Decides whether a throttled page is retried and reports every signal.

    ``on_rate_limit`` and ``on_secondary_rate_limit`` are the hook points; they
    return ``True`` to retry after the signalled delay and ``False`` to stop.
    """

    LABELS = {
        PRIMARY: ("Request quota exhausted for star retrieval", "Primary request retries exhausted"),
        SECONDARY: (
            "Secondary rate limit detected for star retrieval",
            "Secondary request retries exhausted",
        ),
    }

    def __init__(self, limit: int = MAX_RETRIES) -> None:
        self.limit = limit
        self.logger = get_logger("stars.retry")

    def new_budgets(self) -> Dict[str, RetryBudget]:
        return {PRIMARY: RetryBudget(limit=self.limit), SECONDARY: RetryBudget(limit=self.limit)}

    def on_rate_limit(self, retry_after: int, budget: RetryBudget) -> bool:
        return self._decide(PRIMARY, retry_after, budget)

    def on_secondary_rate_limit(self, retry_after: int, budget: RetryBudget) -> bool:
        return self._decide(SECONDARY, retry_after, budget)

    def _decide(self, kind: str, retry_after: int, budget: RetryBudget) -> bool:
        warning, exhausted = self.LABELS[kind]
        self.logger.warning(warning)
        if budget.exhausted():
            self.logger.error(exhausted)
            return False
        budget.attempts += 1
        self.logger.info(
            "Retrying after %s seconds (%d retries left)", retry_after, budget.remaining
        )
        return True


class ResponseAssembler:
    """Runs the paginated star query and persists the assembled snapshot."""

    def __init__(
        self,
        client: QueryClient,
        cache: CatalogCache,
        *,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.client = client
        self.cache = cache
        self.policy = policy or RetryPolicy()
        self._sleep = sleep
        self._clock = clock or (lambda: datetime.now(UTC))
        self.logger = get_logger("stars.assembler")

    def assemble(self) -> CatalogResponse:
        started_at = self._clock()
        stars: List[RawRecord] = []
        login = ""
        total = 0
        truncated = False
        cursor: Optional[str] = None
        page = 0

        while True:
            page += 1
            data = self._fetch_page(cursor, page)

            viewer = data.get("viewer")
            if not viewer:
                raise CatalogAssemblyError("Missing current viewer for stargazing")
            starred = viewer.get("starredRepositories")
            if not starred or starred.get("edges") is None:
                raise CatalogAssemblyError("Missing current viewer starred repositories")

            login = viewer.get("login") or login
            total = int(starred.get("totalCount") or 0)
            truncated = bool(starred.get("isOverLimit"))

            skipped = 0
            for edge in starred["edges"]:
                if not edge or not edge.get("node") or edge["node"].get("isPrivate"):
                    skipped += 1
                    continue
                stars.append(parse_repo(edge))
            self.logger.debug(
                "Page %d: %d edges, %d skipped", page, len(starred["edges"]), skipped
            )

            page_info = starred.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break
            cursor = page_info.get("endCursor")

        response = CatalogResponse(
            login=login,
            total=total,
            truncated=truncated,
            updated_at=started_at,
            stars=stars,
            data_version=DATA_VERSION,
        )
        self.cache.save(response)
        self.logger.info(
            "Fetched %d starred repositories for %s (%d reported)", len(stars), login, total
        )
        return response

    def _fetch_page(self, cursor: Optional[str], page: int) -> Dict[str, Any]:
        budgets = self.policy.new_budgets()
        while True:
            try:
                return self.client.execute(STARRED_REPOSITORIES_QUERY, {"cursor": cursor})
            except RateLimitError as exc:
                budget = budgets[exc.kind]
                if exc.kind == SECONDARY:
                    retry = self.policy.on_secondary_rate_limit(exc.retry_after, budget)
                else:
                    retry = self.policy.on_rate_limit(exc.retry_after, budget)
                if not retry:
                    raise RetriesExhaustedError(
                        f"Gave up on page {page} after {budget.attempts} {exc.kind} rate-limit retries",
                        kind=exc.kind,
                        attempts=budget.attempts,
                    ) from exc
                self._sleep(exc.retry_after)


__all__ = [
    "CatalogAssemblyError",
    "MAX_RETRIES",
    "ResponseAssembler",
    "RetriesExhaustedError",
    "RetryBudget",
    "RetryPolicy",
]
