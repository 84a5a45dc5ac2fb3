"""Choose between the cached snapshot and a live query."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union

from ..logging import get_logger
from ..models import CatalogResponse
from ..stores.catalog_cache import CacheIncompatibleError, CatalogCache
from .assembler import ResponseAssembler

SourceMode = Literal["api", "file"]


@dataclass(frozen=True)
class CachedSource:
    """A snapshot that passed the version check; returned as-is."""

    response: CatalogResponse
    name: str = "file"

    def load(self) -> CatalogResponse:
        return self.response


@dataclass(frozen=True)
class LiveSource:
    assembler: ResponseAssembler
    name: str = "api"

    def load(self) -> CatalogResponse:
        return self.assembler.assemble()


CatalogSource = Union[CachedSource, LiveSource]


class CatalogSelector:
    """Resolves the configured source mode to a concrete ``CatalogSource``."""

    def __init__(self, cache: CatalogCache, assembler: ResponseAssembler) -> None:
        self.cache = cache
        self.assembler = assembler
        self.logger = get_logger("stars.selector")

    def select(self, mode: SourceMode) -> CatalogSource:
        if mode != "file":
            return LiveSource(self.assembler)
        try:
            response = self.cache.load()
        except CacheIncompatibleError as exc:
            self.logger.warning(
                "stars.source is file, but the cached data cannot be used (%s); falling back to api",
                exc.reason,
            )
            return LiveSource(self.assembler)
        self.logger.info("Using cached star data for %s", response.login)
        return CachedSource(response)

    def load(self, mode: SourceMode) -> CatalogResponse:
        return self.select(mode).load()


__all__ = ["CachedSource", "CatalogSelector", "CatalogSource", "LiveSource", "SourceMode"]
