"""Pipeline orchestration for a starlist run."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from .config import ConfigError, StarlistConfig, load_config
from .git.publisher import Publisher
from .logging import get_logger
from .models import TemplateVars
from .postproc import postprocess
from .render.template import TemplateRenderer
from .stars.assembler import QueryClient, ResponseAssembler, RetryPolicy
from .stars.client import GitHubGraphQLClient
from .stars.grouping import build_groups
from .stars.normalizer import to_display
from .stars.selector import CatalogSelector, LiveSource
from .stores import CatalogCache, FileCacheSlot
from .timestamp import timestamp

ClientFactory = Callable[[str], QueryClient]
PublisherFactory = Callable[[Path, bool], Publisher]


@dataclass
class RunOutcome:
    """Result of one generate run."""

    output_path: Path
    data_path: Path
    source: str
    record_count: int
    committed: bool


class Orchestrator:
    """Fetches (or reuses) star data, renders the report and publishes it."""

    def __init__(
        self,
        client_factory: ClientFactory | None = None,
        publisher_factory: PublisherFactory | None = None,
        *,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client_factory = client_factory or (lambda token: GitHubGraphQLClient(token))
        self._publisher_factory = publisher_factory or (
            lambda root, local: Publisher(root, local=local)
        )
        self._retry_policy = retry_policy
        self._sleep = sleep
        self._lock = threading.Lock()
        self.logger = get_logger("orchestrator")

    def run(
        self,
        path: str | Path,
        *,
        config_path: str | Path | None = None,
        token: str | None = None,
        local: bool | None = None,
    ) -> RunOutcome:
        """Generate the report for the repository at ``path``.

        ``local`` overrides ``git.local`` from the configuration file.
        """
        repo_path = Path(path).expanduser().resolve()
        if not repo_path.is_dir():
            raise FileNotFoundError(f"Repository path {repo_path} does not exist")

        config = load_config(
            Path(config_path) if config_path else repo_path,
            token=token,
            root=repo_path,
        )
        if local is not None:
            config.git.local = local

        # The cache file and git index are shared per repository.
        with self._lock:
            return self._run(config)

    def _run(self, config: StarlistConfig) -> RunOutcome:
        self.logger.info("Generating %s in %s", config.output.filename, config.root)
        if not config.token and not (config.stars.source == "file" and config.git.local):
            raise ConfigError(
                "A GitHub token is required; pass --token or set STARLIST_TOKEN or GITHUB_TOKEN"
            )

        publisher = self._publisher_factory(config.root, config.git.local)
        publisher.setup(config.token, config.git)

        data_path = config.root / config.stars.filename
        cache = CatalogCache(FileCacheSlot(data_path))
        assembler = ResponseAssembler(
            self._client_factory(config.token or ""),
            cache,
            policy=self._retry_policy,
            sleep=self._sleep,
        )
        source = CatalogSelector(cache, assembler).select(config.stars.source)
        if isinstance(source, LiveSource) and not config.token:
            raise ConfigError("Cached star data is unusable and no GitHub token is available")
        response = source.load()

        date_time = config.format.date_time
        records = [to_display(record, date_time) for record in response.stars]
        variables = TemplateVars(
            login=response.login,
            truncated=response.truncated,
            total=response.total,
            stars=records,
            updated_at=timestamp(date_time, response.updated_at),
            groups=build_groups(records),
        )

        self.logger.debug("Rendering template %s", config.template.source.name)
        rendered = TemplateRenderer(config.template.source).render(variables)
        output_path = config.root / config.output.filename
        output_path.write_text(postprocess(rendered), encoding="utf-8")
        self.logger.info("Wrote %s with %d repositories", output_path.name, len(records))

        publisher.add([output_path, data_path])
        committed = publisher.commit(config.git.commit_message)
        if committed:
            publisher.pull(config.git.pull_flags)
            publisher.push()

        return RunOutcome(
            output_path=output_path,
            data_path=data_path,
            source=source.name,
            record_count=len(records),
            committed=committed,
        )


__all__ = ["Orchestrator", "RunOutcome"]
