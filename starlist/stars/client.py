"""Minimal GitHub GraphQL client with rate-limit signal classification."""

from __future__ import annotations

import json
import math
import os
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Sequence
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

PRIMARY = "primary"
SECONDARY = "secondary"

DEFAULT_ENDPOINT = "https://api.github.com/graphql"
DEFAULT_SECONDARY_RETRY_AFTER = 60
DEFAULT_PRIMARY_RETRY_AFTER = 60


class GraphQLError(RuntimeError):
    """Raised when a GraphQL request fails for a reason other than throttling."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class RateLimitError(GraphQLError):
    """Base class for throttling signals; ``retry_after`` is in seconds."""

    kind = ""

    def __init__(self, message: str, *, retry_after: int, status: int | None = None) -> None:
        super().__init__(message, status=status)
        self.retry_after = retry_after


class PrimaryRateLimitError(RateLimitError):
    kind = PRIMARY


class SecondaryRateLimitError(RateLimitError):
    kind = SECONDARY


@dataclass
class GraphQLRequest:
    """A single POST to the GraphQL endpoint."""

    endpoint: str
    query: str
    variables: Dict[str, Any]
    token: str
    timeout: float
    user_agent: str = "starlist"


@dataclass
class GraphQLResponse:
    status: int
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())


Transport = Callable[[GraphQLRequest], GraphQLResponse]


class GitHubGraphQLClient:
    """Executes GraphQL queries and raises typed errors for throttling responses."""

    ENV_ENDPOINT_KEYS = ("STARLIST_GRAPHQL_URL", "GITHUB_GRAPHQL_URL")

    def __init__(
        self,
        token: str,
        *,
        endpoint: str | None = None,
        timeout: float = 30.0,
        transport: Transport | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.token = token
        self.endpoint = endpoint or self._first_env_value(self.ENV_ENDPOINT_KEYS) or DEFAULT_ENDPOINT
        self.timeout = timeout
        self._transport = transport or self._http_transport
        self._clock = clock or time.time

    def execute(self, query: str, variables: Mapping[str, Any] | None = None) -> Dict[str, Any]:
        """Run ``query`` and return its ``data`` member."""
        request = GraphQLRequest(
            endpoint=self.endpoint,
            query=query,
            variables=dict(variables or {}),
            token=self.token,
            timeout=self.timeout,
        )
        response = self._transport(request)
        payload = self._decode(response)

        if response.status in (403, 429):
            raise self._throttling_error(response, payload)
        if response.status >= 400:
            raise GraphQLError(
                f"GraphQL request failed with status {response.status}: {_error_text(payload)}",
                status=response.status,
            )

        errors = payload.get("errors") if isinstance(payload, dict) else None
        if errors:
            if any(isinstance(err, dict) and err.get("type") == "RATE_LIMITED" for err in errors):
                raise PrimaryRateLimitError(
                    f"GraphQL rate limit exceeded: {_error_text(payload)}",
                    retry_after=self._primary_retry_after(response),
                    status=response.status,
                )
            raise GraphQLError(f"GraphQL query failed: {_error_text(payload)}", status=response.status)

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise GraphQLError("GraphQL response did not include data", status=response.status)
        return data

    def _throttling_error(self, response: GraphQLResponse, payload: Any) -> GraphQLError:
        message = _error_text(payload)
        retry_after = response.header("retry-after")
        if retry_after is not None or "secondary rate limit" in message.lower():
            return SecondaryRateLimitError(
                f"Secondary rate limit: {message}",
                retry_after=_as_seconds(retry_after, DEFAULT_SECONDARY_RETRY_AFTER),
                status=response.status,
            )
        if response.header("x-ratelimit-remaining") == "0":
            return PrimaryRateLimitError(
                f"Request quota exhausted: {message}",
                retry_after=self._primary_retry_after(response),
                status=response.status,
            )
        return GraphQLError(
            f"GraphQL request failed with status {response.status}: {message}",
            status=response.status,
        )

    def _primary_retry_after(self, response: GraphQLResponse) -> int:
        reset = response.header("x-ratelimit-reset")
        if reset is None:
            return DEFAULT_PRIMARY_RETRY_AFTER
        try:
            reset_at = float(reset)
        except ValueError:
            return DEFAULT_PRIMARY_RETRY_AFTER
        return max(math.ceil(reset_at - self._clock()) + 1, 0)

    @staticmethod
    def _decode(response: GraphQLResponse) -> Any:
        if not response.body:
            return {}
        try:
            return json.loads(response.body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            if response.status >= 400:
                return {"message": response.body.decode("utf-8", errors="replace").strip()}
            raise GraphQLError("GraphQL endpoint returned invalid JSON", status=response.status) from exc

    @staticmethod
    def _http_transport(request: GraphQLRequest) -> GraphQLResponse:
        data = json.dumps({"query": request.query, "variables": request.variables}).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": request.user_agent,
        }
        if request.token:
            headers["Authorization"] = f"bearer {request.token}"

        http_request = Request(request.endpoint, data=data, headers=headers, method="POST")
        try:
            with urlopen(http_request, timeout=request.timeout) as response:  # type: ignore[arg-type]
                return GraphQLResponse(
                    status=response.status,
                    body=response.read(),
                    headers={key.lower(): value for key, value in response.headers.items()},
                )
        except HTTPError as exc:  # pragma: no cover - depends on network
            return GraphQLResponse(
                status=exc.code,
                body=exc.read() if hasattr(exc, "read") else b"",
                headers={key.lower(): value for key, value in (exc.headers or {}).items()},
            )
        except URLError as exc:  # pragma: no cover - depends on network
            raise GraphQLError(f"GraphQL request failed: {exc.reason}") from exc

    @staticmethod
    def _first_env_value(keys: Sequence[str]) -> str | None:
        for key in keys:
            value = os.getenv(key)
            if value:
                return value
        return None


def _as_seconds(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return max(int(float(value)), 0)
    except ValueError:
        return default


def _error_text(payload: Any) -> str:
    if not isinstance(payload, dict):
        return ""
    errors = payload.get("errors")
    if isinstance(errors, list) and errors:
        messages = [str(err.get("message", err)) if isinstance(err, dict) else str(err) for err in errors]
        return "; ".join(messages)
    message = payload.get("message")
    return str(message) if message else ""


__all__ = [
    "GitHubGraphQLClient",
    "GraphQLError",
    "GraphQLRequest",
    "GraphQLResponse",
    "PRIMARY",
    "PrimaryRateLimitError",
    "RateLimitError",
    "SECONDARY",
    "SecondaryRateLimitError",
]
