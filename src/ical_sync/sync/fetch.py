"""Single-attempt feed download with outcome classification.

:class:`FeedFetcher` performs one GET through a :class:`Transport` and folds
every way it can end (HTTP status, timeout, connection error, unusable URL)
into an :class:`AttemptResult`, so the retry loop has exactly one place to
decide what to do next.  Transport exceptions never escape :meth:`fetch`.

:class:`HttpTransport` is the default transport, a thin wrapper over a
shared :class:`httpx.Client`.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal, Protocol

import httpx

logger = logging.getLogger(__name__)

AttemptKind = Literal["success", "retryable", "fatal"]


@dataclass(frozen=True)
class TransportResponse:
    """Minimal response surface the fetcher relies on."""

    status_code: int
    reason_phrase: str
    content: bytes


class Transport(Protocol):
    """HTTP GET collaborator.

    Implementations raise :class:`httpx.TimeoutException`,
    :class:`httpx.RequestError` or :class:`httpx.InvalidURL` for failures
    that produced no response.
    """

    def get(self, url: str, headers: dict[str, str], timeout: float) -> TransportResponse:
        ...


class HttpTransport:
    """:class:`Transport` over an :class:`httpx.Client`.

    httpx applies a timeout to each phase (connect, each read, ...) rather
    than to the whole request, so the body is streamed and the request is
    abandoned with :class:`httpx.ReadTimeout` once *timeout* seconds have
    passed since it started.  A single stalled read can still overrun the
    deadline by up to one phase timeout.

    Args:
        client: Optional pre-built client (pass one with an
            :class:`httpx.MockTransport` in tests).  A new client that
            follows redirects is created otherwise.
        clock: Monotonic clock used for the whole-request deadline.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client or httpx.Client(follow_redirects=True)
        self._clock = clock

    def get(self, url: str, headers: dict[str, str], timeout: float) -> TransportResponse:
        deadline = self._clock() + timeout
        with self._client.stream("GET", url, headers=headers, timeout=timeout) as response:
            chunks: list[bytes] = []
            for chunk in response.iter_bytes():
                if self._clock() > deadline:
                    raise httpx.ReadTimeout(
                        f"Response from {url} not complete within {timeout}s",
                        request=response.request,
                    )
                chunks.append(chunk)

        return TransportResponse(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            content=b"".join(chunks),
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


@dataclass(frozen=True)
class AttemptResult:
    """Tagged outcome of one download attempt.

    Attributes:
        kind: ``"success"``, ``"retryable"`` or ``"fatal"``.
        payload: Response body (success only).
        reason: Failure description (empty on success).
    """

    kind: AttemptKind
    payload: bytes = b""
    reason: str = ""

    @classmethod
    def ok(cls, payload: bytes) -> AttemptResult:
        return cls("success", payload=payload)

    @classmethod
    def retryable(cls, reason: str) -> AttemptResult:
        return cls("retryable", reason=reason)

    @classmethod
    def fatal(cls, reason: str) -> AttemptResult:
        return cls("fatal", reason=reason)

    @property
    def success(self) -> bool:
        return self.kind == "success"


class FeedFetcher:
    """Downloads a feed once and classifies the result.

    Classification:

    - **HTTP 200** -- success with the body.
    - **Any other status** -- retryable.  Client errors (4xx) are retried
      like server errors.
    - **Timeout / connection or protocol errors** -- retryable.
    - **Malformed URL or unsupported scheme** -- fatal; no retry can help.

    Args:
        transport: The HTTP collaborator.
        timeout: Per-request timeout in seconds.
        user_agent: ``User-Agent`` header value.
    """

    def __init__(self, transport: Transport, timeout: float, user_agent: str) -> None:
        self._transport = transport
        self._timeout = timeout
        self._user_agent = user_agent

    def fetch(self, url: str) -> AttemptResult:
        headers = {"User-Agent": self._user_agent}
        try:
            response = self._transport.get(url, headers=headers, timeout=self._timeout)
        except httpx.TimeoutException:
            return AttemptResult.retryable(f"Request timed out after {self._timeout}s")
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            return AttemptResult.fatal(f"Invalid feed URL {url!r}: {exc}")
        except httpx.RequestError as exc:
            return AttemptResult.retryable(f"{type(exc).__name__}: {exc}")

        if response.status_code != 200:
            return AttemptResult.retryable(
                f"HTTP {response.status_code}: {response.reason_phrase}"
            )

        logger.debug("Fetched %s (%d bytes)", url, len(response.content))
        return AttemptResult.ok(response.content)
