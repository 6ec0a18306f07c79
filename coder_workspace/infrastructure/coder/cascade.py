"""Table-driven fallback cascade shared by lookup and deletion.

A cascade is an ordered list of Candidate descriptors tried strictly in
sequence; the first accepted response wins. Candidates are never raced
because some of them (POST delete actions) mutate server state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

import httpx

from coder_workspace.infrastructure.coder._rest_client import CoderRESTClient
from coder_workspace.infrastructure.exceptions import (
    ROUTE_UNSUPPORTED_STATUSES,
    CoderApiError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def accept_response(response: httpx.Response) -> httpx.Response:
    """Default acceptor: any 2xx response is a success."""
    return response


def advance_on_route_unsupported(status: int) -> bool:
    return status in ROUTE_UNSUPPORTED_STATUSES


def advance_always(status: int) -> bool:
    return True


@dataclass(frozen=True)
class Candidate(Generic[T]):
    """One endpoint shape to try.

    accept maps a 2xx response to a value, or None to advance (e.g. empty
    search result). advance_on decides whether a non-2xx status means "try
    the next shape" rather than abort.
    """

    label: str
    method: str
    path: str
    params: Mapping[str, str] | None = None
    json: Any = None
    accept: Callable[[httpx.Response], T | None] = accept_response  # type: ignore[assignment]
    advance_on: Callable[[int], bool] = advance_on_route_unsupported


@dataclass(frozen=True)
class Attempt:
    label: str
    status: int
    text: str = ""


@dataclass
class CascadeOutcome(Generic[T]):
    """Result of a cascade: the accepted value (if any) and every attempt made."""

    value: T | None = None
    winner: str | None = None
    attempts: list[Attempt] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.value is not None

    @property
    def last_status(self) -> int | None:
        return self.attempts[-1].status if self.attempts else None

    @property
    def last_text(self) -> str:
        return self.attempts[-1].text if self.attempts else ""


async def run_cascade(
    client: CoderRESTClient, candidates: Iterable[Candidate[T]]
) -> CascadeOutcome[T]:
    """Try candidates in order and stop at the first accepted response.

    Returns an outcome with value None when every candidate advanced.

    Raises:
        CoderApiError: A candidate returned a status its advance_on rejects.
        CoderTransportError: The server could not be reached.
    """
    outcome: CascadeOutcome[T] = CascadeOutcome()
    for candidate in candidates:
        response = await client.request(
            candidate.method, candidate.path, params=candidate.params, json=candidate.json
        )
        status = response.status_code
        if response.is_success:
            outcome.attempts.append(Attempt(candidate.label, status))
            value = candidate.accept(response)
            if value is not None:
                outcome.value = value
                outcome.winner = candidate.label
                logger.debug("Cascade candidate %s accepted (%s)", candidate.label, status)
                return outcome
            logger.debug("Cascade candidate %s returned no match", candidate.label)
            continue
        text = response.text
        outcome.attempts.append(Attempt(candidate.label, status, text))
        if candidate.advance_on(status):
            logger.debug("Cascade candidate %s returned %s; advancing", candidate.label, status)
            continue
        logger.warning(
            "Cascade candidate %s rejected with %s; aborting: %s", candidate.label, status, text
        )
        raise CoderApiError.from_response(response)
    return outcome
