"""Outcome types returned by the request executor.

A request either yields ``Success`` carrying the decoded JSON value, or a
``Failure`` tagged with a ``FailureKind``. Failures are values, not
exceptions; resource services turn them into typed exceptions with
``raise_for_failure()``.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from .exceptions import (
    AuthenticationError,
    BoxAPIError,
    MalformedResponseError,
    TransportError,
)


class FailureKind(str, Enum):
    AUTHENTICATION = "authentication"
    HTTP_ERROR = "http_error"
    TRANSPORT = "transport"
    MALFORMED_RESPONSE = "malformed_response"


_EXCEPTIONS = {
    FailureKind.AUTHENTICATION: AuthenticationError,
    FailureKind.HTTP_ERROR: BoxAPIError,
    FailureKind.TRANSPORT: TransportError,
    FailureKind.MALFORMED_RESPONSE: MalformedResponseError,
}


@dataclass(frozen=True)
class Success:
    """Decoded JSON body of a 200 response."""
    value: Any

    ok = True

    def unwrap(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Failure:
    """Classified failure of a single request.

    Attributes:
        kind: Failure category
        status_code: HTTP status, or None for transport-level failures
        body: Raw response body ("" when nothing was received)
        url: Request URL
        message: Extra detail (transport error text, decode error)
    """
    kind: FailureKind
    status_code: Optional[int]
    body: str
    url: str
    message: str = ""

    ok = False

    def to_exception(self) -> BoxAPIError:
        exc_class = _EXCEPTIONS[self.kind]
        return exc_class(self.status_code, self.body or self.message, self.url)

    def raise_for_failure(self) -> None:
        raise self.to_exception()

    def unwrap(self) -> Any:
        self.raise_for_failure()

    def __str__(self) -> str:
        detail = self.body or self.message
        return f"{self.kind.value} [{self.status_code}] {self.url}: {detail}"


Result = Union[Success, Failure]
