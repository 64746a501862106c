"""Shared plumbing for the Box resource services."""
from __future__ import annotations
import json
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from requests.structures import CaseInsensitiveDict

from .client import BoxClient
from .exceptions import MalformedResponseError
from .request import RequestParams
from .result import Failure, FailureKind, Result

JSON_HEADERS = {"Content-Type": "application/json"}

# Statuses Box uses for successful creates (201) and deletes (204). The
# executor reports them as HTTP_ERROR; services accept them here.
ACCEPTED_STATUSES = (201, 204)

Fields = Union[str, Iterable[str], None]


def fields_query(fields: Fields) -> Dict[str, str]:
    """Return ``{"fields": "a,b"}`` for a comma-separated string or a list of field names."""
    if not fields:
        return {}
    if isinstance(fields, str):
        names = [f.strip() for f in fields.split(",")]
    else:
        names = [str(f).strip() for f in fields]
    names = [n for n in names if n]
    return {"fields": ",".join(names)} if names else {}


def unwrap(result: Result) -> Any:
    """Return the decoded body of a successful result or raise its exception.

    201 and 204 answers count as success; an empty body decodes to None.

    Raises:
        BoxAPIError: (or a subclass) for every other failure
    """
    if (
        isinstance(result, Failure)
        and result.kind == FailureKind.HTTP_ERROR
        and result.status_code in ACCEPTED_STATUSES
    ):
        if not result.body:
            return None
        try:
            return json.loads(result.body)
        except ValueError as exc:
            raise MalformedResponseError(result.status_code, result.body, result.url) from exc
    return result.unwrap()


class ResourceService:
    """Base class for services bound to one API collection (``users``, ``folders``...)."""

    collection = ""

    def __init__(self, client: BoxClient):
        """Initialize the service.

        Args:
            client: Authenticated Box client
        """
        self.client = client

    def _url(self, sub_path: Any = "") -> str:
        return self.client.api_url(self.collection, sub_path)

    def _params(
        self,
        query: Optional[Mapping[str, Any]] = None,
        body: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> RequestParams:
        """JSON request parameters; explicit headers override the JSON content type."""
        merged = CaseInsensitiveDict(JSON_HEADERS)
        merged.update(headers or {})
        return RequestParams(
            headers=dict(merged),
            body=json.dumps(body) if body is not None else None,
            query=dict(query or {}),
        )

    def _request(
        self,
        method: str,
        sub_path: Any = "",
        query: Optional[Mapping[str, Any]] = None,
        body: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """Execute a request against the collection and return the decoded JSON.

        Raises:
            BoxAPIError: (or a subclass) when the request fails
        """
        result = self.client.request(method, self._url(sub_path), self._params(query, body, headers))
        return unwrap(result)

    def _delete(self, sub_path: Any, query: Optional[Mapping[str, Any]] = None) -> bool:
        self._request("DELETE", sub_path, query=query)
        return True
