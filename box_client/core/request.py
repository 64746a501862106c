"""Assembly of outgoing Box API requests.

``build_request`` turns a method, a resource URL and a ``RequestParams``
bundle into a ``PreparedRequest`` ready for the executor. It injects the
bearer header and the ``As-User`` impersonation header, but never over a
header the caller supplied explicitly.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlencode

from requests.structures import CaseInsensitiveDict

AUTHORIZATION_HEADER = "Authorization"
AS_USER_HEADER = "As-User"


@dataclass(frozen=True)
class MultipartBody:
    """Body sent as multipart/form-data.

    Attributes:
        fields: Plain form fields (e.g. the ``attributes`` JSON blob)
        files: Mapping of part name to ``(filename, content, content_type)``
    """
    fields: Mapping[str, str] = field(default_factory=dict)
    files: Mapping[str, tuple] = field(default_factory=dict)


Body = Union[Mapping[str, Any], str, bytes, MultipartBody]


@dataclass(frozen=True)
class RequestParams:
    """Per-call request options.

    Attributes:
        headers: Explicit headers; these win over injected defaults
        body: Mapping (form-encoded), str/bytes (sent verbatim, e.g. JSON
            text) or MultipartBody
        query: Query string fields, appended in mapping order
        follow_redirects: Whether the executor should follow redirects
    """
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[Body] = None
    query: Mapping[str, Any] = field(default_factory=dict)
    follow_redirects: bool = False


@dataclass(frozen=True)
class PreparedRequest:
    method: str
    url: str
    headers: Dict[str, str]
    data: Optional[Union[str, bytes, Dict[str, str]]] = None
    files: Optional[Dict[str, tuple]] = None
    follow_redirects: bool = False


def _encode(fields: Mapping[str, Any]) -> str:
    """URL-encode fields in order, dropping None values."""
    return urlencode([(k, v) for k, v in fields.items() if v is not None], doseq=True)


def build_url(url: str, query: Optional[Mapping[str, Any]] = None) -> str:
    """Append URL-encoded query fields to ``url``."""
    encoded = _encode(query) if query else ""
    if not encoded:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{encoded}"


def encode_form(body: Mapping[str, Any]) -> str:
    return _encode(body)


def build_request(
    method: str,
    url: str,
    params: Optional[RequestParams] = None,
    access_token: Optional[str] = None,
    as_user: Optional[str] = None,
) -> PreparedRequest:
    """Build the request descriptor for one API call.

    Args:
        method: HTTP method
        url: Fully resource-qualified URL (without query string)
        params: Headers, body, query and redirect policy for this call
        access_token: Token read from the credential store; not checked for freshness
        as_user: Impersonation target, if any

    Returns:
        PreparedRequest for RequestExecutor.execute
    """
    params = params or RequestParams()

    # Header names are case-insensitive on the wire.
    headers = CaseInsensitiveDict(params.headers)
    if AUTHORIZATION_HEADER not in headers:
        headers[AUTHORIZATION_HEADER] = f"Bearer {access_token or ''}"
    if as_user and AS_USER_HEADER not in headers:
        headers[AS_USER_HEADER] = str(as_user)

    data = None
    files = None
    body = params.body
    if isinstance(body, MultipartBody):
        data = dict(body.fields)
        files = dict(body.files)
    elif isinstance(body, (str, bytes)):
        data = body
    elif body:
        data = encode_form(body)
        headers.setdefault("Content-Type", "application/x-www-form-urlencoded")

    return PreparedRequest(
        method=method.upper(),
        url=build_url(url, params.query),
        headers=dict(headers),
        data=data,
        files=files,
        follow_redirects=params.follow_redirects,
    )
