"""Low-level HTTP client for the Box Content API.

Handles JWT bearer authentication, access token state, impersonation and
request execution.
"""
from __future__ import annotations
import logging
import math
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional, Tuple

import requests

from .credentials import CredentialStore, Identity, utcnow
from .exceptions import MalformedResponseError
from .executor import RequestExecutor
from .request import PreparedRequest, RequestParams, build_request, encode_form
from .result import FailureKind, Result

logger = logging.getLogger(__name__)

BOX_TOKEN_URL = "https://api.box.com/oauth2/token"
BOX_API_URL = "https://api.box.com/2.0"
BOX_UPLOAD_URL = "https://upload.box.com/api/2.0"
JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"


def token_from_response(payload: Dict[str, Any], now: Optional[datetime] = None) -> Tuple[str, Optional[datetime]]:
    """Extract the access token and absolute expiry from a token response.

    ``expires_in`` is read as seconds from ``now``. A missing, non-numeric,
    non-finite or out-of-range value yields no expiry.

    Raises:
        MalformedResponseError: If the payload has no access_token
    """
    token = payload.get("access_token") if isinstance(payload, dict) else None
    if not token:
        raise MalformedResponseError(200, f"Token response has no access_token: {payload!r}", BOX_TOKEN_URL)
    try:
        expires_in = float(payload["expires_in"])
        if not math.isfinite(expires_in):
            return token, None
        return token, (now or utcnow()) + timedelta(seconds=expires_in)
    except (KeyError, TypeError, ValueError, OverflowError):
        return token, None


class BoxClient:
    """HTTP client for the Box API holding one identity and one credential.

    The client never refreshes tokens by itself. ``authenticate`` only returns
    the token response; committing it with ``set_access`` is the caller's
    decision, and ``check_access`` tells whether a refresh is due.

    Usage:
        client = BoxClient(Identity("client-id", "secret", "key-id"))
        result = client.authenticate(assertion)
        if result.ok:
            client.set_access(*token_from_response(result.value))
        user = client.request("GET", client.api_url("users", "me")).unwrap()
    """

    def __init__(
        self,
        identity: Identity,
        api_url: str = BOX_API_URL,
        upload_url: str = BOX_UPLOAD_URL,
        token_url: str = BOX_TOKEN_URL,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        """Initialize Box client.

        Args:
            identity: Client identity (client id/secret and public key id)
            api_url: Content API base URL
            upload_url: Upload API base URL
            token_url: OAuth2 token endpoint
            session: Optional requests session (mainly for tests)
            timeout: Optional request timeout in seconds; None disables it
            clock: Time source for token expiry checks
        """
        self.identity = identity
        self.api_base = api_url.rstrip("/")
        self.upload_base = upload_url.rstrip("/")
        self.token_url = token_url
        self.credentials = CredentialStore(clock=clock)
        self.as_user: Optional[str] = None
        self.executor = RequestExecutor(session=session, timeout=timeout)

    @classmethod
    def from_settings(cls, settings, session: Optional[requests.Session] = None) -> "BoxClient":
        """Build a client from BoxSettings."""
        client = cls(
            settings.identity(),
            api_url=settings.api_url,
            upload_url=settings.upload_url,
            token_url=settings.token_url,
            session=session,
            timeout=settings.request_timeout,
        )
        if settings.as_user:
            client.set_as_user(settings.as_user)
        return client

    def set_as_user(self, user_id: Optional[str]) -> None:
        """Act on behalf of ``user_id`` for subsequent requests (None stops impersonation)."""
        self.as_user = user_id or None

    def check_access(self, strict: bool = True) -> bool:
        """Check if an access token exists and has not expired.

        This does NOT verify that the token is accepted by Box.

        Args:
            strict: Treat a token without an expiry as invalid
        """
        return self.credentials.is_valid(strict)

    def set_access(self, access_token: Optional[str] = None, expires_at: Optional[datetime] = None) -> bool:
        """Store the access token and/or its expiry; empty values are left unmodified."""
        return self.credentials.set(access_token, expires_at)

    def authenticate(self, assertion: str) -> Result:
        """Exchange a signed JWT assertion for an access token.

        The token is NOT stored on the client; commit it with set_access.

        Args:
            assertion: Complete, signed JWT

        Returns:
            Success with the token response (access_token, expires_in, ...)
            or an AUTHENTICATION/TRANSPORT/MALFORMED_RESPONSE Failure
        """
        body = {
            "grant_type": JWT_BEARER_GRANT,
            "assertion": assertion,
            "client_id": self.identity.client_id,
            "client_secret": self.identity.client_secret,
        }
        # The token endpoint takes neither a bearer token nor As-User.
        prepared = PreparedRequest(
            method="POST",
            url=self.token_url,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            data=encode_form(body),
        )
        result = self.executor.execute(prepared, failure_kind=FailureKind.AUTHENTICATION)
        if result.ok:
            logger.info("Obtained Box access token for client %s", self.identity.client_id)
        return result

    def api_url(self, *parts: Any) -> str:
        """Join path segments onto the API base URL, skipping empty ones."""
        return "/".join([self.api_base] + [str(p).strip("/") for p in parts if str(p)])

    def upload_url(self, *parts: Any) -> str:
        return "/".join([self.upload_base] + [str(p).strip("/") for p in parts if str(p)])

    def build_request(self, method: str, url: str, params: Optional[RequestParams] = None) -> PreparedRequest:
        """Build a request using the current token and impersonation target."""
        return build_request(
            method,
            url,
            params,
            access_token=self.credentials.access_token,
            as_user=self.as_user,
        )

    def request(self, method: str, url: str, params: Optional[RequestParams] = None) -> Result:
        """Build and execute a request.

        Args:
            method: HTTP method
            url: Resource URL (see api_url/upload_url)
            params: Headers, body, query and redirect policy

        Returns:
            Success with decoded JSON, or Failure
        """
        return self.executor.execute(self.build_request(method, url, params))

    def close(self) -> None:
        """Close the HTTP session owned by this client."""
        self.executor.close()
