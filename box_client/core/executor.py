"""Single-shot HTTP execution and response classification.

The executor sends one request and classifies what came back. It does not
retry, back off or refresh tokens; callers that want any of that wrap it.
"""
from __future__ import annotations
import logging
import ssl
from typing import Optional

import requests
from requests.adapters import HTTPAdapter

from .request import AUTHORIZATION_HEADER, PreparedRequest
from .result import Failure, FailureKind, Result, Success

logger = logging.getLogger(__name__)

MINIMUM_TLS_VERSION = ssl.TLSVersion.TLSv1_2


class TLSAdapter(HTTPAdapter):
    """HTTPS adapter that verifies certificates and refuses TLS < 1.2."""

    def __init__(self, minimum_version: ssl.TLSVersion = MINIMUM_TLS_VERSION, **kwargs):
        self.minimum_version = minimum_version
        super().__init__(**kwargs)

    def _ssl_context(self) -> ssl.SSLContext:
        context = ssl.create_default_context()
        context.minimum_version = self.minimum_version
        return context

    def init_poolmanager(self, *args, **kwargs):
        kwargs["ssl_context"] = self._ssl_context()
        return super().init_poolmanager(*args, **kwargs)

    def proxy_manager_for(self, *args, **kwargs):
        kwargs["ssl_context"] = self._ssl_context()
        return super().proxy_manager_for(*args, **kwargs)


def _masked(headers: dict) -> dict:
    return {
        name: "Bearer ****" if name.lower() == AUTHORIZATION_HEADER.lower() else value
        for name, value in headers.items()
    }


class RequestExecutor:
    """Transmit prepared requests over a TLS-enforcing requests session.

    Usage:
        executor = RequestExecutor()
        result = executor.execute(build_request("GET", url, params, token))
        if result.ok:
            data = result.value
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        """Initialize the executor.

        A supplied session is used as-is: its adapters are kept and it is not
        closed by close(). Mount TLSAdapter on it to get the TLS 1.2 floor.

        Args:
            session: Session to send requests with (a new TLS-enforcing one by default)
            timeout: Optional per-request timeout in seconds; None waits indefinitely
        """
        self._owns_session = session is None
        if session is None:
            session = requests.Session()
            session.mount("https://", TLSAdapter())
        self.session = session
        self.timeout = timeout

    def close(self) -> None:
        """Release the session if this executor created it."""
        if self._owns_session:
            self.session.close()

    def execute(
        self,
        request: PreparedRequest,
        failure_kind: FailureKind = FailureKind.HTTP_ERROR,
    ) -> Result:
        """Send the request and classify the response.

        Args:
            request: Descriptor produced by build_request
            failure_kind: Kind used to tag non-200 responses

        Returns:
            Success with the decoded JSON body on HTTP 200, otherwise Failure
        """
        logger.debug("%s %s headers=%s", request.method, request.url, _masked(request.headers))
        try:
            resp = self.session.request(
                request.method,
                request.url,
                headers=request.headers,
                data=request.data,
                files=request.files,
                allow_redirects=request.follow_redirects,
                verify=True,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("%s %s failed before a response: %s", request.method, request.url, exc)
            return Failure(FailureKind.TRANSPORT, None, "", request.url, str(exc))

        if resp.status_code != 200:
            if resp.status_code >= 300:
                logger.warning("%s %s returned %s", request.method, request.url, resp.status_code)
            return Failure(failure_kind, resp.status_code, resp.text, request.url)

        try:
            return Success(resp.json())
        except ValueError as exc:
            logger.warning("%s %s returned an undecodable body", request.method, request.url)
            return Failure(FailureKind.MALFORMED_RESPONSE, resp.status_code, resp.text, request.url, str(exc))
