"""Box-specific exceptions for error handling."""
from __future__ import annotations
from typing import Optional


class BoxError(Exception):
    """Base exception for all Box client operations."""
    pass


class ConfigurationError(BoxError, ValueError):
    """Client identity or settings are unusable (missing client id/secret, bad key)."""
    pass


class BoxAPIError(BoxError):
    """HTTP error from the Box API.
    
    Attributes:
        status_code: HTTP status code (None when no response was received)
        message: Raw response body or transport error message
        endpoint: URL of the request that failed
    """
    
    def __init__(self, status_code: Optional[int], message: str, endpoint: str):
        self.status_code = status_code
        self.message = message
        self.endpoint = endpoint
        super().__init__(f"[{status_code}] {endpoint}: {message}")


class AuthenticationError(BoxAPIError):
    """Token endpoint refused the assertion."""
    pass


class TransportError(BoxAPIError):
    """Connection or TLS failure before any HTTP status was received."""
    pass


class MalformedResponseError(BoxAPIError):
    """A 200 response whose body could not be decoded as expected."""
    pass
