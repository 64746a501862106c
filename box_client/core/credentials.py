"""Client identity and bearer credential state."""
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from .exceptions import ConfigurationError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Identity:
    """Application credentials registered with Box.

    Attributes:
        client_id: OAuth client identifier of the Box application
        client_secret: OAuth client secret
        public_key_id: ID Box assigned to the RSA public key (JWT ``kid``)
    """
    client_id: str
    client_secret: str
    public_key_id: str = ""

    def __post_init__(self) -> None:
        if not self.client_id or not self.client_secret:
            raise ConfigurationError("Invalid client_id and/or client_secret. Values cannot be empty.")

    def __repr__(self) -> str:
        return f"Identity(client_id={self.client_id!r}, public_key_id={self.public_key_id!r})"


class CredentialStore:
    """Holds the current access token and its expiry instant.

    The store never refreshes anything on its own. It only answers whether the
    token it holds looks usable; it does not verify the token with Box.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self._clock = clock
        self.access_token: Optional[str] = None
        self.expires_at: Optional[datetime] = None

    def is_valid(self, strict: bool = True) -> bool:
        """Check that a token is present and not expired.

        Args:
            strict: When True, a token without a recorded expiry is treated as
                invalid. When False, such a token is accepted.

        Returns:
            Whether the stored token can be presented
        """
        if not self.access_token:
            return False
        if self.expires_at is None:
            return not strict
        return self._clock() < self.expires_at

    def set(self, access_token: Optional[str] = None, expires_at: Optional[datetime] = None) -> bool:
        """Update the token and/or its expiry.

        Empty values leave the corresponding field untouched. A naive expiry
        is taken to be UTC.

        Returns:
            Always True
        """
        if access_token:
            self.access_token = access_token
        if expires_at:
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)
            self.expires_at = expires_at
        return True

    def seconds_remaining(self) -> Optional[float]:
        if self.expires_at is None:
            return None
        return (self.expires_at - self._clock()).total_seconds()
