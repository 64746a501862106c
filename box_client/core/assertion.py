"""JWT assertions for the Box JWT bearer grant.

Box server authentication exchanges an RS256-signed JWT for an access token.
The assertion names the enterprise (service account) or an app user as its
subject, carries the public key ID in its header and is valid for at most
60 seconds.
"""
from __future__ import annotations
import secrets
from datetime import datetime, timedelta
from typing import Optional, Union

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from .credentials import Identity, utcnow
from .exceptions import ConfigurationError

JWT_ALGORITHM = "RS256"
MAX_ASSERTION_LIFETIME = 60
SUBJECT_TYPES = ("enterprise", "user")


def load_private_key(pem: Union[str, bytes], passphrase: Optional[str] = None) -> RSAPrivateKey:
    """Load an RSA private key from PEM, decrypting it with ``passphrase`` if given.

    Raises:
        ConfigurationError: If the key cannot be loaded or is not RSA
    """
    if isinstance(pem, str):
        pem = pem.encode("utf-8")
    password = passphrase.encode("utf-8") if passphrase else None
    try:
        key = serialization.load_pem_private_key(pem, password=password)
    except (ValueError, TypeError) as exc:
        raise ConfigurationError(f"Unable to load private key: {exc}") from exc
    if not isinstance(key, RSAPrivateKey):
        raise ConfigurationError("Box JWT authentication requires an RSA private key")
    return key


def build_assertion(
    identity: Identity,
    private_key: Union[RSAPrivateKey, str, bytes],
    subject_id: str,
    subject_type: str = "enterprise",
    audience: str = "https://api.box.com/oauth2/token",
    lifetime: int = MAX_ASSERTION_LIFETIME,
    passphrase: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    """Build and sign a JWT assertion.

    Args:
        identity: Client identity; client_id is the issuer, public_key_id the kid
        private_key: RSA key object or PEM text
        subject_id: Enterprise ID or app user ID
        subject_type: "enterprise" or "user"
        audience: Token endpoint URL
        lifetime: Assertion validity in seconds (capped at 60)
        passphrase: Passphrase for an encrypted PEM
        now: Issue time (defaults to the current UTC time)

    Returns:
        Encoded JWT string
    """
    if subject_type not in SUBJECT_TYPES:
        raise ValueError(f"Invalid subject type '{subject_type}': must be one of {SUBJECT_TYPES}")
    if not subject_id:
        raise ValueError("subject_id cannot be empty")

    if not isinstance(private_key, RSAPrivateKey):
        private_key = load_private_key(private_key, passphrase)

    issued_at = now or utcnow()
    claims = {
        "iss": identity.client_id,
        "sub": str(subject_id),
        "box_sub_type": subject_type,
        "aud": audience,
        "jti": secrets.token_urlsafe(32),
        "exp": issued_at + timedelta(seconds=min(lifetime, MAX_ASSERTION_LIFETIME)),
    }
    headers = {"kid": identity.public_key_id} if identity.public_key_id else None
    return jwt.encode(claims, private_key, algorithm=JWT_ALGORITHM, headers=headers)
