"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from box_client.core.client import BOX_API_URL, BOX_TOKEN_URL, BOX_UPLOAD_URL
from box_client.core.credentials import Identity
from box_client.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
        except OSError as e:
            logger.warning("Failed to read /run/secrets/%s: %s", secret_name, e)
        else:
            if secret_value:
                logger.debug("Loaded %s from /run/secrets", secret_name)
                return secret_value

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.debug("Loaded %s from environment", env_var)
            return secret_value

    return None


def _optional_float(var_name: str) -> Optional[float]:
    value = os.environ.get(var_name, "").strip()
    if not value:
        return None
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(f"{var_name} must be a number of seconds, got '{value}'") from e


@dataclass
class BoxSettings:
    """Box client configuration container."""
    # Application identity
    client_id: str
    client_secret: str
    public_key_id: str = ""

    # JWT assertion
    enterprise_id: str = ""
    private_key_path: str = ""
    private_key_passphrase: str = ""

    # Endpoints
    api_url: str = BOX_API_URL
    upload_url: str = BOX_UPLOAD_URL
    token_url: str = BOX_TOKEN_URL

    # Behaviour
    as_user: str = ""
    request_timeout: Optional[float] = None

    def identity(self) -> Identity:
        return Identity(self.client_id, self.client_secret, self.public_key_id)

    def read_private_key(self) -> bytes:
        """Read the PEM private key referenced by private_key_path.

        Raises:
            ConfigurationError: If no path is configured or the file is unreadable
        """
        if not self.private_key_path:
            raise ConfigurationError("BOX_PRIVATE_KEY_PATH is not set")
        try:
            return Path(self.private_key_path).read_bytes()
        except OSError as e:
            raise ConfigurationError(f"Cannot read private key {self.private_key_path}: {e}") from e


def load_settings() -> BoxSettings:
    """Load Box settings from environment and /run/secrets.

    Raises:
        ConfigurationError: If BOX_CLIENT_ID or BOX_CLIENT_SECRET is missing
    """
    client_id = os.environ.get("BOX_CLIENT_ID", "").strip()
    client_secret = _load_secret_from_file("box_client_secret", "BOX_CLIENT_SECRET") or ""

    missing = []
    if not client_id:
        missing.append("BOX_CLIENT_ID")
    if not client_secret:
        missing.append("BOX_CLIENT_SECRET")
    if missing:
        raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")

    passphrase = _load_secret_from_file("box_private_key_passphrase", "BOX_PRIVATE_KEY_PASSPHRASE") or ""

    settings = BoxSettings(
        client_id=client_id,
        client_secret=client_secret,
        public_key_id=os.environ.get("BOX_PUBLIC_KEY_ID", ""),
        enterprise_id=os.environ.get("BOX_ENTERPRISE_ID", ""),
        private_key_path=os.environ.get("BOX_PRIVATE_KEY_PATH", ""),
        private_key_passphrase=passphrase,
        api_url=os.environ.get("BOX_API_URL", BOX_API_URL),
        upload_url=os.environ.get("BOX_UPLOAD_URL", BOX_UPLOAD_URL),
        token_url=os.environ.get("BOX_TOKEN_URL", BOX_TOKEN_URL),
        as_user=os.environ.get("BOX_AS_USER", ""),
        request_timeout=_optional_float("BOX_REQUEST_TIMEOUT"),
    )
    logger.info("Box settings loaded; client_id=%s; enterprise_id=%s", client_id, settings.enterprise_id or "-")
    return settings
