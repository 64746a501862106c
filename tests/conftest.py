"""Pytest shared fixtures for the Box client tests."""
import json
import pathlib
import sys
from datetime import datetime, timedelta, timezone

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from box_client.core import BoxClient, Identity


# ─────────────────────────────────────────────────────────────────────────────
# HTTP stubs
# ─────────────────────────────────────────────────────────────────────────────
class StubResponse:
    def __init__(self, payload=None, status_code: int = 200, text: str | None = None):
        self._payload = payload
        self.status_code = status_code
        if text is not None:
            self.text = text
        elif payload is None:
            self.text = ""
        else:
            self.text = json.dumps(payload)

    def json(self):
        return json.loads(self.text)


class StubSession(requests.Session):
    """requests.Session that records calls and replays queued responses."""

    def __init__(self, *responses):
        super().__init__()
        self.responses = list(responses)
        self.calls = []

    def queue(self, response) -> None:
        self.responses.append(response)

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self.responses:
            raise RuntimeError(f"Unexpected HTTP {method} in unit test: {url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last_call(self) -> dict:
        return self.calls[-1]


class FakeClock:
    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


# ─────────────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture
def stub_session():
    return StubSession()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def identity():
    return Identity(client_id="abc", client_secret="xyz", public_key_id="key-1")


@pytest.fixture
def box_client(identity, stub_session, clock):
    """BoxClient wired to the stub session with a valid token."""
    client = BoxClient(identity, session=stub_session, clock=clock)
    client.set_access("tok1", clock() + timedelta(seconds=3600))
    return client


@pytest.fixture(scope="session")
def rsa_key_pair():
    """Generate an RSA key pair for signing assertions."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return {"private_key": private_key, "private_pem": private_pem, "public_pem": public_pem}


@pytest.fixture
def respond():
    """Factory for stub responses: respond(payload, status_code=200, text=None)."""
    return StubResponse
