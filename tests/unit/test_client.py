"""Unit tests for BoxClient authentication and request flow."""
from datetime import timedelta
from urllib.parse import parse_qs

import pytest
import requests

from box_client.core import BoxClient, Identity, RequestParams
from box_client.core.client import JWT_BEARER_GRANT, token_from_response
from box_client.core.exceptions import AuthenticationError, MalformedResponseError
from box_client.core.result import FailureKind


@pytest.fixture
def fresh_client(identity, stub_session, clock):
    return BoxClient(identity, session=stub_session, clock=clock)


def test_authenticate_posts_jwt_bearer_grant(fresh_client, stub_session, respond):
    stub_session.queue(respond({"access_token": "tok1", "expires_in": 60}))
    result = fresh_client.authenticate("signed.jwt.value")

    assert result.ok
    assert result.value == {"access_token": "tok1", "expires_in": 60}

    call = stub_session.last_call
    assert call["method"] == "POST"
    assert call["url"] == "https://api.box.com/oauth2/token"
    assert call["headers"]["Content-Type"] == "application/x-www-form-urlencoded"
    assert parse_qs(call["data"]) == {
        "grant_type": [JWT_BEARER_GRANT],
        "assertion": ["signed.jwt.value"],
        "client_id": ["abc"],
        "client_secret": ["xyz"],
    }


def test_authenticate_does_not_store_token(fresh_client, stub_session, respond):
    stub_session.queue(respond({"access_token": "tok1", "expires_in": 60}))
    fresh_client.authenticate("signed.jwt.value")
    assert fresh_client.credentials.access_token is None
    assert fresh_client.check_access(strict=False) is False


def test_authenticate_sends_no_bearer_or_as_user(fresh_client, stub_session, respond):
    fresh_client.set_access("old-token")
    fresh_client.set_as_user("user9")
    stub_session.queue(respond({"access_token": "tok1", "expires_in": 60}))
    fresh_client.authenticate("signed.jwt.value")
    headers = stub_session.last_call["headers"]
    assert "Authorization" not in headers
    assert "As-User" not in headers


def test_authenticate_failure_is_classified(fresh_client, stub_session, respond):
    stub_session.queue(respond(text='{"error":"invalid_grant"}', status_code=400))
    result = fresh_client.authenticate("bad.jwt")
    assert not result.ok
    assert result.kind == FailureKind.AUTHENTICATION
    assert result.status_code == 400
    assert "invalid_grant" in result.body
    with pytest.raises(AuthenticationError):
        result.unwrap()


def test_authenticate_transport_failure(fresh_client, stub_session):
    stub_session.queue(requests.ConnectionError("down"))
    result = fresh_client.authenticate("signed.jwt.value")
    assert result.kind == FailureKind.TRANSPORT
    assert result.status_code is None
    assert "down" in result.message


def test_authenticate_malformed_response(fresh_client, stub_session, respond):
    stub_session.queue(respond(text="<html>", status_code=200))
    result = fresh_client.authenticate("signed.jwt.value")
    assert result.kind == FailureKind.MALFORMED_RESPONSE
    assert result.status_code == 200
    assert result.body == "<html>"
    with pytest.raises(MalformedResponseError):
        result.unwrap()


def test_end_to_end_token_lifecycle(identity, stub_session, respond, clock):
    client = BoxClient(Identity(client_id="abc", client_secret="xyz"), session=stub_session, clock=clock)
    stub_session.queue(respond({"access_token": "tok1", "expires_in": 60}))

    result = client.authenticate("assertion")
    client.set_access("tok1", clock() + timedelta(seconds=60))

    assert result.value["access_token"] == "tok1"
    assert client.check_access(strict=True) is True
    clock.advance(61)
    assert client.check_access(strict=True) is False


def test_token_from_response_computes_expiry(clock):
    token, expires_at = token_from_response({"access_token": "tok1", "expires_in": 60}, now=clock())
    assert token == "tok1"
    assert expires_at == clock() + timedelta(seconds=60)


def test_token_from_response_commits_through_set_access(fresh_client, clock):
    fresh_client.set_access(*token_from_response({"access_token": "tok1", "expires_in": 3600}, now=clock()))
    assert fresh_client.check_access() is True


def test_token_from_response_without_expiry(clock):
    assert token_from_response({"access_token": "tok1"}, now=clock()) == ("tok1", None)
    assert token_from_response({"access_token": "tok1", "expires_in": "soon"}, now=clock()) == ("tok1", None)


@pytest.mark.parametrize("expires_in", [1e20, "inf", "nan", float("inf"), -1e20])
def test_token_from_response_out_of_range_expiry(clock, expires_in):
    payload = {"access_token": "tok1", "expires_in": expires_in}
    assert token_from_response(payload, now=clock()) == ("tok1", None)


@pytest.mark.parametrize("payload", [{}, {"expires_in": 60}, {"access_token": ""}, []])
def test_token_from_response_requires_access_token(payload):
    with pytest.raises(MalformedResponseError):
        token_from_response(payload)


def test_request_uses_current_token(box_client, stub_session, respond):
    stub_session.queue(respond({"id": "42"}))
    result = box_client.request("GET", box_client.api_url("files", "42"))
    assert result.value == {"id": "42"}
    assert stub_session.last_call["url"] == "https://api.box.com/2.0/files/42"
    assert stub_session.last_call["headers"]["Authorization"] == "Bearer tok1"

    box_client.set_access("tok2")
    stub_session.queue(respond({"id": "42"}))
    box_client.request("GET", box_client.api_url("files", "42"))
    assert stub_session.last_call["headers"]["Authorization"] == "Bearer tok2"


def test_request_does_not_check_freshness(box_client, stub_session, respond, clock):
    clock.advance(7200)
    assert box_client.check_access() is False
    stub_session.queue(respond(text='{"type":"error","status":401}', status_code=401))
    result = box_client.request("GET", box_client.api_url("users", "me"))
    assert stub_session.last_call["headers"]["Authorization"] == "Bearer tok1"
    assert result.kind == FailureKind.HTTP_ERROR
    assert result.status_code == 401


def test_impersonation_header_on_every_request(box_client, stub_session, respond):
    box_client.set_as_user("user9")
    for _ in range(2):
        stub_session.queue(respond({}))
        box_client.request("GET", box_client.api_url("folders", "0"))
        assert stub_session.last_call["headers"]["As-User"] == "user9"


def test_explicit_as_user_header_is_kept(box_client, stub_session, respond):
    box_client.set_as_user("user9")
    stub_session.queue(respond({}))
    box_client.request("GET", box_client.api_url("folders", "0"), RequestParams(headers={"As-User": "user1"}))
    assert stub_session.last_call["headers"]["As-User"] == "user1"


def test_clearing_impersonation(box_client, stub_session, respond):
    box_client.set_as_user("user9")
    box_client.set_as_user(None)
    stub_session.queue(respond({}))
    box_client.request("GET", box_client.api_url("users", "me"))
    assert "As-User" not in stub_session.last_call["headers"]


def test_api_and_upload_urls(box_client):
    assert box_client.api_url("folders", 0, "items") == "https://api.box.com/2.0/folders/0/items"
    assert box_client.api_url("users", "") == "https://api.box.com/2.0/users"
    assert box_client.upload_url("files", "content") == "https://upload.box.com/api/2.0/files/content"


def test_custom_base_urls(identity, stub_session):
    client = BoxClient(identity, api_url="https://box.test/2.0/", upload_url="https://up.box.test/", session=stub_session)
    assert client.api_url("users") == "https://box.test/2.0/users"
    assert client.upload_url("files") == "https://up.box.test/files"


def test_close_releases_owned_session(identity, monkeypatch):
    client = BoxClient(identity)
    closed = []
    monkeypatch.setattr(client.executor.session, "close", lambda: closed.append(True))
    client.close()
    assert closed == [True]


def test_close_leaves_supplied_session_open(fresh_client, stub_session, monkeypatch):
    closed = []
    monkeypatch.setattr(stub_session, "close", lambda: closed.append(True))
    fresh_client.close()
    assert closed == []
