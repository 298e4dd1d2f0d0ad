"""
Unit tests for the Supabase Auth client.

Requests are answered by an ``httpx.MockTransport`` handler; the tests check
the URL, headers and body the client sends and how it maps error responses.
"""

import json
import time

import httpx
import pytest

from grant_portal.server.auth.errors import AuthNotConfiguredError, SupabaseAuthError
from grant_portal.server.auth.supabase_client import (
    SupabaseAuthClient,
    SupabaseSession,
    SupabaseUser,
    profile_from_supabase_user,
)

BASE_URL = "http://mock-supabase"
USER = {"id": "u-1", "email": "ada@example.org", "user_metadata": {"first_name": "Ada"}}
TOKENS = {"access_token": "at", "refresh_token": "rt", "expires_in": 3600, "token_type": "bearer", "user": USER}


def make_client(handler) -> SupabaseAuthClient:
    return SupabaseAuthClient(
        BASE_URL + "/", "service-key", client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )


class TestRequests:
    async def test_sign_in_with_password(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(200, json=TOKENS)

        client = make_client(handler)
        session = await client.sign_in_with_password("ada@example.org", "secret")

        request = seen["request"]
        assert str(request.url) == f"{BASE_URL}/auth/v1/token?grant_type=password"
        assert request.headers["apikey"] == "service-key"
        assert request.headers["Authorization"] == "Bearer service-key"
        assert json.loads(request.content) == {"email": "ada@example.org", "password": "secret"}
        assert session.access_token == "at"
        assert session.user.id == "u-1"

    async def test_refresh_session(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(200, json=TOKENS)

        await make_client(handler).refresh_session("rt")

        assert seen["request"].url.params["grant_type"] == "refresh_token"
        assert json.loads(seen["request"].content) == {"refresh_token": "rt"}

    async def test_get_user_sends_user_token(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(200, json=USER)

        user = await make_client(handler).get_user("user-token")

        assert seen["request"].method == "GET"
        assert seen["request"].url.path == "/auth/v1/user"
        assert seen["request"].headers["Authorization"] == "Bearer user-token"
        assert user.email == "ada@example.org"

    @pytest.mark.parametrize("body", [USER, {"user": USER}])
    async def test_create_user_accepts_wrapped_response(self, body):
        def handler(request: httpx.Request) -> httpx.Response:
            assert json.loads(request.content)["email_confirm"] is True
            return httpx.Response(200, json=body)

        user = await make_client(handler).create_user("ada@example.org", "secret", {"first_name": "Ada"})

        assert user.id == "u-1"


class TestErrors:
    @pytest.mark.parametrize(
        "body, message",
        [
            ({"msg": "Email not confirmed"}, "Email not confirmed"),
            ({"error": "invalid_grant", "error_description": "Invalid login credentials"}, "Invalid login credentials"),
            ({"message": "Bad request"}, "Bad request"),
            ({"code": 400}, "Authentication failed (400)"),
        ],
    )
    async def test_error_message_extraction(self, body, message):
        client = make_client(lambda request: httpx.Response(400, json=body))

        with pytest.raises(SupabaseAuthError) as exc_info:
            await client.sign_in_with_password("a@b.c", "x")

        assert exc_info.value.message == message
        assert exc_info.value.status_code == 400
        assert not exc_info.value.is_unavailable

    async def test_provider_error_is_unavailable(self):
        client = make_client(lambda request: httpx.Response(502, text="Bad gateway"))

        with pytest.raises(SupabaseAuthError) as exc_info:
            await client.get_user("t")

        assert exc_info.value.status_code == 503
        assert exc_info.value.is_unavailable

    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(SupabaseAuthError) as exc_info:
            await make_client(handler).get_user("t")

        assert exc_info.value.message == "Authentication service unavailable"
        assert exc_info.value.status_code == 503


class TestModels:
    def test_expires_at_is_derived_from_expires_in(self):
        session = SupabaseSession.model_validate({**TOKENS, "expires_in": 100})
        assert abs(session.expires_at - (int(time.time()) + 100)) <= 1

    def test_explicit_expires_at_is_kept(self):
        session = SupabaseSession.model_validate({**TOKENS, "expires_at": 42})
        assert session.expires_at == 42

    @pytest.mark.parametrize(
        "metadata, expected",
        [
            ({"first_name": "Ada", "last_name": "Lovelace"}, ("Ada", "Lovelace")),
            ({"full_name": "Ada King Lovelace"}, ("Ada", "King Lovelace")),
            ({"name": "Ada"}, ("Ada", None)),
            ({}, (None, None)),
        ],
    )
    def test_profile_from_metadata(self, metadata, expected):
        profile = profile_from_supabase_user(SupabaseUser(id="u-1", email="a@b.c", user_metadata=metadata))
        assert (profile["first_name"], profile["last_name"]) == expected
        assert profile["email"] == "a@b.c"

    def test_avatar_becomes_profile_image(self):
        user = SupabaseUser(id="u-1", user_metadata={"avatar_url": "https://img/x.png"})
        assert profile_from_supabase_user(user)["profile_image_url"] == "https://img/x.png"


async def test_get_auth_client_requires_configuration(monkeypatch):
    from grant_portal.server.auth import supabase_client

    monkeypatch.setattr(supabase_client, "_auth_client", None)
    monkeypatch.setattr(supabase_client.settings, "supabase_url", None)

    with pytest.raises(AuthNotConfiguredError):
        supabase_client.get_auth_client()


async def test_get_auth_client_is_cached(monkeypatch):
    from grant_portal.server.auth import supabase_client

    monkeypatch.setattr(supabase_client, "_auth_client", None)
    monkeypatch.setattr(supabase_client.settings, "supabase_url", "http://mock-supabase")
    monkeypatch.setattr(supabase_client.settings, "supabase_service_role_key", "key")

    first = supabase_client.get_auth_client()
    assert supabase_client.get_auth_client() is first

    await supabase_client.close_auth_client()
    assert supabase_client._auth_client is None
