"""
Unit tests for the authentication endpoints and the session-backed current user.

Supabase Auth is replaced by ``FakeSupabase`` (see conftest) behind an
``httpx.MockTransport``.
"""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

COOKIE = "grant_portal.sid"


async def sign_in(client: AsyncClient, email: str = "ada@example.org", password: str = "secret123"):
    return await client.post("/api/auth/signin", json={"email": email, "password": password})


class TestSignUp:
    async def test_signup_creates_user_with_researcher_role(self, client: AsyncClient, supabase, repos):
        response = await client.post(
            "/api/auth/signup",
            json={"email": "ada@example.org", "password": "secret123", "first_name": "Ada", "last_name": "Lovelace"},
        )

        assert response.status_code == 200
        assert response.json() == {"message": "User created successfully"}
        user_id = supabase.users["ada@example.org"]["id"]
        user = await repos.users.get_by_id(user_id)
        assert (user.first_name, user.last_name) == ("Ada", "Lovelace")
        assert await repos.roles.list_roles(user_id) == ["researcher"]

    async def test_signup_sends_confirmed_user_to_admin_api(self, client: AsyncClient, supabase):
        import json

        await client.post("/api/auth/signup", json={"email": "ada@example.org", "password": "secret123"})

        request = supabase.requests[-1]
        assert request.url.path == "/auth/v1/admin/users"
        assert request.headers["apikey"] == "service-role-key"
        assert json.loads(request.content)["email_confirm"] is True

    async def test_duplicate_signup_is_rejected(self, client: AsyncClient, supabase):
        supabase.add_user("ada@example.org", "secret123")

        response = await client.post("/api/auth/signup", json={"email": "ada@example.org", "password": "secret123"})

        assert response.status_code == 400
        assert response.json()["detail"] == "A user with this email address has already been registered"

    async def test_short_password(self, client: AsyncClient):
        response = await client.post("/api/auth/signup", json={"email": "ada@example.org", "password": "123"})
        assert response.status_code == 422


class TestSignIn:
    async def test_signin_sets_session_cookie(self, client: AsyncClient, supabase, repos):
        supabase.add_user("ada@example.org", "secret123", full_name="Ada King Lovelace")

        response = await sign_in(client)

        assert response.status_code == 200
        assert response.json() == {"message": "Signed in successfully"}
        sid = response.cookies.get(COOKIE)
        assert sid
        assert "httponly" in response.headers["set-cookie"].lower()
        stored = await repos.sessions.get_by_id(sid)
        assert stored.sess["user"]["access_token"].startswith("access-")
        user = await repos.users.get_by_email("ada@example.org")
        assert (user.first_name, user.last_name) == ("Ada", "King Lovelace")

    async def test_wrong_password(self, client: AsyncClient, supabase):
        supabase.add_user("ada@example.org", "secret123")

        response = await sign_in(client, password="nope")

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid login credentials"

    async def test_provider_unavailable(self, client: AsyncClient, supabase):
        supabase.down = True

        response = await sign_in(client)

        assert response.status_code == 503
        assert response.json()["detail"] == "Authentication service unavailable"


class TestCurrentUser:
    async def test_session_cookie_authenticates(self, client: AsyncClient, supabase):
        supabase.add_user("ada@example.org", "secret123", first_name="Ada")
        await sign_in(client)

        response = await client.get("/api/auth/user")

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "ada@example.org"
        assert data["first_name"] == "Ada"
        # Users without any role get the default one
        assert data["roles"] == ["researcher"]

    async def test_bearer_token_authenticates(self, client: AsyncClient, supabase, seed):
        user = supabase.add_user("ada@example.org", "secret123")
        await seed.user(user["id"], "reviewer", email="ada@example.org")
        token = supabase.issue_tokens(user)["access_token"]

        response = await client.get("/api/auth/user", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["roles"] == ["reviewer"]

    async def test_bearer_user_without_local_record_can_write(self, client: AsyncClient, supabase, seed, repos):
        user = supabase.add_user("grace@example.org", "secret123", full_name="Grace Hopper")
        token = supabase.issue_tokens(user)["access_token"]
        call = await seed.call()

        response = await client.post(
            "/api/proposals",
            json={"call_id": call.id, "title": "Compilers", "abstract": "Teaching machines English"},
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 201
        assert response.json()["pi_user_id"] == user["id"]
        stored = await repos.users.get_by_id(user["id"])
        assert stored.email == "grace@example.org"
        assert (stored.first_name, stored.last_name) == ("Grace", "Hopper")

    async def test_no_credentials(self, client: AsyncClient):
        response = await client.get("/api/auth/user")

        assert response.status_code == 401
        assert response.json()["detail"] == "Unauthorized"

    async def test_invalid_token(self, client: AsyncClient):
        response = await client.get("/api/auth/user", headers={"Authorization": "Bearer forged"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"

    async def test_expired_session_is_refreshed(self, client: AsyncClient, supabase, repos):
        supabase.add_user("ada@example.org", "secret123")
        supabase.expires_in = -60
        sid = (await sign_in(client)).cookies.get(COOKIE)
        old_token = (await repos.sessions.get_by_id(sid)).sess["user"]["access_token"]
        supabase.expires_in = 3600

        response = await client.get("/api/auth/user")

        assert response.status_code == 200
        new_token = (await repos.sessions.get_by_id(sid)).sess["user"]["access_token"]
        assert new_token != old_token

    async def test_refresh_rejected(self, client: AsyncClient, supabase):
        supabase.add_user("ada@example.org", "secret123")
        supabase.expires_in = -60
        await sign_in(client)
        supabase.refresh_tokens.clear()

        response = await client.get("/api/auth/user")

        assert response.status_code == 401
        assert response.json()["detail"] == "Session expired"


class TestSignOutAndRefresh:
    async def test_signout_destroys_session(self, client: AsyncClient, supabase, repos):
        supabase.add_user("ada@example.org", "secret123")
        sid = (await sign_in(client)).cookies.get(COOKIE)

        response = await client.post("/api/auth/signout")
        after = await client.get("/api/auth/user")

        assert response.json() == {"message": "Signed out successfully"}
        assert await repos.sessions.get_by_id(sid) is None
        assert after.status_code == 401

    async def test_refresh_rotates_tokens(self, client: AsyncClient, supabase, repos):
        supabase.add_user("ada@example.org", "secret123")
        sid = (await sign_in(client)).cookies.get(COOKIE)
        before = (await repos.sessions.get_by_id(sid)).sess["user"]["refresh_token"]

        response = await client.post("/api/auth/refresh")

        assert response.json() == {"message": "Session refreshed successfully"}
        assert (await repos.sessions.get_by_id(sid)).sess["user"]["refresh_token"] != before

    async def test_refresh_without_session(self, client: AsyncClient):
        response = await client.post("/api/auth/refresh")

        assert response.status_code == 401
        assert response.json()["detail"] == "No refresh token available"


async def test_update_profile(client: AsyncClient, act_as, seed, repos):
    await seed.user("u-1", "researcher")
    act_as("u-1", "researcher")

    response = await client.put("/api/auth/profile", json={"department": "Physics", "institution": "MIT"})

    assert response.status_code == 200
    assert response.json()["department"] == "Physics"
    assert response.json()["first_name"] == "u-1"
    assert [e.action for e in await repos.audit.list_for_resource("user", "u-1")] == ["update_profile"]
