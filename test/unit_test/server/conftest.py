import json
from datetime import timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, AsyncGenerator, Callable, Dict, List, Optional, Union

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from grant_portal.core.database.base import utc_now
from grant_portal.core.database.entities import (
    Award,
    CallForProposal,
    Proposal,
    User,
    UserRole,
)
from grant_portal.core.models.domain.enums import (
    AwardStatus,
    CallStatus,
    ProposalStatus,
)
from grant_portal.server.core.config import UploadConfig

SUPABASE_URL = "http://mock-supabase"


class FakeSupabase:
    """In-memory stand-in for the Supabase Auth REST API, served through ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.users: Dict[str, Dict[str, Any]] = {}
        self.access_tokens: Dict[str, str] = {}
        self.refresh_tokens: Dict[str, str] = {}
        self.expires_in = 3600
        self.down = False
        self.requests: List[httpx.Request] = []
        self._counter = 0

    def add_user(self, email: str, password: str, **user_metadata: Any) -> Dict[str, Any]:
        self._counter += 1
        user = {
            "id": f"user-{self._counter}",
            "email": email,
            "password": password,
            "user_metadata": user_metadata,
        }
        self.users[email] = user
        return user

    def _by_id(self, user_id: str) -> Dict[str, Any]:
        return next(u for u in self.users.values() if u["id"] == user_id)

    @staticmethod
    def _public(user: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": user["id"],
            "email": user["email"],
            "user_metadata": user["user_metadata"],
            "aud": "authenticated",
        }

    def issue_tokens(self, user: Dict[str, Any]) -> Dict[str, Any]:
        self._counter += 1
        access_token = f"access-{self._counter}"
        refresh_token = f"refresh-{self._counter}"
        self.access_tokens[access_token] = user["id"]
        self.refresh_tokens[refresh_token] = user["id"]
        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "bearer",
            "expires_in": self.expires_in,
            "user": self._public(user),
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.down:
            raise httpx.ConnectError("connection refused", request=request)

        path = request.url.path
        body = json.loads(request.content) if request.content else {}

        if request.method == "POST" and path == "/auth/v1/admin/users":
            if body["email"] in self.users:
                return httpx.Response(422, json={"msg": "A user with this email address has already been registered"})
            user = self.add_user(body["email"], body["password"], **body.get("user_metadata", {}))
            return httpx.Response(200, json=self._public(user))

        if request.method == "POST" and path == "/auth/v1/token":
            grant_type = request.url.params.get("grant_type")
            if grant_type == "password":
                user = self.users.get(body.get("email"))
                if user is None or user["password"] != body.get("password"):
                    return httpx.Response(
                        400, json={"error": "invalid_grant", "error_description": "Invalid login credentials"}
                    )
                return httpx.Response(200, json=self.issue_tokens(user))
            if grant_type == "refresh_token":
                user_id = self.refresh_tokens.pop(body.get("refresh_token"), None)
                if user_id is None:
                    return httpx.Response(
                        400, json={"error": "invalid_grant", "error_description": "Invalid Refresh Token"}
                    )
                return httpx.Response(200, json=self.issue_tokens(self._by_id(user_id)))

        if request.method == "GET" and path == "/auth/v1/user":
            token = request.headers.get("Authorization", "").removeprefix("Bearer ")
            user_id = self.access_tokens.get(token)
            if user_id is None:
                return httpx.Response(401, json={"msg": "invalid JWT: unable to parse or verify signature"})
            return httpx.Response(200, json=self._public(self._by_id(user_id)))

        return httpx.Response(404, json={"msg": "Not found"})


class Seed:
    """Inserts records straight into the test database."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _add(self, entity):
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def ensure_user(self, user_id: str) -> User:
        """Return the user row, creating a bare one when it is missing."""
        user = await self.session.get(User, user_id)
        if user is None:
            user = await self._add(User(id=user_id, email=f"{user_id}@example.org", first_name=user_id))
        return user

    async def user(self, user_id: str, *roles: str, email: Optional[str] = None) -> User:
        user = await self.ensure_user(user_id)
        if email is not None and user.email != email:
            user.email = email
            user = await self._add(user)
        for role in roles:
            await self._add(UserRole(user_id=user_id, role=role))
        return user

    async def call(
        self,
        *,
        status: CallStatus = CallStatus.published,
        budget_cap: Optional[str] = None,
        close_in_days: int = 30,
        created_by: str = "manager-1",
    ) -> CallForProposal:
        await self.ensure_user(created_by)
        now = utc_now()
        return await self._add(
            CallForProposal(
                title="Climate Research 2026",
                description="Funding for climate research",
                open_date=now - timedelta(days=10),
                close_date=now + timedelta(days=close_in_days),
                budget_cap=Decimal(budget_cap) if budget_cap else None,
                status=status.value,
                created_by=created_by,
            )
        )

    async def proposal(
        self,
        call: CallForProposal,
        pi_user_id: str,
        *,
        status: ProposalStatus = ProposalStatus.draft,
        total_budget: Optional[str] = None,
        title: str = "Ocean heat uptake",
    ) -> Proposal:
        await self.ensure_user(pi_user_id)
        return await self._add(
            Proposal(
                call_id=call.id,
                title=title,
                abstract="We measure how the oceans store heat.",
                status=status.value,
                pi_user_id=pi_user_id,
                total_budget=Decimal(total_budget) if total_budget else None,
            )
        )

    async def award(
        self,
        proposal: Proposal,
        *,
        amount: str = "10000.00",
        status: AwardStatus = AwardStatus.active,
    ) -> Award:
        now = utc_now()
        return await self._add(
            Award(
                proposal_id=proposal.id,
                award_amount=Decimal(amount),
                start_date=now,
                end_date=now + timedelta(days=365),
                status=status.value,
            )
        )


@pytest.fixture
def supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def upload_config(tmp_path) -> UploadConfig:
    return UploadConfig(directory=str(tmp_path / "uploads"), max_bytes=1024, allowed_extensions=["pdf", "txt"])


@pytest_asyncio.fixture
async def seed(session: AsyncSession) -> Seed:
    return Seed(session)


@pytest_asyncio.fixture(name="client")
async def client_fixture(
    session: AsyncSession, supabase: FakeSupabase, upload_config: UploadConfig
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with overridden database, auth provider and upload dependencies."""
    from grant_portal.core.database import get_session
    from grant_portal.server.auth.supabase_client import SupabaseAuthClient, get_auth_client
    from grant_portal.server.main import app
    from grant_portal.server.services.deps import get_upload_config

    auth_client = SupabaseAuthClient(
        SUPABASE_URL,
        "service-role-key",
        client=httpx.AsyncClient(transport=httpx.MockTransport(supabase.handler)),
    )

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_auth_client] = lambda: auth_client
    app.dependency_overrides[get_upload_config] = lambda: upload_config

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()
    await auth_client.aclose()


@pytest.fixture
def act_as(client: AsyncClient, seed: Seed) -> Callable:
    """Authenticate following requests as the given user id and roles, bypassing Supabase.

    The user row is created on the first request, like ``get_current_user`` does.
    """
    from grant_portal.server.auth.dependencies import CurrentUser, get_current_user
    from grant_portal.server.main import app

    def _act_as(user_id: str, *roles: Union[str, Enum]) -> CurrentUser:
        user = CurrentUser(
            id=user_id,
            email=f"{user_id}@example.org",
            roles=[r.value if isinstance(r, Enum) else r for r in roles],
        )

        async def _current_user() -> CurrentUser:
            await seed.ensure_user(user_id)
            return user

        app.dependency_overrides[get_current_user] = _current_user
        return user

    return _act_as
