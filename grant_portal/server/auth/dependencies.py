"""
Current-user dependency.

Resolves the authenticated user from the server-side session cookie, or from
an ``Authorization: Bearer`` header when there is no usable session. Expired
session tokens are refreshed transparently, and a caller with no local user
row gets one built from the provider profile.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional, Union

from fastapi import Depends, HTTPException, Request, status
from pydantic import BaseModel, Field

from grant_portal.core.logging_config import get_logger
from grant_portal.server.core.config import settings
from grant_portal.server.services.deps import ReposDep, SessionStoreDep

from .errors import SupabaseAuthError
from .sessions import session_payload
from .supabase_client import SupabaseAuthClient, get_auth_client, profile_from_supabase_user

logger = get_logger(__name__)

AuthClientDep = Annotated[SupabaseAuthClient, Depends(get_auth_client)]


class CurrentUser(BaseModel):
    """The authenticated caller and the roles they hold."""

    id: str
    email: Optional[str] = None
    roles: List[str] = Field(default_factory=list)

    def has_role(self, *roles: Union[str, Enum]) -> bool:
        """True if the user holds at least one of ``roles``."""
        wanted = {r.value if isinstance(r, Enum) else r for r in roles}
        return not wanted.isdisjoint(self.roles)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def _is_expired(session_user: Dict[str, Any]) -> bool:
    expires_at = session_user.get("expires_at")
    return expires_at is not None and float(expires_at) <= time.time()


async def get_current_user(
    request: Request,
    repos: ReposDep,
    store: SessionStoreDep,
    auth: AuthClientDep,
) -> CurrentUser:
    """
    Resolve the authenticated user for a request.

    Raises:
        HTTPException: 401 ``Unauthorized`` without credentials, ``Session expired``
            when the token refresh fails and ``Invalid token`` when the provider
            rejects the access token.
    """
    sid = request.cookies.get(settings.session.cookie_name)
    payload = await store.get(sid) if sid else None
    session_user: Dict[str, Any] = (payload or {}).get("user") or {}
    access_token = session_user.get("access_token")

    if not access_token:
        scheme, _, token = request.headers.get("Authorization", "").partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise _unauthorized("Unauthorized")
        access_token = token.strip()
    elif _is_expired(session_user):
        refresh_token = session_user.get("refresh_token")
        if not refresh_token:
            raise _unauthorized("Session expired")
        try:
            refreshed = await auth.refresh_session(refresh_token)
        except SupabaseAuthError as e:
            if e.is_unavailable:
                raise
            logger.info(f"Session refresh rejected: {e.message}")
            raise _unauthorized("Session expired")
        await store.save(sid, {"user": session_payload(refreshed)})
        access_token = refreshed.access_token

    try:
        auth_user = await auth.get_user(access_token)
    except SupabaseAuthError as e:
        if e.is_unavailable:
            raise
        raise _unauthorized("Invalid token")

    # Bearer callers may never have signed in here; give them a local row.
    if await repos.users.get_by_id(auth_user.id) is None:
        await repos.users.upsert(auth_user.id, **profile_from_supabase_user(auth_user))
        logger.info(f"Created local user {auth_user.id} from access token")

    roles = await repos.roles.list_roles(auth_user.id)
    return CurrentUser(id=auth_user.id, email=auth_user.email, roles=roles)


CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]
