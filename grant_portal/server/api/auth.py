"""
Authentication Endpoints.

Sign-up, sign-in, sign-out and token refresh against Supabase Auth, plus the
signed-in user's own profile. Sessions are kept server-side; the browser only
holds the session cookie.
"""

from fastapi import APIRouter, HTTPException, Request, Response, status

from grant_portal.core.database.base import utc_now
from grant_portal.core.logging_config import get_logger
from grant_portal.core.models.domain.enums import UserRoleName
from grant_portal.core.models.io.auth import MessageResponse, SignInRequest, SignUpRequest
from grant_portal.core.models.io.users import ProfileUpdate, UserRead, UserWithRoles
from grant_portal.server.auth.dependencies import AuthClientDep, CurrentUserDep
from grant_portal.server.auth.errors import SupabaseAuthError
from grant_portal.server.auth.sessions import clear_session_cookie, session_payload, set_session_cookie
from grant_portal.server.auth.supabase_client import profile_from_supabase_user
from grant_portal.server.core.config import settings
from grant_portal.server.services.audit import record_audit, snapshot
from grant_portal.server.services.deps import ReposDep, SessionStoreDep

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/signup",
    response_model=MessageResponse,
    summary="Sign Up",
    description="Create a confirmed account and give it the default researcher role.",
    responses={400: {"description": "Rejected by the identity provider"}},
)
async def signup(body: SignUpRequest, repos: ReposDep, auth: AuthClientDep) -> MessageResponse:
    full_name = f"{body.first_name or ''} {body.last_name or ''}".strip()
    try:
        auth_user = await auth.create_user(
            body.email,
            body.password,
            {"first_name": body.first_name, "last_name": body.last_name, "full_name": full_name},
        )
    except SupabaseAuthError as e:
        if e.is_unavailable:
            raise
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    await repos.users.upsert(auth_user.id, **profile_from_supabase_user(auth_user))
    await repos.roles.assign(auth_user.id, UserRoleName.researcher.value)
    logger.info(f"User {auth_user.id} signed up")
    return MessageResponse(message="User created successfully")


@router.post(
    "/signin",
    response_model=MessageResponse,
    summary="Sign In",
    description="Sign in with email and password and start a server-side session.",
    responses={401: {"description": "Invalid credentials"}},
)
async def signin(
    body: SignInRequest,
    request: Request,
    response: Response,
    repos: ReposDep,
    store: SessionStoreDep,
    auth: AuthClientDep,
) -> MessageResponse:
    try:
        auth_session = await auth.sign_in_with_password(body.email, body.password)
    except SupabaseAuthError as e:
        if e.is_unavailable:
            raise
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)

    config = settings.session
    previous_sid = request.cookies.get(config.cookie_name)
    if previous_sid:
        await store.destroy(previous_sid)
    sid = await store.create({"user": session_payload(auth_session)})
    set_session_cookie(response, sid, config)

    await repos.users.upsert(auth_session.user.id, **profile_from_supabase_user(auth_session.user))
    logger.info(f"User {auth_session.user.id} signed in")
    return MessageResponse(message="Signed in successfully")


@router.post("/signout", response_model=MessageResponse, summary="Sign Out")
async def signout(request: Request, response: Response, store: SessionStoreDep) -> MessageResponse:
    """Destroy the current session and clear its cookie."""
    config = settings.session
    sid = request.cookies.get(config.cookie_name)
    if sid:
        await store.destroy(sid)
    clear_session_cookie(response, config)
    return MessageResponse(message="Signed out successfully")


@router.post(
    "/refresh",
    response_model=MessageResponse,
    summary="Refresh Session",
    responses={401: {"description": "No session or refresh rejected"}},
)
async def refresh(request: Request, store: SessionStoreDep, auth: AuthClientDep) -> MessageResponse:
    """Exchange the stored refresh token for a new token pair."""
    sid = request.cookies.get(settings.session.cookie_name)
    payload = await store.get(sid) if sid else None
    session_user = (payload or {}).get("user") or {}
    refresh_token = session_user.get("refresh_token")
    if not refresh_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No refresh token available")

    try:
        auth_session = await auth.refresh_session(refresh_token)
    except SupabaseAuthError as e:
        if e.is_unavailable:
            raise
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Failed to refresh session")

    await store.save(sid, {"user": session_payload(auth_session)})
    return MessageResponse(message="Session refreshed successfully")


@router.get(
    "/user",
    response_model=UserWithRoles,
    summary="Get Current User",
    description="Return the signed-in user's profile and roles. Users without any role get researcher.",
    responses={404: {"description": "No local record for the user"}},
)
async def get_user(user: CurrentUserDep, repos: ReposDep) -> UserWithRoles:
    db_user = await repos.users.get_by_id(user.id)
    if db_user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    roles = list(user.roles)
    if not roles:
        await repos.roles.assign(user.id, UserRoleName.researcher.value)
        roles = [UserRoleName.researcher.value]
    return UserWithRoles(**UserRead.model_validate(db_user).model_dump(), roles=roles)


@router.put("/profile", response_model=UserRead, summary="Update Profile")
async def update_profile(body: ProfileUpdate, user: CurrentUserDep, repos: ReposDep) -> UserRead:
    """Partially update the signed-in user's own profile."""
    db_user = await repos.users.get_by_id(user.id)
    if db_user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    before = snapshot(db_user)
    for field, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(db_user, field, value)
    db_user.updated_at = utc_now()
    db_user = await repos.users.update(db_user)

    await record_audit(
        repos,
        user_id=user.id,
        action="update_profile",
        resource_type="user",
        resource_id=user.id,
        old_values=before,
        new_values=snapshot(db_user),
    )
    return UserRead.model_validate(db_user)
