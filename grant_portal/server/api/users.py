"""
User Role Endpoints.

Super admins assign and revoke roles; users may read their own.
"""

from fastapi import APIRouter, HTTPException, Response, status

from grant_portal.core.models.domain.enums import UserRoleName
from grant_portal.core.models.io.users import RoleAssign, UserRolesRead
from grant_portal.server.auth.dependencies import CurrentUserDep
from grant_portal.server.services.access import SuperAdminDep
from grant_portal.server.services.audit import record_audit
from grant_portal.server.services.deps import ReposDep

router = APIRouter()


@router.get(
    "/{user_id}/roles",
    response_model=UserRolesRead,
    summary="List User Roles",
    responses={403: {"description": "Not a super admin and not the user"}},
)
async def list_user_roles(user_id: str, user: CurrentUserDep, repos: ReposDep) -> UserRolesRead:
    if user.id != user_id and not user.has_role(UserRoleName.super_admin):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return UserRolesRead(user_id=user_id, roles=await repos.roles.list_roles(user_id))


@router.post(
    "/{user_id}/roles",
    response_model=UserRolesRead,
    summary="Assign Role",
    description="Give a role to a user. Assigning a role the user already holds is a no-op.",
    responses={404: {"description": "User not found"}},
)
async def assign_role(user_id: str, body: RoleAssign, admin: SuperAdminDep, repos: ReposDep) -> UserRolesRead:
    if await repos.users.get_by_id(user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if await repos.roles.assign(user_id, body.role.value):
        await record_audit(
            repos,
            user_id=admin.id,
            action="assign_role",
            resource_type="user",
            resource_id=user_id,
            new_values={"role": body.role.value},
        )
    return UserRolesRead(user_id=user_id, roles=await repos.roles.list_roles(user_id))


@router.delete(
    "/{user_id}/roles/{role}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Revoke Role",
    responses={404: {"description": "The user does not hold the role"}},
)
async def revoke_role(user_id: str, role: UserRoleName, admin: SuperAdminDep, repos: ReposDep) -> Response:
    if not await repos.roles.revoke(user_id, role.value):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Role assignment not found")
    await record_audit(
        repos,
        user_id=admin.id,
        action="revoke_role",
        resource_type="user",
        resource_id=user_id,
        old_values={"role": role.value},
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
