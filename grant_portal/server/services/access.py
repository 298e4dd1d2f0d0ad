"""
Role-based access rules.

Route-level checks use ``require_roles``; record-level checks (ownership of a
proposal or award) use the ``can_*`` predicates and ``ensure_*`` helpers,
which raise ``PermissionDeniedError``.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Callable, Optional, Union

from fastapi import Depends, HTTPException, status

from grant_portal.core.database.entities import Award, Proposal
from grant_portal.core.errors import InvalidStateError, PermissionDeniedError
from grant_portal.core.models.domain.enums import ProposalStatus, UserRoleName
from grant_portal.server.auth.dependencies import CurrentUser, CurrentUserDep

MANAGER_ROLES = frozenset({UserRoleName.grant_manager.value, UserRoleName.super_admin.value})

OVERSIGHT_ROLES = MANAGER_ROLES | {
    UserRoleName.reviewer.value,
    UserRoleName.finance_officer.value,
    UserRoleName.ethics_officer.value,
    UserRoleName.auditor.value,
}

AWARD_VIEW_ROLES = MANAGER_ROLES | {UserRoleName.finance_officer.value, UserRoleName.auditor.value}

FINANCE_ROLES = MANAGER_ROLES | {UserRoleName.finance_officer.value}

REVIEW_ROLES = MANAGER_ROLES | {UserRoleName.reviewer.value}


def require_roles(*roles: Union[str, Enum]) -> Callable:
    """Build a dependency that admits only users holding one of ``roles``.

    Raises:
        HTTPException: 403 ``Access denied`` for everyone else
    """
    allowed = frozenset(r.value if isinstance(r, Enum) else r for r in roles)

    async def _require(user: CurrentUserDep) -> CurrentUser:
        if not user.has_role(*allowed):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
        return user

    return _require


ManagerDep = Annotated[CurrentUser, Depends(require_roles(*MANAGER_ROLES))]
SuperAdminDep = Annotated[CurrentUser, Depends(require_roles(UserRoleName.super_admin))]
FinanceDep = Annotated[CurrentUser, Depends(require_roles(*FINANCE_ROLES))]
ReviewerDep = Annotated[CurrentUser, Depends(require_roles(*REVIEW_ROLES))]


def is_manager(user: CurrentUser) -> bool:
    return user.has_role(*MANAGER_ROLES)


def scope_to_own(user: CurrentUser) -> bool:
    """True when list endpoints must only show the user's own records."""
    return user.has_role(UserRoleName.researcher) and not is_manager(user)


def can_view_proposal(user: CurrentUser, proposal: Proposal) -> bool:
    return proposal.pi_user_id == user.id or user.has_role(*OVERSIGHT_ROLES)


def can_edit_proposal(user: CurrentUser, proposal: Proposal) -> bool:
    return proposal.pi_user_id == user.id or is_manager(user)


def can_view_award(user: CurrentUser, award: Award, proposal: Optional[Proposal]) -> bool:
    is_pi = proposal is not None and proposal.pi_user_id == user.id
    return is_pi or user.has_role(*AWARD_VIEW_ROLES)


def ensure_can_view_proposal(user: CurrentUser, proposal: Proposal) -> None:
    if not can_view_proposal(user, proposal):
        raise PermissionDeniedError()


def ensure_can_edit_proposal(user: CurrentUser, proposal: Proposal) -> None:
    """Editors only; a PI without a manager role may only change drafts.

    Raises:
        PermissionDeniedError: The user is neither the PI nor a manager
        InvalidStateError: The PI edits a proposal that is no longer a draft
    """
    if not can_edit_proposal(user, proposal):
        raise PermissionDeniedError()
    if not is_manager(user) and proposal.status != ProposalStatus.draft.value:
        raise InvalidStateError("Proposal can only be changed while it is a draft")
