"""
Service Dependencies.

Provides the repository bundle and session store to API endpoints, built on
the request-scoped database session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from grant_portal.core.database import get_session
from grant_portal.core.database.repositories import RepoBundle, build_repos
from grant_portal.server.auth.sessions import SessionStore
from grant_portal.server.core.config import UploadConfig, settings


async def get_repos(session: AsyncSession = Depends(get_session)) -> RepoBundle:
    return build_repos(session)


ReposDep = Annotated[RepoBundle, Depends(get_repos)]


async def get_session_store(repos: ReposDep) -> SessionStore:
    return SessionStore(repos.sessions, settings.session.ttl_seconds)


SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]


def get_upload_config() -> UploadConfig:
    return settings.uploads


UploadConfigDep = Annotated[UploadConfig, Depends(get_upload_config)]
