"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request tracing), exception handlers and monitoring, and includes all API
routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from grant_portal.core.database import async_session_maker, init_db
from grant_portal.core.database.repositories.sessions import WebSessionRepository
from grant_portal.core.logging_config import get_logger, setup_logging
from grant_portal.core.monitoring import initialize_logfire

from .api import (
    attachments,
    auth,
    awards,
    budget,
    calls,
    dashboard,
    decisions,
    health,
    proposals,
    reviews,
    team,
    users,
)
from .auth.sessions import SessionStore
from .auth.supabase_client import close_auth_client
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Startup prepares the database and drops expired sessions; shutdown closes
    the identity provider client.
    """
    try:
        logger.info("Starting up Grant Portal Server...")
        await init_db()
        async with async_session_maker() as session:
            store = SessionStore(WebSessionRepository(session), settings.session.ttl_seconds)
            await store.purge_expired()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    logger.info("Shutting down Grant Portal Server...")
    await close_auth_client()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Grant Portal API

    Backend for research grant management: calls for proposals, proposal
    submission and budgets, peer review and decisions, awards with their
    milestones, disbursements and progress reports.
    """,
    version=constant.API_VERSION,
    openapi_url=f"{constant.API_PREFIX}/openapi.json",
    docs_url=f"{constant.API_PREFIX}/docs",
    redoc_url=f"{constant.API_PREFIX}/redoc",
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)
initialize_logfire(app)

API = constant.API_PREFIX

app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix=f"{API}/auth", tags=["auth"])
app.include_router(users.router, prefix=f"{API}/users", tags=["users"])
app.include_router(calls.router, prefix=f"{API}/calls", tags=["calls"])
app.include_router(proposals.router, prefix=f"{API}/proposals", tags=["proposals"])
app.include_router(team.router, prefix=API, tags=["team"])
app.include_router(budget.router, prefix=API, tags=["budget"])
app.include_router(reviews.router, prefix=API, tags=["reviews"])
app.include_router(decisions.router, prefix=API, tags=["decisions"])
app.include_router(awards.router, prefix=f"{API}/awards", tags=["awards"])
app.include_router(attachments.router, prefix=API, tags=["attachments"])
app.include_router(dashboard.router, prefix=f"{API}/dashboard", tags=["dashboard"])
