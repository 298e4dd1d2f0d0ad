"""
Database layer for Grant Portal.

Structure:
- entities/: SQLModel table models, one module per aggregate
- repositories/: async data access classes over the entities
- session.py: global engine and session factory management
- utils.py: engine/session factory helpers
"""

from .base import Base, new_id, utc_now
from .session import (
    async_session_maker,
    engine,
    get_session,
    init_db,
)
from .utils import (
    create_all,
    create_engine,
    create_sessionmaker,
)

__all__ = [
    "Base",
    "async_session_maker",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "engine",
    "get_session",
    "init_db",
    "new_id",
    "utc_now",
]
