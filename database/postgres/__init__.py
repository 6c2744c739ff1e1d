"""
Database 패키지 초기화
"""

from database.postgres.models import Base, Goal
from database.postgres.core.connection import (
    create_db_engine,
    create_session_factory,
    init_db,
    session_scope,
)
from database.postgres import crud

__all__ = [
    "Base",
    "Goal",
    "create_db_engine",
    "create_session_factory",
    "init_db",
    "session_scope",
    "crud",
]
