"""
Database package for the AI Learning Service.

Relational storage for projects, discovered functions and generated plugins.
"""

from .models import Base, Project, FunctionMap, PluginConfig, PROJECT_TYPES, PROJECT_STATUSES
from .database import (
    engine,
    SessionLocal,
    get_db,
    init_db,
    create_tables,
    get_session,
    check_db_connection,
    check_db_connection_with_retry,
)

__all__ = [
    "Base",
    "Project",
    "FunctionMap",
    "PluginConfig",
    "PROJECT_TYPES",
    "PROJECT_STATUSES",
    "engine",
    "SessionLocal",
    "get_db",
    "init_db",
    "create_tables",
    "get_session",
    "check_db_connection",
    "check_db_connection_with_retry",
]
