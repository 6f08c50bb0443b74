# -*- coding: utf-8 -*-
"""
ipn_listener/shared/database/__init__.py

Capa de acceso a datos (SQLAlchemy async).
"""

from .base import Base, NAMING_CONVENTION
from .repository import BaseRepository
from .database import (
    get_engine,
    get_session_factory,
    check_database_health,
    dispose_engine,
)

__all__ = [
    "Base",
    "NAMING_CONVENTION",
    "BaseRepository",
    "get_engine",
    "get_session_factory",
    "check_database_health",
    "dispose_engine",
]

# Fin del archivo ipn_listener/shared/database/__init__.py
