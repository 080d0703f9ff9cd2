"""Database layer for salonbook."""

from salonbook.database.base import Database
from salonbook.database.factories import create_memory_database, create_sqlite_database

__all__ = ["Database", "create_memory_database", "create_sqlite_database"]
