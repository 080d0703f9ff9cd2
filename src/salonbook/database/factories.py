"""Database factory functions for creating store instances."""

import os
from pathlib import Path
from typing import Optional

from salonbook.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV = "SALONBOOK_DB_PATH"


def create_memory_database() -> SQLAlchemyDatabase:
    """Create a fresh in-memory store.

    Each call returns an independent store; nothing survives the process.
    """
    return SQLAlchemyDatabase("sqlite://")


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite-file store.

    Args:
        database_path: Path to SQLite database file. If None, checks SALONBOOK_DB_PATH
            environment variable, then defaults to ~/.salonbook/salonbook.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV)

    if database_path is None:
        db_dir = Path.home() / ".salonbook"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "salonbook.db")

    return SQLAlchemyDatabase(f"sqlite:///{database_path}")
