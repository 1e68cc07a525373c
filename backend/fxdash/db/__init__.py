"""
Database module for FXDash.

Provides engine construction and the daily price table definitions.
"""

from fxdash.db.database import create_engine, create_engine_from_settings, init_db, close_db
from fxdash.db.models import metadata, price_table

__all__ = [
    "create_engine",
    "create_engine_from_settings",
    "init_db",
    "close_db",
    "metadata",
    "price_table",
]
