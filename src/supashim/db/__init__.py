"""
Supashim - Database access.

Knex-style query building over a Supabase client.
"""

from supashim.db.builder import QueryBuilder
from supashim.db.shim import Database, db, get_db

__all__ = [
    "Database",
    "QueryBuilder",
    "db",
    "get_db",
]
