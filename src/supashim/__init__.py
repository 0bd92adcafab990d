"""
Supashim - Knex-style query builder on top of Supabase.

Lets controllers written against a SQL query builder keep working
after the database moved to a hosted Supabase project.
"""

__version__ = "1.0.0"
