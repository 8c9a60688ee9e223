"""
db/ - Database Layer
====================
Owns the PostgreSQL connection pool, the schema bootstrap and the DataStore
that every query goes through.
"""
