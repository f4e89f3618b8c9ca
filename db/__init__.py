"""
db/ - Database Layer
====================
PostgreSQL connection pool and schema creation. Account schedules are
stored as JSONB sub-documents next to the account row.
"""
