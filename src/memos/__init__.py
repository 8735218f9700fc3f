"""
Memos

A small record-management service for memos: a PostgreSQL-backed repository,
a service layer with validation and partial-update semantics, a JSON API and a
server-rendered front end.
"""

__version__ = "0.1.0"
