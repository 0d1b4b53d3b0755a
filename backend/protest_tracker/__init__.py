"""
Protest Tracker API.

FastAPI service backed by PostgreSQL through async SQLAlchemy.
"""

__version__ = "1.0.0"
