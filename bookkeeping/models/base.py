"""
Declarative base for all models.

Engine and session lifecycle live in bookkeeping.store so that
importing a model never opens a database connection.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
