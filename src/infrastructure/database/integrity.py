"""Helpers for classifying database integrity errors."""

from sqlalchemy.exc import IntegrityError


def is_unique_violation(error: IntegrityError) -> bool:
    """True when an IntegrityError comes from a unique or primary key constraint.

    Postgres reports "duplicate key value violates unique constraint",
    SQLite reports "UNIQUE constraint failed".
    """
    message = str(error.orig).lower()
    return "unique" in message or "duplicate key" in message
