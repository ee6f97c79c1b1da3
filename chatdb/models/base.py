"""
Base models and helpers for SQLAlchemy ORM.

Provides the declarative base shared by all tables, plus the timestamp
helpers that keep stored ISO strings comparable.
"""

from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, String
from sqlalchemy.orm import declarative_base


# SQLAlchemy declarative base for all ORM models
Base = declarative_base()


def to_iso(value: datetime) -> str:
    """
    Serialize a datetime to the canonical stored form.

    Args:
        value: Datetime to serialize. Naive values are taken as UTC.

    Returns:
        UTC ISO-8601 string with microseconds, e.g.
        "2026-10-19T10:30:45.123456+00:00"

    Note:
        Timestamps are stored as strings, so range filters (gt/gte) compare
        them lexicographically. A single fixed format keeps that ordering
        identical to chronological ordering.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def utc_now_iso() -> str:
    """
    Get current UTC timestamp in canonical ISO format.

    Returns:
        ISO format timestamp string (see to_iso)
    """
    return to_iso(datetime.now(timezone.utc))


def new_uuid() -> str:
    return str(uuid.uuid4())


class CreatedAtMixin:
    """
    Mixin that adds the createdAt column.

    Uses TEXT type so the local store behaves like the remote one, which
    hands timestamps back as ISO strings.
    """

    createdAt = Column(
        String,
        nullable=False,
        default=utc_now_iso,
        doc="UTC timestamp when the row was created"
    )

