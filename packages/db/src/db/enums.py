# This project was developed with assistance from AI tools.
"""
Domain enums for social-assistance case management.

Shared domain types used by both SQLAlchemy models (db package)
and Pydantic schemas (api package).
"""

import enum


class UnitKind(str, enum.Enum):
    SPECIALIZED = "SPECIALIZED"
    TERRITORIAL = "TERRITORIAL"
    OVERSIGHT = "OVERSIGHT"


class UserRole(str, enum.Enum):
    SUPERVISORY = "supervisory"
    OVERSIGHT = "oversight"
    TERRITORIAL_UNIT = "territorial_unit_role"
    SPECIALIZED_UNIT = "specialized_unit_role"
    OTHER = "other"


class CaseStatus(str, enum.Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    CLOSED = "closed"


class ForwardingStatus(str, enum.Enum):
    PENDING = "pending"
    DELIVERED = "delivered"
    RETURNED = "returned"
