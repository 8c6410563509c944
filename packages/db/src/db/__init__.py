# This project was developed with assistance from AI tools.
__version__ = "0.1.0"

from .database import Base, dispose_engine, engine
from .enums import CaseStatus, ForwardingStatus, UnitKind, UserRole
from .models import (
    CASE_CHILD_MODELS,
    AccessLog,
    Attachment,
    Benefit,
    Case,
    FollowUp,
    Forwarding,
    Unit,
    User,
)

__all__ = [
    "Base",
    "dispose_engine",
    "engine",
    "__version__",
    # Enums
    "CaseStatus",
    "ForwardingStatus",
    "UnitKind",
    "UserRole",
    # Models
    "AccessLog",
    "Attachment",
    "Benefit",
    "Case",
    "FollowUp",
    "Forwarding",
    "Unit",
    "User",
    "CASE_CHILD_MODELS",
]
