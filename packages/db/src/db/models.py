# This project was developed with assistance from AI tools.
"""
Case registry -- domain models

Organizational units, staff accounts, assistance cases and the child
records that hang off a case (forwardings, attachments, follow-ups,
benefits), plus the access log.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base
from .enums import CaseStatus, ForwardingStatus, UnitKind, UserRole


class Unit(Base):
    """Organizational unit that owns cases."""

    __tablename__ = "units"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)
    kind = Column(Enum(UnitKind, name="unit_kind", native_enum=False), nullable=False)

    def __repr__(self):
        return f"<Unit(id={self.id}, kind='{self.kind}')>"


class User(Base):
    """Staff account. ``unit_id`` is the home unit carried in issued tokens."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False, default=UserRole.OTHER.value)
    unit_id = Column(Integer, ForeignKey("units.id", ondelete="SET NULL"), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"


class Case(Base):
    """Assistance case. A null ``unit_id`` marks an unassigned legacy record."""

    __tablename__ = "cases"

    id = Column(Integer, primary_key=True, autoincrement=True)
    unit_id = Column(Integer, ForeignKey("units.id", ondelete="SET NULL"), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    cpf = Column(String(14), nullable=True)
    nis = Column(String(14), nullable=True)
    status = Column(
        Enum(CaseStatus, name="case_status", native_enum=False),
        nullable=False,
        default=CaseStatus.ACTIVE,
    )
    payload = Column(JSON, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    forwardings = relationship("Forwarding", back_populates="case", cascade="all, delete-orphan")
    attachments = relationship("Attachment", back_populates="case", cascade="all, delete-orphan")
    follow_ups = relationship("FollowUp", back_populates="case", cascade="all, delete-orphan")
    benefits = relationship("Benefit", back_populates="case", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Case(id={self.id}, unit_id={self.unit_id})>"


class Forwarding(Base):
    """Referral of a case to another service in the network."""

    __tablename__ = "forwardings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    case_id = Column(Integer, ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    destination = Column(String(255), nullable=False)
    reason = Column(Text, nullable=True)
    status = Column(
        Enum(ForwardingStatus, name="forwarding_status", native_enum=False),
        nullable=False,
        default=ForwardingStatus.PENDING,
    )
    sent_at = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    case = relationship("Case", back_populates="forwardings")

    def __repr__(self):
        return f"<Forwarding(id={self.id}, case_id={self.case_id})>"


class Attachment(Base):
    """File metadata attached to a case. Content lives in object storage."""

    __tablename__ = "attachments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    case_id = Column(Integer, ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    file_name = Column(String(255), nullable=False)
    content_type = Column(String(100), nullable=True)
    storage_key = Column(String(500), nullable=False)
    uploaded_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    case = relationship("Case", back_populates="attachments")

    def __repr__(self):
        return f"<Attachment(id={self.id}, case_id={self.case_id})>"


class FollowUp(Base):
    """Technical follow-up note recorded against a case."""

    __tablename__ = "follow_ups"

    id = Column(Integer, primary_key=True, autoincrement=True)
    case_id = Column(Integer, ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    note = Column(Text, nullable=False)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    case = relationship("Case", back_populates="follow_ups")

    def __repr__(self):
        return f"<FollowUp(id={self.id}, case_id={self.case_id})>"


class Benefit(Base):
    """Eventual benefit granted to a case."""

    __tablename__ = "benefits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    case_id = Column(Integer, ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    benefit_type = Column(String(100), nullable=False)
    amount = Column(Numeric(10, 2), nullable=True)
    granted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    case = relationship("Case", back_populates="benefits")

    def __repr__(self):
        return f"<Benefit(id={self.id}, case_id={self.case_id})>"


class AccessLog(Base):
    """Append-only record of case reads and access denials."""

    __tablename__ = "access_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=True, index=True)
    username = Column(String(100), nullable=True)
    action = Column(String(50), nullable=False, index=True)
    details = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<AccessLog(id={self.id}, action='{self.action}')>"


# Tables that reference a case only through ``case_id``. Ownership checks
# for these items resolve the parent case before applying the unit filter.
CASE_CHILD_MODELS = (Forwarding, Attachment, FollowUp, Benefit)
