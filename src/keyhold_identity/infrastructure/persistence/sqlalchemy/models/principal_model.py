"""SQLAlchemy model for Principal aggregate."""

from typing import Optional
from uuid import UUID

from sqlalchemy import Boolean, Index, String, Text, Uuid, true
from sqlalchemy.orm import Mapped, mapped_column

from keyhold_identity.infrastructure.persistence.sqlalchemy.base import (
    Base,
    TimestampMixin,
)


class PrincipalModel(Base, TimestampMixin):
    """SQLAlchemy model for persisting principals together with their hash."""

    __tablename__ = "principals"
    __table_args__ = (
        Index("ux_principals_external_id", "external_id", unique=True),
        Index("ix_principals_active", "active"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(50), default="user", nullable=False)
    active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        server_default=true(),
        nullable=False,
    )
    external_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<PrincipalModel(id={self.id}, email={self.email}, role={self.role})>"
