"""SQLAlchemy model for session tokens."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from keyhold_identity.infrastructure.persistence.sqlalchemy.base import (
    Base,
    TimestampMixin,
)


class SessionTokenModel(Base, TimestampMixin):
    __tablename__ = "session_tokens"
    __table_args__ = (
        Index("ix_session_tokens_principal_id", "principal_id"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    principal_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("principals.id", ondelete="CASCADE"),
        nullable=False,
    )
    label: Mapped[str] = mapped_column(String(100), nullable=False)
    token: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    last_used_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<SessionTokenModel(id={self.id}, principal_id={self.principal_id}, "
            f"label={self.label})>"
        )
