"""SQLAlchemy model for password reset records."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from keyhold_identity.domain.shared.time import utc_now
from keyhold_identity.infrastructure.persistence.sqlalchemy.base import Base


class PasswordResetModel(Base):
    __tablename__ = "password_resets"
    __table_args__ = (
        Index("ix_password_resets_email", "email"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    token_hash: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<PasswordResetModel(id={self.id})>"
