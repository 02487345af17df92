"""SQLAlchemy model for applied schema migrations."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from keyhold_identity.domain.shared.time import utc_now
from keyhold_identity.infrastructure.persistence.sqlalchemy.base import Base


class MigrationModel(Base):
    """One row per applied migration. The unique name is the race backstop."""

    __tablename__ = "migrations"

    # Autoincrement id doubles as application order
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    executed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<MigrationModel(name={self.name})>"
