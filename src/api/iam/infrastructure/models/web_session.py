"""SQLAlchemy ORM model for the web_sessions table.

Server-side storage for browser sessions: pending login state and the
logged-in identity id.
"""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base


class WebSessionModel(Base):
    """ORM model for web_sessions table."""

    __tablename__ = "web_sessions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    data: Mapped[dict[str, str]] = mapped_column(JSONB, nullable=False, default=dict)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )

    def __repr__(self) -> str:
        """Return string representation without session values."""
        return f"<WebSessionModel(expires_at={self.expires_at})>"
