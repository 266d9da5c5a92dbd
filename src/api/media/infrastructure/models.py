"""SQLAlchemy ORM model for the images table.

Stores who uploaded an image and when; the bytes live in the object store
under the same key.
"""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base


class ImageModel(Base):
    """ORM model for images table.

    Notes:
    - key is VARCHAR(26) for ULID format
    - owner_id is VARCHAR(255) to match external SSO subject ids; nullable
      for images whose uploader is unknown
    """

    __tablename__ = "images"

    key: Mapped[str] = mapped_column(String(26), primary_key=True)
    owner_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<ImageModel(key={self.key}, owner_id={self.owner_id})>"
