"""SQLAlchemy ORM model for the species table.

Append-only reference data: rows are inserted the first time the recognizer
reports a species and never updated.
"""

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, utc_now


class SpeciesModel(Base):
    """ORM model for species table.

    Notes:
    - taxonomy_id is the POWO id (e.g. ``urn:lsid:ipni.org:names:...``),
      the natural primary key
    - habitat holds ``indoor``/``outdoor`` or NULL when unknown
    """

    __tablename__ = "species"

    taxonomy_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    gbif_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    common_name: Mapped[str] = mapped_column(String(255), nullable=False)
    scientific_name: Mapped[str] = mapped_column(String(255), nullable=False)
    habitat: Mapped[str | None] = mapped_column(String(16), nullable=True)
    produces_fruit: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=utc_now,
        nullable=False,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<SpeciesModel(taxonomy_id={self.taxonomy_id}, "
            f"scientific_name={self.scientific_name})>"
        )
