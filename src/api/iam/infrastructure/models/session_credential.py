"""SQLAlchemy ORM model for the session_credentials table.

Maps an identity id to the last bearer token the identity logged in with.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class SessionCredentialModel(Base, TimestampMixin):
    """ORM model for session_credentials table.

    Notes:
    - identity_id is VARCHAR(255) to accommodate external SSO subject ids
    - access_token is sized for Keycloak tokens carrying many roles
    """

    __tablename__ = "session_credentials"

    identity_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    access_token: Mapped[str] = mapped_column(String(10240), nullable=False)

    def __repr__(self) -> str:
        """Return string representation without the token."""
        return f"<SessionCredentialModel(identity_id={self.identity_id})>"
