"""SQLAlchemy ORM models for IAM bounded context.

These models map to database tables and are used by repository implementations.
"""

from iam.infrastructure.models.session_credential import SessionCredentialModel
from iam.infrastructure.models.web_session import WebSessionModel

__all__ = [
    "SessionCredentialModel",
    "WebSessionModel",
]
