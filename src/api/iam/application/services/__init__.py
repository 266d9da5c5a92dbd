"""Application services for IAM bounded context."""

from iam.application.services.identity_cache import IdentityCache
from iam.application.services.login_service import LoginService

__all__ = ["IdentityCache", "LoginService"]
