"""Ports (interfaces) for IAM bounded context.

Ports define the contracts for repositories and external collaborators
without specifying implementation details. This allows for dependency
inversion and keeps the application layer independent of infrastructure.
"""

from iam.ports.exceptions import SessionExpiredOrMissingError, UpstreamExchangeError
from iam.ports.identity_provider import IIdentityProvider
from iam.ports.repositories import ISessionCredentialRepository
from iam.ports.session_store import ISessionStore

__all__ = [
    "IIdentityProvider",
    "ISessionCredentialRepository",
    "ISessionStore",
    "SessionExpiredOrMissingError",
    "UpstreamExchangeError",
]
