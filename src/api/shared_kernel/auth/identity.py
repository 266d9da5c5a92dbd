"""Identity value objects shared by every bounded context."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class Capability(StrEnum):
    """Privileges derived from realm roles at verification time."""

    ADMIN = "admin"


@dataclass(frozen=True)
class Identity:
    """A verified user, reconstructed from a bearer token on each request.

    Attributes:
        id: The token's ``sub`` claim
        name: Display name
        email: Email address, when the token carries one
        realm_roles: Realm-level role names as issued by the identity provider
        capabilities: Capabilities the roles grant in this application
    """

    id: str
    name: str
    email: str | None = None
    realm_roles: tuple[str, ...] = ()
    capabilities: frozenset[Capability] = field(default_factory=frozenset)

    def has(self, capability: Capability) -> bool:
        """Check whether this identity holds the given capability."""
        return capability in self.capabilities
