"""Pydantic models for authentication API responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from shared_kernel.auth import Identity


class IdentityResponse(BaseModel):
    """Response model for the current identity."""

    id: str = Field(..., description="Identity id (the token subject)")
    name: str = Field(..., description="Display name")
    email: str | None = Field(default=None, description="Email address")
    roles: list[str] = Field(default_factory=list, description="Realm roles")
    capabilities: list[str] = Field(
        default_factory=list, description="Capabilities granted by the roles"
    )

    @classmethod
    def from_domain(cls, identity: Identity) -> IdentityResponse:
        """Convert a domain Identity to an API response.

        Args:
            identity: Verified identity

        Returns:
            IdentityResponse
        """
        return cls(
            id=identity.id,
            name=identity.name,
            email=identity.email,
            roles=list(identity.realm_roles),
            capabilities=sorted(c.value for c in identity.capabilities),
        )
