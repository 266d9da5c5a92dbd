"""Bearer token verification against the identity provider's signing keys.

Validates signature, expiry, audience and (optionally) issuer, then turns the
claims into an Identity. Each failure mode raises its own InvalidTokenError
subclass so callers and logs can tell them apart.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Mapping, Protocol

from jose import jwk, jwt
from jose.exceptions import ExpiredSignatureError, JWKError, JWTClaimsError, JWTError
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from shared_kernel.auth.identity import Capability, Identity

if TYPE_CHECKING:
    from shared_kernel.auth.observability import TokenVerifierProbe

DEFAULT_ALGORITHMS = ("RS256", "RS384", "RS512", "PS256", "ES256")


class InvalidTokenError(Exception):
    """Raised when a bearer token fails verification."""

    reason = "invalid_token"


class MalformedTokenError(InvalidTokenError):
    reason = "malformed_token"


class MissingKeyIdError(InvalidTokenError):
    reason = "missing_key_id"


class DisallowedAlgorithmError(InvalidTokenError):
    reason = "disallowed_algorithm"


class UnknownKeyIdError(InvalidTokenError):
    reason = "unknown_key_id"


class InvalidKeyMaterialError(InvalidTokenError):
    reason = "invalid_key_material"


class SignatureInvalidError(InvalidTokenError):
    reason = "signature_invalid"


class TokenExpiredError(InvalidTokenError):
    reason = "token_expired"


class AudienceMismatchError(InvalidTokenError):
    reason = "audience_mismatch"


class IssuerMismatchError(InvalidTokenError):
    reason = "issuer_mismatch"


class MissingClaimError(InvalidTokenError):
    reason = "missing_claim"


class SigningKeySource(Protocol):
    """Anything that can resolve a key id to a JWK."""

    async def get_key(self, key_id: str) -> dict[str, Any] | None: ...


class _RealmAccess(BaseModel):
    model_config = ConfigDict(extra="ignore")

    roles: list[str] = Field(default_factory=list)


class _IdentityClaims(BaseModel):
    """Claims the application reads; everything else is ignored."""

    model_config = ConfigDict(extra="ignore")

    sub: str | None = None
    name: str | None = None
    preferred_username: str | None = None
    email: str | None = None
    realm_roles: list[str] = Field(default_factory=list)
    realm_access: _RealmAccess | None = None

    def roles(self) -> tuple[str, ...]:
        if self.realm_roles:
            return tuple(self.realm_roles)
        if self.realm_access is not None:
            return tuple(self.realm_access.roles)
        return ()


class TokenVerifier:
    """Verifies bearer tokens and extracts the caller's Identity."""

    def __init__(
        self,
        keys: SigningKeySource,
        audience: str,
        probe: TokenVerifierProbe,
        issuer: str | None = None,
        allowed_algorithms: Iterable[str] = DEFAULT_ALGORITHMS,
        role_capabilities: Mapping[str, Capability] | None = None,
    ):
        """Initialize the verifier.

        Args:
            keys: Source of signing keys (usually a JWKSProvider).
            audience: Required ``aud`` value.
            probe: Observability probe for verification events.
            issuer: Required ``iss`` value, or None to skip the check.
            allowed_algorithms: Algorithms accepted in the token header.
            role_capabilities: Realm role name to capability mapping.
        """
        self._keys = keys
        self._audience = audience
        self._probe = probe
        self._issuer = issuer.rstrip("/") if issuer else None
        self._allowed_algorithms = frozenset(allowed_algorithms)
        self._role_capabilities = dict(role_capabilities or {})

    async def verify(self, token: str) -> Identity:
        """Verify a token and return the Identity it carries.

        Args:
            token: The encoded JWT.

        Returns:
            Identity whose id equals the token's ``sub`` claim.

        Raises:
            InvalidTokenError: A subclass naming the failed check.
            JWKSUnavailableError: If no signing keys could be loaded.
        """
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            raise self._reject(MalformedTokenError(f"Invalid token format: {e}")) from e

        key_id = header.get("kid")
        if not key_id:
            raise self._reject(MissingKeyIdError("Token header has no key id"))

        algorithm = header.get("alg")
        if algorithm not in self._allowed_algorithms:
            raise self._reject(
                DisallowedAlgorithmError(f"Algorithm not allowed: {algorithm}"),
                key_id,
            )

        key_data = await self._keys.get_key(key_id)
        if key_data is None:
            raise self._reject(UnknownKeyIdError(f"Unknown key id: {key_id}"), key_id)

        try:
            key = jwk.construct(key_data, algorithm=algorithm)
        except (JWKError, ValueError, TypeError, KeyError) as e:
            raise self._reject(
                InvalidKeyMaterialError(f"Invalid signing key: {e}"), key_id
            ) from e

        claims = self._decode(token, key, algorithm, key_id)

        try:
            parsed = _IdentityClaims.model_validate(claims)
        except ValidationError as e:
            raise self._reject(
                MalformedTokenError(f"Invalid identity claims: {e}"), key_id
            ) from e

        if not parsed.sub:
            raise self._reject(MissingClaimError("Missing required claim: sub"), key_id)

        roles = parsed.roles()
        identity = Identity(
            id=parsed.sub,
            name=parsed.name or parsed.preferred_username or parsed.sub,
            email=parsed.email,
            realm_roles=roles,
            capabilities=frozenset(
                self._role_capabilities[role]
                for role in roles
                if role in self._role_capabilities
            ),
        )
        self._probe.token_verified(identity_id=identity.id, key_id=key_id)
        return identity

    def _decode(self, token: str, key: Any, algorithm: str, key_id: str) -> dict:
        try:
            return jwt.decode(
                token=token,
                key=key,
                algorithms=[algorithm],
                audience=self._audience,
                issuer=self._issuer,
                options={
                    "verify_signature": True,
                    "verify_aud": True,
                    "verify_iss": self._issuer is not None,
                    "verify_exp": True,
                    "require_aud": True,
                    "require_exp": True,
                },
            )
        except ExpiredSignatureError as e:
            raise self._reject(TokenExpiredError("Token has expired"), key_id) from e
        except JWTClaimsError as e:
            error_msg = str(e).lower()
            if "audience" in error_msg:
                raise self._reject(
                    AudienceMismatchError("Invalid audience claim"), key_id
                ) from e
            if "issuer" in error_msg:
                raise self._reject(
                    IssuerMismatchError("Invalid issuer claim"), key_id
                ) from e
            raise self._reject(
                InvalidTokenError(f"Invalid token claims: {e}"), key_id
            ) from e
        except JWTError as e:
            error_msg = str(e).lower()
            if "signature" in error_msg:
                raise self._reject(
                    SignatureInvalidError("Invalid token signature"), key_id
                ) from e
            if '"aud"' in error_msg:
                raise self._reject(
                    AudienceMismatchError("Missing audience claim"), key_id
                ) from e
            raise self._reject(MalformedTokenError(f"Invalid token: {e}"), key_id) from e

    def _reject(
        self, error: InvalidTokenError, key_id: str | None = None
    ) -> InvalidTokenError:
        self._probe.token_rejected(reason=error.reason, key_id=key_id)
        return error
