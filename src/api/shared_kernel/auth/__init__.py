"""Authentication shared kernel module."""

from shared_kernel.auth.identity import Capability, Identity
from shared_kernel.auth.jwks import JWKSProvider, JWKSUnavailableError
from shared_kernel.auth.observability import (
    DefaultSigningKeysProbe,
    DefaultTokenVerifierProbe,
    SigningKeysProbe,
    TokenVerifierProbe,
)
from shared_kernel.auth.token_verifier import (
    AudienceMismatchError,
    DisallowedAlgorithmError,
    InvalidKeyMaterialError,
    InvalidTokenError,
    IssuerMismatchError,
    MalformedTokenError,
    MissingClaimError,
    MissingKeyIdError,
    SignatureInvalidError,
    SigningKeySource,
    TokenExpiredError,
    TokenVerifier,
    UnknownKeyIdError,
)

__all__ = [
    "AudienceMismatchError",
    "Capability",
    "DefaultSigningKeysProbe",
    "DefaultTokenVerifierProbe",
    "DisallowedAlgorithmError",
    "Identity",
    "InvalidKeyMaterialError",
    "InvalidTokenError",
    "IssuerMismatchError",
    "JWKSProvider",
    "JWKSUnavailableError",
    "MalformedTokenError",
    "MissingClaimError",
    "MissingKeyIdError",
    "SignatureInvalidError",
    "SigningKeySource",
    "SigningKeysProbe",
    "TokenExpiredError",
    "TokenVerifier",
    "TokenVerifierProbe",
    "UnknownKeyIdError",
]
