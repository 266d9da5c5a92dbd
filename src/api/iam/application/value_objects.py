"""Application-layer value objects for the IAM bounded context.

Outcomes of a login callback. Rejection is an expected result rather than an
exception, so the callback route can branch on it without try/except.
"""

from __future__ import annotations

from dataclasses import dataclass

from shared_kernel.auth import Identity

STATE_MISMATCH = "state_mismatch"


@dataclass(frozen=True)
class LoginSucceeded:
    """The callback produced a verified identity."""

    identity: Identity
    return_path: str | None = None


@dataclass(frozen=True)
class LoginRejected:
    """The callback was refused.

    Attributes:
        reason: ``state_mismatch`` or the token verification failure reason
    """

    reason: str


LoginOutcome = LoginSucceeded | LoginRejected
