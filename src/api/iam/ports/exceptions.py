"""Exceptions for the IAM bounded context.

These exceptions represent failures of the login flow that the presentation
layer maps onto HTTP responses.
"""


class SessionExpiredOrMissingError(Exception):
    """Raised when a callback arrives without pending login state.

    Either the session expired, the cookie never reached us, or the pending
    state was already consumed by an earlier callback (replay).
    """

    pass


class UpstreamExchangeError(Exception):
    """Raised when the authorization code could not be exchanged for a token.

    Covers transport failures and protocol-level errors returned by the
    identity provider's token endpoint.
    """

    pass
