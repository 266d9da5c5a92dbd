"""Domain-Oriented Observability for IAM application layer.

Probes for application service operations following Domain-Oriented Observability patterns.
"""

from iam.application.observability.identity_cache_probe import (
    DefaultIdentityCacheProbe,
    IdentityCacheProbe,
)
from iam.application.observability.login_probe import (
    DefaultLoginProbe,
    LoginProbe,
)

__all__ = [
    "IdentityCacheProbe",
    "DefaultIdentityCacheProbe",
    "LoginProbe",
    "DefaultLoginProbe",
]
