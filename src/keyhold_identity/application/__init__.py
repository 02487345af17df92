"""Application layer: configuration, ports, services and authorization."""

from keyhold_identity.application.authorization import (
    has_permission,
    is_whitelisted,
    path_matches_pattern,
)
from keyhold_identity.application.config import (
    ExpiryConfig,
    IdentityConfig,
    SweepConfig,
)

__all__ = [
    "ExpiryConfig",
    "IdentityConfig",
    "SweepConfig",
    "has_permission",
    "is_whitelisted",
    "path_matches_pattern",
]
