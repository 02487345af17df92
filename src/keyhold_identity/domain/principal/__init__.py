"""Principal domain: account identity.

This domain handles:
- Principal aggregate (id, email, name, role, active flag, linked identity)
- The credentials pairing used by authentication code paths
- The repository contract implemented by the persistence layer
"""

from keyhold_identity.domain.principal.aggregates import (
    Principal,
    PrincipalCredentials,
)
from keyhold_identity.domain.principal.repositories import PrincipalRepository
from keyhold_identity.domain.principal.value_objects import (
    ADMIN_ROLE,
    DEFAULT_ROLE,
    Email,
)

__all__ = [
    "ADMIN_ROLE",
    "DEFAULT_ROLE",
    "Email",
    "Principal",
    "PrincipalCredentials",
    "PrincipalRepository",
]
