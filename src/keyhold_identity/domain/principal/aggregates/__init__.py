from keyhold_identity.domain.principal.aggregates.principal import (
    Principal,
    PrincipalCredentials,
)

__all__ = ["Principal", "PrincipalCredentials"]
