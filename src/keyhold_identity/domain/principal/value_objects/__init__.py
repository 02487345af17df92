from keyhold_identity.domain.principal.value_objects.email import Email
from keyhold_identity.domain.principal.value_objects.role import (
    ADMIN_ROLE,
    DEFAULT_ROLE,
)

__all__ = [
    "ADMIN_ROLE",
    "DEFAULT_ROLE",
    "Email",
]
