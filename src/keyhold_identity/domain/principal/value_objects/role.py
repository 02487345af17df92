"""Role tags.

Roles are free-form strings so deployments can define their own; the
permission table in settings maps them to path patterns.
"""

DEFAULT_ROLE = "user"
ADMIN_ROLE = "admin"
