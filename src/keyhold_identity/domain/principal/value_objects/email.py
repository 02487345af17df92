"""Email value object."""

import re
from dataclasses import dataclass

from keyhold_identity.exceptions import InvalidEmailError

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MAX_EMAIL_LENGTH = 255


@dataclass(frozen=True)
class Email:
    """A syntactically valid email address.

    Surrounding whitespace is stripped; case is preserved as entered.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            msg = f"Email must be a string, got {type(self.value).__name__}"
            raise InvalidEmailError(msg)

        stripped = self.value.strip()
        if not stripped:
            msg = "Email cannot be empty"
            raise InvalidEmailError(msg)
        if len(stripped) > MAX_EMAIL_LENGTH:
            msg = f"Email cannot exceed {MAX_EMAIL_LENGTH} characters"
            raise InvalidEmailError(msg)
        if not _EMAIL_PATTERN.match(stripped):
            msg = f"Invalid email address: {stripped}"
            raise InvalidEmailError(msg)

        object.__setattr__(self, "value", stripped)

    @classmethod
    def trusted(cls, value: str) -> "Email":
        """Wrap an address without the syntax check.

        For addresses read back from the store and for lookup keys. Rows
        written by administrative tooling may hold addresses such as
        ``admin@localhost`` that new input would be refused for.
        """
        email = object.__new__(cls)
        object.__setattr__(email, "value", value.strip())
        return email

    @property
    def local_part(self) -> str:
        return self.value.split("@", 1)[0]

    @property
    def domain(self) -> str:
        return self.value.split("@", 1)[1]

    def __str__(self) -> str:
        return self.value
