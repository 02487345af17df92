"""Principal aggregate."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union
from uuid import UUID, uuid4

from keyhold_identity.domain.principal.value_objects import DEFAULT_ROLE, Email
from keyhold_identity.domain.shared.time import utc_now


class Principal:
    """
    Principal aggregate root.

    An authenticated account. The password hash is deliberately not part of
    the aggregate; it travels separately in ``PrincipalCredentials`` so that
    code holding a plain ``Principal`` can never leak it.
    """

    def __init__(  # noqa: PLR0913
        self,
        email: Union[str, Email],
        name: str,
        role: str = DEFAULT_ROLE,
        active: bool = True,
        external_id: Optional[str] = None,
        avatar_url: Optional[str] = None,
        id: UUID | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self._email = email if isinstance(email, Email) else Email(email)
        self._name = name
        self._role = role or DEFAULT_ROLE
        self._active = active
        self._external_id = external_id
        self._avatar_url = avatar_url
        self._id = id or uuid4()
        self._created_at = created_at or utc_now()
        self._updated_at = updated_at or self._created_at

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def email_obj(self) -> Email:
        return self._email

    @property
    def name(self) -> str:
        return self._name

    @property
    def role(self) -> str:
        return self._role

    @property
    def active(self) -> bool:
        return self._active

    @property
    def external_id(self) -> Optional[str]:
        return self._external_id

    @property
    def avatar_url(self) -> Optional[str]:
        return self._avatar_url

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def rename(self, name: str, now: datetime | None = None) -> None:
        self._name = name
        self._touch(now)

    def change_email(self, email: Union[str, Email], now: datetime | None = None) -> None:
        self._email = email if isinstance(email, Email) else Email(email)
        self._touch(now)

    def change_role(self, role: str, now: datetime | None = None) -> None:
        self._role = role
        self._touch(now)

    def activate(self, now: datetime | None = None) -> None:
        self._active = True
        self._touch(now)

    def deactivate(self, now: datetime | None = None) -> None:
        self._active = False
        self._touch(now)

    def link_external_identity(
        self,
        external_id: str,
        avatar_url: Optional[str],
        now: datetime | None = None,
    ) -> None:
        """Attach an external identity. Role and active flag are untouched."""
        self._external_id = external_id
        self._avatar_url = avatar_url
        self._touch(now)

    def refresh_avatar(self, avatar_url: Optional[str], now: datetime | None = None) -> bool:
        """Update the cached avatar. Returns True when it actually changed."""
        if avatar_url == self._avatar_url:
            return False
        self._avatar_url = avatar_url
        self._touch(now)
        return True

    def touch(self, now: datetime | None = None) -> None:
        self._touch(now)

    def _touch(self, now: datetime | None) -> None:
        self._updated_at = now or utc_now()

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        email: Union[str, Email],
        name: str,
        role: str = DEFAULT_ROLE,
        external_id: Optional[str] = None,
        avatar_url: Optional[str] = None,
        active: bool = True,
        now: datetime | None = None,
    ) -> Principal:
        return cls(
            email=email,
            name=name,
            role=role,
            active=active,
            external_id=external_id,
            avatar_url=avatar_url,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def reconstitute(  # noqa: PLR0913
        cls,
        id: UUID,
        email: Union[str, Email],
        name: str,
        role: str,
        active: bool,
        external_id: Optional[str],
        avatar_url: Optional[str],
        created_at: datetime,
        updated_at: datetime,
    ) -> Principal:
        """Rebuild a stored principal. The stored email is not re-validated."""
        return cls(
            id=id,
            email=email if isinstance(email, Email) else Email.trusted(email),
            name=name,
            role=role,
            active=active,
            external_id=external_id,
            avatar_url=avatar_url,
            created_at=created_at,
            updated_at=updated_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Principal):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"Principal(id={self._id}, email={self._email.value}, role={self._role})"


@dataclass(frozen=True)
class PrincipalCredentials:
    """A principal together with its password hash.

    Only returned by the explicitly named ``*_credentials`` accessors.
    """

    principal: Principal
    password_hash: str

    def __repr__(self) -> str:
        return f"PrincipalCredentials(principal={self.principal!r})"
