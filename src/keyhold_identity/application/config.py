"""Immutable configuration handed to every identity service.

Built once at startup from ``keyhold_config.Settings`` and injected into
service constructors. Services never read settings themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import TYPE_CHECKING, Optional

from keyhold_identity.exceptions import ConfigurationError
from keyhold_identity.services.password_policy import PasswordPolicy

if TYPE_CHECKING:
    from keyhold_config.settings import Settings


@dataclass(frozen=True)
class ExpiryConfig:
    """Session token lifetimes.

    A window of ``None`` issues tokens without expiry. That legacy state is
    only allowed when ``allow_non_expiring`` is set explicitly.
    """

    token_expiration_minutes: Optional[int] = 1440
    remember_me_days: Optional[int] = 30
    allow_non_expiring: bool = False

    def __post_init__(self) -> None:
        for name in ("token_expiration_minutes", "remember_me_days"):
            value = getattr(self, name)
            if value is None and not self.allow_non_expiring:
                msg = (
                    f"{name} is unset but non-expiring tokens are not allowed; "
                    "set a window or enable allow_non_expiring_tokens"
                )
                raise ConfigurationError(msg)
            if value is not None and value <= 0:
                msg = f"{name} must be positive, got {value}"
                raise ConfigurationError(msg)

    def window(self, remember_me: bool) -> Optional[timedelta]:
        """Lifetime of a newly issued token, or None for no expiry."""
        if remember_me:
            if self.remember_me_days is None:
                return None
            return timedelta(days=self.remember_me_days)
        if self.token_expiration_minutes is None:
            return None
        return timedelta(minutes=self.token_expiration_minutes)


@dataclass(frozen=True)
class SweepConfig:
    """Token cleanup options."""

    include_no_expiry: bool = True


@dataclass(frozen=True)
class IdentityConfig:
    """Everything the identity services need to know about deployment policy."""

    password_policy: PasswordPolicy = field(default_factory=PasswordPolicy)
    expiry: ExpiryConfig = field(default_factory=ExpiryConfig)
    sweep: SweepConfig = field(default_factory=SweepConfig)
    reset_window: timedelta = timedelta(hours=1)
    reset_base_url: str = "http://localhost:3000"
    confirmation_window: timedelta = timedelta(hours=24)
    allow_auto_provision: bool = False
    hard_delete: bool = False
    bcrypt_rounds: int = 12

    def __post_init__(self) -> None:
        for name in ("reset_window", "confirmation_window"):
            if getattr(self, name) <= timedelta(0):
                msg = f"{name} must be positive"
                raise ConfigurationError(msg)
        object.__setattr__(self, "reset_base_url", self.reset_base_url.rstrip("/"))

    @property
    def record_retention(self) -> timedelta:
        """How long reset and confirmation records stay useful.

        Both kinds share one store, so the default sweep keeps the longer.
        """
        return max(self.reset_window, self.confirmation_window)

    @classmethod
    def from_settings(cls, settings: Settings) -> IdentityConfig:
        return cls(
            password_policy=PasswordPolicy(
                min_length=settings.password_min_length,
                require_uppercase=settings.password_require_uppercase,
                require_lowercase=settings.password_require_lowercase,
                require_numbers=settings.password_require_numbers,
                require_special_chars=settings.password_require_special_chars,
                prevent_common_passwords=settings.password_prevent_common,
            ),
            expiry=ExpiryConfig(
                token_expiration_minutes=settings.token_expiration_minutes,
                remember_me_days=settings.remember_me_days,
                allow_non_expiring=settings.allow_non_expiring_tokens,
            ),
            sweep=SweepConfig(
                include_no_expiry=settings.token_cleanup_include_no_expiry,
            ),
            reset_window=timedelta(minutes=settings.password_reset_window_minutes),
            reset_base_url=settings.password_reset_base_url,
            confirmation_window=timedelta(
                hours=settings.registration_confirmation_window_hours,
            ),
            allow_auto_provision=settings.oauth_allow_auto_provision,
            hard_delete=settings.hard_delete_principals,
            bcrypt_rounds=settings.bcrypt_rounds,
        )
