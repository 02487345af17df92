"""Password policy evaluation.

Scores a candidate password against a ``PasswordPolicy`` and reports
symbolic violation and hint codes. Nothing here raises on a weak password;
callers decide whether to reject.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from keyhold_identity.services.password_service import BCRYPT_MAX_BYTES

_UPPERCASE = re.compile(r"[A-Z]")
_LOWERCASE = re.compile(r"[a-z]")
_DIGIT = re.compile(r"\d")
_SPECIAL = re.compile(r"""[!@#$%^&*()_+\-=\[\]{};':"\\|,.<>/?]""")

MIN_LENGTH_POINTS = 20
CLASS_POINTS = 15
LONG_LENGTH = 12
LONG_LENGTH_POINTS = 10
MEDIUM_LENGTH = 10
MEDIUM_LENGTH_POINTS = 5
ALL_CLASSES_POINTS = 10
THREE_CLASSES_POINTS = 5
MEDIUM_THRESHOLD = 60
STRONG_THRESHOLD = 80
MAX_SCORE = 100

COMMON_PASSWORDS = frozenset(
    {
        "password", "123456", "123456789", "qwerty", "abc123", "password123",
        "admin", "letmein", "welcome", "monkey", "dragon", "master", "hello",
        "freedom", "whatever", "qazwsx", "trustno1", "jordan", "harley",
        "ranger", "buster", "thomas", "tigger", "robert", "soccer", "batman",
        "test", "pass", "user", "guest", "login", "secret", "god", "love",
        "sex", "money", "password1", "12345678", "qwerty123", "admin123",
        "password!", "password1!", "password123!",
    }
)  # fmt: skip


class PasswordViolation(str, Enum):
    """Reasons a password fails the policy."""

    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    MISSING_UPPERCASE = "missing_uppercase"
    MISSING_LOWERCASE = "missing_lowercase"
    MISSING_NUMBER = "missing_number"
    MISSING_SPECIAL_CHAR = "missing_special_char"
    COMMON_PASSWORD = "common_password"


class PasswordHint(str, Enum):
    """Suggestions for a stronger password."""

    USE_MIN_LENGTH = "use_min_length"
    USE_TWELVE_OR_MORE = "use_twelve_or_more"
    ADD_UPPERCASE = "add_uppercase"
    ADD_LOWERCASE = "add_lowercase"
    ADD_NUMBER = "add_number"
    ADD_SPECIAL_CHAR = "add_special_char"
    AVOID_COMMON = "avoid_common"
    MIX_CHARACTER_CLASSES = "mix_character_classes"


class PasswordStrength(str, Enum):
    WEAK = "weak"
    MEDIUM = "medium"
    STRONG = "strong"


@dataclass(frozen=True)
class PasswordPolicy:
    """Password requirements."""

    min_length: int = 8
    require_uppercase: bool = True
    require_lowercase: bool = True
    require_numbers: bool = True
    require_special_chars: bool = True
    prevent_common_passwords: bool = True


@dataclass(frozen=True)
class PasswordValidationResult:
    """Outcome of evaluating a password against a policy."""

    is_valid: bool
    violations: tuple[PasswordViolation, ...]
    hints: tuple[PasswordHint, ...]
    score: int
    strength: PasswordStrength


def strength_for_score(score: int) -> PasswordStrength:
    if score >= STRONG_THRESHOLD:
        return PasswordStrength.STRONG
    if score >= MEDIUM_THRESHOLD:
        return PasswordStrength.MEDIUM
    return PasswordStrength.WEAK


class PasswordPolicyValidator:
    """Evaluates passwords against a policy.

    Scoring is additive: 20 points for meeting the minimum length, 15 per
    character class present, a length bonus (10 at 12+ characters, else 5
    at 10+) and a complexity bonus (10 with all four classes, else 5 with
    exactly three). The score is clamped to 100.
    """

    def __init__(self, policy: PasswordPolicy | None = None):
        self._policy = policy or PasswordPolicy()

    @property
    def policy(self) -> PasswordPolicy:
        return self._policy

    def validate(
        self,
        password: str,
        policy: PasswordPolicy | None = None,
    ) -> PasswordValidationResult:
        policy = policy or self._policy
        violations: list[PasswordViolation] = []
        hints: list[PasswordHint] = []
        score = 0

        if len(password) < policy.min_length:
            violations.append(PasswordViolation.TOO_SHORT)
            hints.append(PasswordHint.USE_MIN_LENGTH)
        else:
            score += MIN_LENGTH_POINTS
            if len(password) < LONG_LENGTH:
                hints.append(PasswordHint.USE_TWELVE_OR_MORE)

        if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
            violations.append(PasswordViolation.TOO_LONG)

        classes = (
            (
                bool(_UPPERCASE.search(password)),
                policy.require_uppercase,
                PasswordViolation.MISSING_UPPERCASE,
                PasswordHint.ADD_UPPERCASE,
            ),
            (
                bool(_LOWERCASE.search(password)),
                policy.require_lowercase,
                PasswordViolation.MISSING_LOWERCASE,
                PasswordHint.ADD_LOWERCASE,
            ),
            (
                bool(_DIGIT.search(password)),
                policy.require_numbers,
                PasswordViolation.MISSING_NUMBER,
                PasswordHint.ADD_NUMBER,
            ),
            (
                bool(_SPECIAL.search(password)),
                policy.require_special_chars,
                PasswordViolation.MISSING_SPECIAL_CHAR,
                PasswordHint.ADD_SPECIAL_CHAR,
            ),
        )

        present_classes = 0
        for present, required, violation, hint in classes:
            if present:
                present_classes += 1
                score += CLASS_POINTS
            elif required:
                violations.append(violation)
                hints.append(hint)

        if policy.prevent_common_passwords and password.lower() in COMMON_PASSWORDS:
            violations.append(PasswordViolation.COMMON_PASSWORD)
            hints.append(PasswordHint.AVOID_COMMON)

        if len(password) >= LONG_LENGTH:
            score += LONG_LENGTH_POINTS
        elif len(password) >= MEDIUM_LENGTH:
            score += MEDIUM_LENGTH_POINTS

        if present_classes == len(classes):
            score += ALL_CLASSES_POINTS
        elif present_classes == len(classes) - 1:
            score += THREE_CLASSES_POINTS
            hints.append(PasswordHint.MIX_CHARACTER_CLASSES)

        score = min(score, MAX_SCORE)

        return PasswordValidationResult(
            is_valid=not violations,
            violations=tuple(violations),
            hints=tuple(dict.fromkeys(hints)),
            score=score,
            strength=strength_for_score(score),
        )
