"""Unit tests for PasswordPolicyValidator."""

import random
import string

import pytest

from keyhold_identity.services import (
    PasswordHint,
    PasswordPolicy,
    PasswordPolicyValidator,
    PasswordStrength,
    PasswordViolation,
)

SPECIALS = "!@#$%^&*()_+-=[]{};':\"\\|,.<>/?"


class TestPasswordPolicyValidator:
    def setup_method(self):
        self.validator = PasswordPolicyValidator()

    def test_default_policy_accepts_known_good_password(self):
        result = self.validator.validate("Passw0rd!")

        assert result.is_valid
        assert result.violations == ()
        assert result.score >= 60
        # 20 length + 4 * 15 classes + 10 complexity
        assert result.score == 90
        assert result.strength is PasswordStrength.STRONG
        assert result.hints == (PasswordHint.USE_TWELVE_OR_MORE,)

    def test_short_lowercase_password_reports_every_gap_in_order(self):
        result = self.validator.validate("abc")

        assert not result.is_valid
        assert result.violations == (
            PasswordViolation.TOO_SHORT,
            PasswordViolation.MISSING_UPPERCASE,
            PasswordViolation.MISSING_NUMBER,
            PasswordViolation.MISSING_SPECIAL_CHAR,
        )
        assert result.hints == (
            PasswordHint.USE_MIN_LENGTH,
            PasswordHint.ADD_UPPERCASE,
            PasswordHint.ADD_NUMBER,
            PasswordHint.ADD_SPECIAL_CHAR,
        )
        assert result.score == 15
        assert result.strength is PasswordStrength.WEAK

    def test_three_classes_get_partial_bonus_and_mix_hint(self):
        result = self.validator.validate("Lighthouse12")

        # 20 + 3 * 15 + 10 length + 5 complexity
        assert result.score == 80
        assert result.violations == (PasswordViolation.MISSING_SPECIAL_CHAR,)
        assert result.hints == (
            PasswordHint.ADD_SPECIAL_CHAR,
            PasswordHint.MIX_CHARACTER_CLASSES,
        )

    def test_medium_length_bonus(self):
        result = self.validator.validate("Lighthou12")

        # 20 + 45 + 5 length + 5 complexity
        assert result.score == 75
        assert result.strength is PasswordStrength.MEDIUM
        assert result.hints[0] is PasswordHint.USE_TWELVE_OR_MORE

    def test_long_four_class_password_scores_maximum(self):
        result = self.validator.validate("Correct-Horse-42")

        assert result.score == 100
        assert result.strength is PasswordStrength.STRONG
        assert result.hints == ()

    @pytest.mark.parametrize("password", ["Password1!", "PASSWORD123!", "password1!"])
    def test_common_password_is_rejected_case_insensitively(self, password):
        result = self.validator.validate(password)

        assert PasswordViolation.COMMON_PASSWORD in result.violations
        assert PasswordHint.AVOID_COMMON in result.hints
        assert not result.is_valid

    def test_common_check_can_be_disabled(self):
        policy = PasswordPolicy(prevent_common_passwords=False)

        result = self.validator.validate("Password1!", policy)

        assert result.is_valid

    def test_relaxed_policy_does_not_require_classes(self):
        policy = PasswordPolicy(
            min_length=4,
            require_uppercase=False,
            require_numbers=False,
            require_special_chars=False,
        )

        result = PasswordPolicyValidator(policy).validate("lighthouse")

        assert result.is_valid
        assert result.violations == ()
        # Missing classes still cost points
        assert result.score == 20 + 15 + 5

    def test_password_beyond_bcrypt_limit_is_too_long(self):
        result = self.validator.validate("Aa1!" + "x" * 70)

        assert PasswordViolation.TOO_LONG in result.violations
        assert not result.is_valid

    def test_multibyte_characters_count_towards_byte_limit(self):
        # 22 characters but 76 bytes in UTF-8
        result = self.validator.validate("Aa1!" + "\U0001f600" * 18)

        assert PasswordViolation.TOO_LONG in result.violations

    def test_empty_password(self):
        result = self.validator.validate("")

        assert not result.is_valid
        assert result.score == 0
        assert result.violations[0] is PasswordViolation.TOO_SHORT

    @pytest.mark.parametrize("special", list(SPECIALS))
    def test_every_listed_special_character_counts(self, special):
        result = self.validator.validate(f"Abcdefg1{special}")

        assert PasswordViolation.MISSING_SPECIAL_CHAR not in result.violations

    def test_space_is_not_a_special_character(self):
        result = self.validator.validate("Abcdefg1 x")

        assert PasswordViolation.MISSING_SPECIAL_CHAR in result.violations

    def test_passwords_meeting_every_requirement_always_pass(self):
        rng = random.Random(1234)
        alphabet = string.ascii_letters + string.digits + SPECIALS
        for _ in range(200):
            required = [
                rng.choice(string.ascii_uppercase),
                rng.choice(string.ascii_lowercase),
                rng.choice(string.digits),
                rng.choice(SPECIALS),
            ]
            filler = [rng.choice(alphabet) for _ in range(rng.randint(4, 40))]
            chars = required + filler
            rng.shuffle(chars)
            password = "".join(chars)

            result = self.validator.validate(password)

            assert result.is_valid, password
            assert result.violations == ()
            assert result.strength is not PasswordStrength.WEAK

    def test_codes_are_plain_strings(self):
        result = self.validator.validate("abc")

        assert [v.value for v in result.violations][0] == "too_short"
        assert result.hints[0] == "use_min_length"
