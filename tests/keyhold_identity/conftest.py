"""
Pytest configuration for keyhold_identity tests.

Provides the deterministic ports and configuration shared by unit and
persistence tests.
"""

import pytest

from keyhold_identity import IdentityConfig, PasswordHashingService
from tests.shared.fixtures.doubles import (
    FixedClock,
    RecordingMailer,
    SequenceRandomSource,
)
from tests.shared.fixtures.factories import FAST_BCRYPT_ROUNDS, make_config


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def random_source() -> SequenceRandomSource:
    return SequenceRandomSource()


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def config() -> IdentityConfig:
    return make_config()


@pytest.fixture
def password_service() -> PasswordHashingService:
    """Low rounds for fast tests."""
    return PasswordHashingService(rounds=FAST_BCRYPT_ROUNDS)
