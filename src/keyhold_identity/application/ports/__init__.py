"""Ports the application layer depends on."""

from keyhold_identity.application.ports.clock import Clock
from keyhold_identity.application.ports.mailer import Mailer
from keyhold_identity.application.ports.random_source import RandomSource

__all__ = ["Clock", "Mailer", "RandomSource"]
