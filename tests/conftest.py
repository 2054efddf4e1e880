"""
Shared fixtures for the signet test suite.
"""

import secrets
from datetime import datetime, timedelta, timezone

import pytest

from signet import MessageVerifier


class FakeClock:
    """Controllable clock passed to MessageVerifier for time travel."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def secret() -> bytes:
    return secrets.token_bytes(32)


@pytest.fixture
def verifier(clock):
    return MessageVerifier("Hey, I'm a secret!", clock=clock)


@pytest.fixture
def data():
    return {"some": "data", "numbers": [1, 2, 3]}
