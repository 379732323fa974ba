"""
Shared pytest fixtures.
"""

import pytest

from bot.registry import CommandRegistry
from factories import FakeApp


@pytest.fixture
def registry() -> CommandRegistry:
    return CommandRegistry()


@pytest.fixture
def app(registry) -> FakeApp:
    return FakeApp(registry)
