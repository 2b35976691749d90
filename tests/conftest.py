"""Shared pytest fixtures and markers for all tests."""

import random

import pytest

from covertops.storage import InMemoryWorld


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


class ScriptedRandom(random.Random):
    """Random whose draws are fixed in advance.

    random() returns the scripted values in order and fails loudly once they
    run out, so a test also pins down how many draws a code path consumes.
    choice() picks by scripted index (default 0).
    """

    def __init__(self, *values: float, choices: tuple[int, ...] = ()):
        super().__init__(0)
        self.values = list(values)
        self.choices = list(choices)

    def random(self) -> float:
        if not self.values:
            raise AssertionError("ScriptedRandom ran out of values")
        return self.values.pop(0)

    def choice(self, seq):
        index = self.choices.pop(0) if self.choices else 0
        return seq[index]


@pytest.fixture
def scripted():
    """Factory for ScriptedRandom instances."""
    return ScriptedRandom


@pytest.fixture
def world() -> InMemoryWorld:
    """Two neutral polities with default stats."""
    world = InMemoryWorld()
    world.add_actor(id="north", name="Northreach")
    world.add_actor(id="south", name="Southmarch")
    world.add_relationship("north", "south", trust=0)
    return world


@pytest.fixture
def famine_world() -> InMemoryWorld:
    """A starving polity next to a well-fed one, nothing else going on."""
    world = InMemoryWorld()
    world.add_actor(id="north", name="Northreach", food=10)
    world.add_actor(id="south", name="Southmarch", food=60)
    return world
