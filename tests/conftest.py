"""Pytest configuration and shared fixtures."""

import random

import pytest

from core.vector import Vector3
from materials.material import Material


@pytest.fixture
def rng():
    """A seeded generator so sampled tests are reproducible."""
    return random.Random(1234)


@pytest.fixture
def matte_white():
    return Material(Vector3(1.0, 1.0, 1.0), metalness=0.0, roughness=1.0)


@pytest.fixture
def pure_emitter():
    """Black, fully rough surface that only emits."""
    return Material(Vector3(0.0, 0.0, 0.0), metalness=0.0, roughness=1.0,
                    emission=Vector3(0.2, 0.5, 0.9))
