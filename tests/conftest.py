"""Shared fixtures for cachesketch tests."""
from __future__ import annotations

import random

import pytest


SEED = 42


def random_hashes(n: int, seed: int = SEED) -> list[int]:
    """``n`` uniformly distributed 64-bit hashes from a seeded RNG."""
    rng = random.Random(seed)
    return [rng.getrandbits(64) for _ in range(n)]


@pytest.fixture
def hashes_10k() -> list[int]:
    return random_hashes(10_000)


@pytest.fixture
def make_hashes():
    return random_hashes
