"""Shared fixtures: synthetic descriptors and in-memory storage."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from facepay.db import DescriptorStore
from facepay.history import PaymentHistory
from facepay.matcher import Matcher
from facepay.storage import MemoryStorage

WALLET_A = "0x" + "a" * 40
WALLET_B = "0x" + "b" * 40
WALLET_C = "0x" + "c" * 40


def make_descriptor(seed, size=128):
    """Random descriptor with component 0 fixed at 0.0 so offsets along it are exact."""
    rng = np.random.default_rng(seed)
    desc = rng.uniform(-0.2, 0.2, size)
    desc[0] = 0.0
    return desc


def at_distance(descriptor, distance):
    """Copy of descriptor moved exactly `distance` along component 0."""
    probe = np.array(descriptor, dtype=np.float64)
    probe[0] += distance
    return probe


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    store = DescriptorStore(storage)
    store.load()
    return store


@pytest.fixture
def matcher(store):
    return Matcher(store)


@pytest.fixture
def history(storage):
    history = PaymentHistory(storage)
    history.load()
    return history
