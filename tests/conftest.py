"""Pytest configuration and shared fixtures."""

import random
from pathlib import Path

import imagehash
import numpy as np
import pytest
from PIL import Image

from snapassert.checker import Checker
from snapassert.models.config import AssertConfig, ImageMatchConfig
from snapassert.reporter.sinks import CollectingSink
from snapassert.snapshot.assertion import SnapshotAssertion
from snapassert.snapshot.store import SnapshotStore


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def snapshot_dir(tmp_path: Path) -> Path:
    """Snapshot directory that does not exist yet."""
    return tmp_path / "__snapshots__"


@pytest.fixture
def assert_config(snapshot_dir: Path) -> AssertConfig:
    """Create a test configuration with a short timeout."""
    return AssertConfig(
        timeout_seconds=1.0,
        poll_interval_seconds=0.1,
        snapshot_dir=str(snapshot_dir),
        image_match=ImageMatchConfig(hash_bits=64, threshold=5),
    )


# ============================================================================
# Clock Fixtures
# ============================================================================


class FakeClock:
    """Monotonic clock that only advances when slept on."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ============================================================================
# Snapshot Fixtures
# ============================================================================


@pytest.fixture
def store(snapshot_dir: Path) -> SnapshotStore:
    return SnapshotStore(snapshot_dir)


@pytest.fixture
def snapshots(assert_config: AssertConfig, store: SnapshotStore) -> SnapshotAssertion:
    return SnapshotAssertion(assert_config, store)


@pytest.fixture
def sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture
def checker(assert_config: AssertConfig, sink: CollectingSink, clock: FakeClock) -> Checker:
    """Checker wired to a collecting sink and the fake clock."""
    return Checker(assert_config, sink=sink, clock=clock, sleep=clock.sleep)


# ============================================================================
# Helper Functions
# ============================================================================


def noise_image(seed: int, size: tuple[int, int] = (64, 64)) -> Image.Image:
    """Create a reproducible grayscale noise image."""
    rng = random.Random(seed)
    image = Image.new("RGB", size)
    image.putdata([(v, v, v) for v in (rng.randrange(256) for _ in range(size[0] * size[1]))])
    return image


def hash_with_bits(set_bits: int, hash_size: int = 8) -> imagehash.ImageHash:
    """An ImageHash with the first ``set_bits`` bits set, so distances are exact."""
    bits = np.zeros(hash_size * hash_size, dtype=bool)
    bits[:set_bits] = True
    return imagehash.ImageHash(bits.reshape(hash_size, hash_size))


@pytest.fixture
def make_noise_image():
    """Fixture that provides the noise_image function."""
    return noise_image


@pytest.fixture
def make_hash():
    """Fixture that provides the hash_with_bits function."""
    return hash_with_bits
