"""Snapshot comparators: exact equality for data, perceptual hash for images."""

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

import imagehash
from PIL import Image

logger = logging.getLogger(__name__)


class Comparator(Protocol):
    def matches(self, expected: Any, actual: Any) -> bool: ...


class ExactComparator:
    """Structural equality of decoded values. No tolerance."""

    def matches(self, expected: Any, actual: Any) -> bool:
        return expected == actual


class PerceptualComparator:
    """Matches images whose perceptual hashes differ by fewer than ``threshold`` bits."""

    def __init__(
        self,
        hash_size: int,
        threshold: int,
        hasher: Callable[..., imagehash.ImageHash] = imagehash.phash,
    ):
        self.hash_size = hash_size
        self.threshold = threshold
        self.hasher = hasher

    def distance(self, expected: Image.Image, actual: Image.Image) -> int:
        h1 = self.hasher(expected, hash_size=self.hash_size)
        h2 = self.hasher(actual, hash_size=self.hash_size)
        d = int(h1 - h2)
        logger.debug("Got image distance %d (threshold %d)", d, self.threshold)
        return d

    def within_threshold(self, distance: int) -> bool:
        return distance < self.threshold

    def matches(self, expected: Image.Image, actual: Image.Image) -> bool:
        return self.within_threshold(self.distance(expected, actual))
