"""Check-or-record snapshot assertions for data and screenshots."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from PIL import Image

from snapassert.models.config import AssertConfig
from snapassert.models.snapshot import ComparisonResult, SnapshotId
from snapassert.snapshot.codecs import DataCodec, ImageCodec
from snapassert.snapshot.comparator import ExactComparator, PerceptualComparator
from snapassert.snapshot.store import Codec, SnapshotStore

logger = logging.getLogger(__name__)

CompareFn = Callable[[Any, Any], "tuple[bool, Optional[int]]"]


class SnapshotAssertion:
    """Compares live values against expected artifacts, recording a baseline on first run."""

    def __init__(self, config: AssertConfig, store: SnapshotStore | None = None):
        self.config = config
        self.store = store or SnapshotStore(config.snapshot_path)
        self.data_codec = DataCodec()
        self.image_codec = ImageCodec()
        self.exact = ExactComparator()
        self.perceptual = PerceptualComparator(
            hash_size=config.image_match.hash_size,
            threshold=config.image_match.threshold,
        )

    def check_data(self, snapshot_id: str | SnapshotId, value: Any) -> ComparisonResult:
        return self._check(
            SnapshotId.parse(snapshot_id),
            self.data_codec.normalize(value),
            self.data_codec,
            lambda e, a: (self.exact.matches(e, a), None),
        )

    def check_image(self, snapshot_id: str | SnapshotId, image: Any) -> ComparisonResult:
        if not isinstance(image, Image.Image):
            raise TypeError(f"Screenshot must be a PIL image, got {type(image).__name__}")
        return self._check(
            SnapshotId.parse(snapshot_id), image, self.image_codec, self._compare_images
        )

    def matches_snapshot(self, snapshot_id: str | SnapshotId, value: Any) -> bool:
        return self.check_data(snapshot_id, value).matched

    def matches_screenshot(self, snapshot_id: str | SnapshotId, image: Any) -> bool:
        return self.check_image(snapshot_id, image).matched

    def _compare_images(self, expected: Image.Image, actual: Image.Image) -> tuple[bool, int]:
        distance = self.perceptual.distance(expected, actual)
        return self.perceptual.within_threshold(distance), distance

    def _check(
        self, snapshot_id: SnapshotId, actual: Any, codec: Codec, compare: CompareFn
    ) -> ComparisonResult:
        self.store.ensure_directory()
        self.store.claim_key(snapshot_id)
        expected_path = self.store.expected_path(snapshot_id, codec.extension)
        actual_path = self.store.actual_path(snapshot_id, codec.extension)

        if not expected_path.exists():
            self.store.write(expected_path, actual, codec)
            self.store.record_baseline(expected_path)
            return ComparisonResult(
                snapshot_id=snapshot_id, matched=True, baselined=True,
                expected=actual, actual=actual,
                expected_path=expected_path, actual_path=actual_path,
            )

        expected = self.store.read_existing(expected_path, codec)
        matched, distance = compare(expected, actual)
        if matched:
            self.store.delete_if_exists(actual_path)
        else:
            self.store.write(actual_path, actual, codec)
            logger.debug("Snapshot %s mismatched, actual written to %s", snapshot_id, actual_path)

        return ComparisonResult(
            snapshot_id=snapshot_id, matched=matched,
            expected=expected, actual=actual,
            expected_path=expected_path, actual_path=actual_path,
            distance=distance,
        )
