"""Serialization of snapshot values: JSON for data, PNG for images."""

from __future__ import annotations

import io
import json
from typing import Any

from PIL import Image
from pydantic_core import to_jsonable_python


class DataCodec:
    """Pretty-printed JSON. Models, dataclasses, tuples and sets become plain JSON."""

    extension = "json"

    def encode(self, value: Any) -> bytes:
        text = json.dumps(to_jsonable_python(value), indent=2, sort_keys=True)
        return (text + "\n").encode("utf-8")

    def decode(self, raw: bytes) -> Any:
        return json.loads(raw.decode("utf-8"))

    def normalize(self, value: Any) -> Any:
        """Return the value exactly as it would read back from disk."""
        return self.decode(self.encode(value))


class ImageCodec:
    """Lossless PNG via Pillow."""

    extension = "png"

    def encode(self, image: Image.Image) -> bytes:
        buf = io.BytesIO()
        image.save(buf, format="PNG")
        return buf.getvalue()

    def decode(self, raw: bytes) -> Image.Image:
        image = Image.open(io.BytesIO(raw))
        image.load()
        return image

    def normalize(self, image: Image.Image) -> Image.Image:
        return image
