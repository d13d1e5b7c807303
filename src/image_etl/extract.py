"""Decode encoded image bytes into a ``Decoded`` set via Pillow."""

from __future__ import annotations

import io

import numpy as np
from PIL import Image, UnidentifiedImageError

from image_etl.config import ImageConfig
from image_etl.decoded import Decoded
from image_etl.errors import DecodeError

_COLOR_MODES = {1: "L", 3: "RGB"}


def to_hwc(image: Image.Image) -> np.ndarray:
    """Convert a PIL image to a contiguous HWC ``uint8`` array."""
    arr = np.array(image, dtype=np.uint8)
    if arr.ndim == 2:
        arr = arr[:, :, np.newaxis]
    return np.ascontiguousarray(arr)


def to_pil(image: np.ndarray) -> Image.Image:
    """Convert an HWC ``uint8`` array (1 or 3 channels) to a PIL image."""
    if image.shape[2] == 1:
        return Image.fromarray(np.ascontiguousarray(image[:, :, 0]))
    return Image.fromarray(np.ascontiguousarray(image))


def encode(image: np.ndarray, format: str = "PNG") -> bytes:
    """Encode an HWC image array to bytes (PNG by default)."""
    buf = io.BytesIO()
    to_pil(image).save(buf, format=format)
    return buf.getvalue()


class ImageExtractor:
    """Decode one encoded record into a single-image ``Decoded``.

    Images are converted to grayscale or RGB according to
    ``config.channels``, regardless of how they were stored.
    """

    def __init__(self, config: ImageConfig) -> None:
        if config.channels not in _COLOR_MODES:
            raise DecodeError(
                f"Unsupported number of channels in image: {config.channels}"
            )
        self._mode = _COLOR_MODES[config.channels]

    def extract(self, data: bytes) -> Decoded:
        try:
            with Image.open(io.BytesIO(data)) as img:
                converted = img.convert(self._mode)
        except (UnidentifiedImageError, OSError) as exc:
            raise DecodeError(f"decode failure: {exc}") from exc
        rc = Decoded()
        rc.add(to_hwc(converted))
        return rc
