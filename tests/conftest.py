"""Shared pytest fixtures for image_etl tests."""

import numpy as np
import pytest

from image_etl.extract import encode


def make_indexed_image(width: int = 256, height: int = 256) -> np.ndarray:
    """HWC RGB image whose pixels encode their own coordinates.

    Channel 0 holds the column, channel 1 the row, channel 2 is zero, so any
    output pixel can be traced back to its source location.
    """
    img = np.zeros((height, width, 3), dtype=np.uint8)
    img[:, :, 0] = (np.arange(width) % 256)[np.newaxis, :]
    img[:, :, 1] = (np.arange(height) % 256)[:, np.newaxis]
    return img


def make_solid_image(
    color: tuple[int, int, int], width: int = 100, height: int = 100
) -> np.ndarray:
    img = np.empty((height, width, 3), dtype=np.uint8)
    img[:, :] = color
    return img


def pixel(image: np.ndarray, x: int, y: int) -> tuple[int, int]:
    """``(channel 0, channel 1)`` of ``image`` at column ``x``, row ``y``."""
    return int(image[y, x, 0]), int(image[y, x, 1])


@pytest.fixture()
def indexed_image() -> np.ndarray:
    """256x256 coordinate-indexed RGB image."""
    return make_indexed_image()


@pytest.fixture()
def indexed_png(indexed_image: np.ndarray) -> bytes:
    """PNG encoding of ``indexed_image`` (lossless)."""
    return encode(indexed_image)
