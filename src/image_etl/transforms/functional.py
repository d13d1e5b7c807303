"""Stateless image operations on HWC ``uint8`` numpy arrays.

Geometric resampling (rotate, resize) goes through Pillow; pixel-wise
photometric work is done in float32 numpy and clipped back to ``uint8``.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from PIL import Image

from image_etl.extract import to_hwc, to_pil
from image_etl.geometry import Box

# PCA basis of ImageNet RGB pixel covariance (Krizhevsky et al., 2012).
_EIGVAL = np.array([0.2175, 0.0188, 0.0045], dtype=np.float32)
_EIGVEC = np.array(
    [
        [-0.5675, 0.7192, 0.4009],
        [-0.5808, -0.0045, -0.8140],
        [-0.5836, -0.6948, 0.4203],
    ],
    dtype=np.float32,
)
# ITU-R 601-2 luma weights, as used by PIL's "L" conversion.
_LUMA = np.array([0.299, 0.587, 0.114], dtype=np.float32)


def rotate(image: np.ndarray, angle: float) -> np.ndarray:
    """Rotate counter-clockwise by ``angle`` degrees about the center.

    Output keeps the input size; uncovered corners are filled with black.
    """
    if angle == 0:
        return image
    rotated = to_pil(image).rotate(angle, resample=Image.BILINEAR)
    return to_hwc(rotated)


def crop(image: np.ndarray, box: Box) -> np.ndarray:
    return image[box.y : box.y + box.height, box.x : box.x + box.width]


def resize(image: np.ndarray, size: Sequence[int]) -> np.ndarray:
    """Resize to ``size`` = ``(width, height)``.

    Returns the input unchanged when it already has that size.  Shrinking
    uses area (box) averaging, enlarging uses bicubic interpolation.
    """
    width, height = int(size[0]), int(size[1])
    in_h, in_w = image.shape[:2]
    if (in_w, in_h) == (width, height):
        return image
    resample = Image.BICUBIC if in_w * in_h < width * height else Image.BOX
    return to_hwc(to_pil(image).resize((width, height), resample))


def _gray(arr: np.ndarray) -> np.ndarray:
    if arr.shape[2] == 1:
        return arr
    return (arr @ _LUMA)[:, :, np.newaxis]


def cbs_jitter(image: np.ndarray, photometric: Sequence[float]) -> np.ndarray:
    """Contrast, brightness and saturation jitter.

    ``photometric`` holds ``(contrast, brightness, saturation)`` deltas; each
    factor applied is ``1 + delta``.  An empty sequence is a no-op.
    Saturation has no effect on single-channel images.
    """
    if len(photometric) == 0:
        return image
    contrast, brightness, saturation = (1.0 + float(v) for v in photometric[:3])
    arr = image.astype(np.float32)

    arr *= brightness
    if arr.shape[2] == 3:
        gray = _gray(arr)
        arr = gray + (arr - gray) * saturation
    mean = float(_gray(arr).mean())
    arr = mean + (arr - mean) * contrast

    return np.clip(np.rint(arr), 0, 255).astype(np.uint8)


def lighting(
    image: np.ndarray, alphas: Sequence[float], stddev: float
) -> np.ndarray:
    """AlexNet-style PCA lighting noise.

    ``alphas`` are the three per-eigenvector weights drawn with standard
    deviation ``stddev``.  An empty ``alphas`` or zero ``stddev`` is a no-op.
    """
    if len(alphas) == 0 or stddev == 0:
        return image
    alpha = np.asarray(alphas[:3], dtype=np.float32)
    noise = _EIGVEC @ (alpha * _EIGVAL) * 255.0
    arr = image.astype(np.float32)
    if arr.shape[2] == 1:
        arr += float(noise.mean())
    else:
        arr += noise
    return np.clip(np.rint(arr), 0, 255).astype(np.uint8)


def hflip(image: np.ndarray) -> np.ndarray:
    """Mirror horizontally."""
    return np.ascontiguousarray(image[:, ::-1])
