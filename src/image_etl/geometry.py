"""Crop-box geometry shared by the parameter sampler and multicrop.

Sizes are ``(width, height)`` in pixels; boxes are ``(x, y, width, height)``
with the origin at the top-left corner of the source image.
"""

from __future__ import annotations

from typing import NamedTuple


class Size(NamedTuple):
    width: float
    height: float


class Point(NamedTuple):
    x: float
    y: float


class Box(NamedTuple):
    x: int
    y: int
    width: int
    height: int

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)


def max_proportional(in_size: Size, out_size: Size) -> Size:
    """Largest box with the aspect ratio of ``out_size`` that fits in ``in_size``.

    Args:
        in_size: Bounding size, typically the source image.
        out_size: Size whose aspect ratio the result must keep.

    Returns:
        The fitted size.  One side always equals the matching side of
        ``in_size``.
    """
    ratio = out_size.width / out_size.height
    width = in_size.height * ratio
    if width <= in_size.width:
        return Size(width, float(in_size.height))
    return Size(float(in_size.width), in_size.width / ratio)


def linear_scale(size: Size, factor: float) -> Size:
    """Scale both sides of ``size`` by ``factor``."""
    return Size(size.width * factor, size.height * factor)


def shift(in_size: Size, size: Size, x_offset: float, y_offset: float) -> Point:
    """Origin that places ``size`` inside ``in_size`` at normalized offsets.

    An offset of 0 puts the box flush against the left/top edge, 1 flush
    against the right/bottom edge, with linear interpolation between.
    """
    return Point(
        (in_size.width - size.width) * x_offset,
        (in_size.height - size.height) * y_offset,
    )


def to_box(origin: Point, size: Size, bounds: Size | None = None) -> Box:
    """Round a float origin and size to an integer pixel box.

    With ``bounds``, the rounded origin is pulled back so the box cannot
    overhang the right or bottom edge by a rounding pixel.
    """
    x, y = round(origin.x), round(origin.y)
    width, height = round(size.width), round(size.height)
    if bounds is not None:
        x = max(0, min(x, int(bounds.width) - width))
        y = max(0, min(y, int(bounds.height) - height))
    return Box(x, y, width, height)


def clamp_size(size: Size, bounds: Size) -> Size:
    """Shrink ``size`` so neither side exceeds ``bounds``."""
    return Size(min(size.width, bounds.width), min(size.height, bounds.height))


def scale_shape(
    size: tuple[int, int], min_size: int, max_size: int
) -> tuple[float, tuple[int, int]]:
    """Scale ``size`` so its short side is ``min_size``, capped by ``max_size``.

    If scaling the short side up to ``min_size`` would push the long side past
    ``max_size``, the long side is scaled to ``max_size`` instead.

    Returns:
        ``(scale, (width, height))`` with both sides rounded to the nearest
        integer.
    """
    width, height = size
    scale = min_size / min(width, height)
    long_side = max(width, height)
    if round(long_side * scale) > max_size:
        scale = max_size / long_side
    return scale, (round(width * scale), round(height * scale))
