"""Per-record transform parameters and the factory that samples them.

On each record the factory combines the config with the record's source
size to draw:

Spatial distortion params:
    crop box (from scale, horizontal_distortion, crop_offset and record size),
    flip flag, rotation angle.

Photometric distortion params:
    contrast/brightness/saturation jitter and lighting noise.

``ParamFactory.make_params`` is the only producer of ``TransformParams``.
"""

from __future__ import annotations

import numpy as np
from loguru import logger
from pydantic import BaseModel

from image_etl.config import ImageConfig
from image_etl.decoded import Decoded
from image_etl.errors import UnsupportedPolicyError
from image_etl.geometry import (
    Box,
    Size,
    clamp_size,
    linear_scale,
    max_proportional,
    shift,
    to_box,
)


class TransformParams(BaseModel, frozen=True):
    """Transform description for one record; consumed once, then discarded."""

    output_size: tuple[int, int]
    angle: int = 0
    flip: bool = False
    cropbox: Box
    photometric: tuple[float, ...] = ()
    lighting: tuple[float, ...] = ()
    color_noise_std: float = 0.0

    def dump(self) -> str:
        lighting = " ".join(f"{v:g}" for v in self.lighting)
        photometric = " ".join(f"{v:g}" for v in self.photometric)
        return (
            f"Angle: {self.angle:>3} Flip: {int(self.flip)} "
            f"Lighting: {lighting} Photometric: {photometric}\n"
            f"Crop Box: {self.cropbox.width} x {self.cropbox.height} "
            f"from ({self.cropbox.x}, {self.cropbox.y})\n"
        )


class ParamFactory:
    """Draw ``TransformParams`` from an ``ImageConfig``'s distributions.

    Owns the pipeline's random engine, seeded from ``config.seed``.  The same
    seed and the same sequence of ``make_params`` calls reproduce identical
    parameters.

    Args:
        config: Validated image configuration.
        rng: Optional engine to use instead of one seeded from the config.
    """

    def __init__(
        self, config: ImageConfig, rng: np.random.Generator | None = None
    ) -> None:
        self._cfg = config
        if rng is None:
            # Negative seeds wrap to their 32-bit unsigned value.
            rng = np.random.default_rng(config.seed & 0xFFFFFFFF)
        self._rng = rng

    @property
    def rng(self) -> np.random.Generator:
        return self._rng

    def make_params(self, decoded: Decoded) -> TransformParams:
        cfg = self._cfg
        rng = self._rng

        angle = cfg.angle.sample(rng)
        flip = cfg.flip_distribution.sample(rng)

        in_size = decoded.image_size
        scale = cfg.scale.sample(rng)
        horizontal_distortion = cfg.horizontal_distortion.sample(rng)
        out_shape = Size(cfg.width * horizontal_distortion, cfg.height)

        cropbox_size = max_proportional(in_size, out_shape)
        if cfg.do_area_scale:
            raise UnsupportedPolicyError("area scale not implemented")
        cropbox_size = clamp_size(linear_scale(cropbox_size, scale), in_size)

        offset = cfg.crop_offset_distribution
        c_off_x = offset.sample(rng)
        c_off_y = offset.sample(rng)
        origin = shift(in_size, cropbox_size, c_off_x, c_off_y)

        lighting: tuple[float, ...] = ()
        color_noise_std = 0.0
        if cfg.lighting.stddev != 0:
            lighting = tuple(cfg.lighting.sample(rng) for _ in range(3))
            color_noise_std = cfg.lighting.stddev

        photometric: tuple[float, ...] = ()
        if cfg.photometric.low != cfg.photometric.high:
            photometric = tuple(cfg.photometric.sample(rng) for _ in range(3))

        params = TransformParams(
            output_size=(cfg.width, cfg.height),
            angle=angle,
            flip=flip,
            cropbox=to_box(origin, cropbox_size, in_size),
            photometric=photometric,
            lighting=lighting,
            color_noise_std=color_noise_std,
        )
        logger.opt(lazy=True).trace("{}", params.dump)
        return params
