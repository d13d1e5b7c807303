"""Pydantic frozen configuration models for image_etl.

The model fields are the schema: a field without a default is required, a
field with one is optional and keeps the default when absent.  Derived values
(flip distribution, effective crop-offset distribution, output shape and
element type) are read-only properties computed from the validated fields.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, NamedTuple

import numpy as np
from loguru import logger
from pydantic import BaseModel, ValidationError, model_validator
from pydantic_core import PydanticUndefined

from image_etl.distributions import Bernoulli, Normal, Uniform, UniformInt
from image_etl.errors import ConfigurationError
from image_etl.geometry import Point, Size

# Output element types accepted by ``type_string``.
OUTPUT_TYPES: dict[str, np.dtype] = {
    "uint8_t": np.dtype(np.uint8),
    "int8_t": np.dtype(np.int8),
    "uint16_t": np.dtype(np.uint16),
    "int16_t": np.dtype(np.int16),
    "uint32_t": np.dtype(np.uint32),
    "int32_t": np.dtype(np.int32),
    "float": np.dtype(np.float32),
    "double": np.dtype(np.float64),
}
OUTPUT_TYPES.update({dtype.name: dtype for dtype in list(OUTPUT_TYPES.values())})


class FieldSpec(NamedTuple):
    """One schema row: field name, whether it is required, and its default."""

    name: str
    required: bool
    default: Any


def config_fields(model: type[BaseModel]) -> list[FieldSpec]:
    """Return the ordered ``(name, required, default)`` schema of ``model``."""
    specs = []
    for name, info in model.model_fields.items():
        default = None if info.default is PydanticUndefined else info.default
        specs.append(FieldSpec(name, info.is_required(), default))
    return specs


class ImageConfig(BaseModel, frozen=True, extra="forbid"):
    """Configuration for single-view image extraction, transform and load.

    All fields are validated at construction time.  Frozen — no mutation
    after creation.  Any failure is raised as ``ConfigurationError`` so a
    configuration is never partially constructed.
    """

    # Required
    height: int
    width: int

    # Optional scalars
    channels: int = 3
    channel_major: bool = True
    type_string: str = "uint8_t"
    seed: int = 0
    center: bool = True
    flip_enable: bool = False
    do_area_scale: bool = False

    # Optional distributions
    angle: UniformInt = UniformInt(low=0, high=0)
    scale: Uniform = Uniform(low=1.0, high=1.0)
    horizontal_distortion: Uniform = Uniform(low=1.0, high=1.0)
    lighting: Normal = Normal(mean=0.0, stddev=0.0)
    photometric: Uniform = Uniform(low=0.0, high=0.0)
    crop_offset: Uniform = Uniform(low=0.5, high=0.5)

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise ConfigurationError.from_validation(
                type(self).__name__, exc
            ) from exc

    @classmethod
    def from_document(cls, document: Mapping[str, Any] | None) -> ImageConfig:
        """Build a configuration from a parsed key/value document."""
        if document is None:
            raise ConfigurationError(f"missing {cls.__name__} document")
        config = cls(**dict(document))
        logger.debug(f"{cls.__name__}: shape={config.shape} dtype={config.output_dtype}")
        return config

    @model_validator(mode="after")
    def _validate_image(self) -> ImageConfig:
        if self.crop_offset.low > self.crop_offset.high:
            raise ValueError("invalid crop_offset")
        if self.scale.low <= 0:
            raise ValueError(f"invalid scale: low must be > 0, got {self.scale.low}")
        if self.horizontal_distortion.low <= 0:
            raise ValueError(
                "invalid horizontal_distortion: low must be > 0, "
                f"got {self.horizontal_distortion.low}"
            )
        if self.width <= 0:
            raise ValueError(f"invalid width: {self.width}")
        if self.height <= 0:
            raise ValueError(f"invalid height: {self.height}")
        if self.channels not in (1, 3):
            raise ValueError(
                f"Unsupported number of channels in image: {self.channels}"
            )
        if self.type_string not in OUTPUT_TYPES:
            raise ValueError(f"invalid type_string: {self.type_string!r}")
        return self

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------
    @property
    def flip_distribution(self) -> Bernoulli:
        return Bernoulli(p=0.5 if self.flip_enable else 0.0)

    @property
    def crop_offset_distribution(self) -> Uniform:
        """Offset distribution used for crop placement.

        A non-centered config always spans the full ``[0, 1]`` range.
        """
        if not self.center:
            return Uniform(low=0.0, high=1.0)
        return self.crop_offset

    @property
    def output_size(self) -> Size:
        return Size(self.width, self.height)

    @property
    def image_shape(self) -> tuple[int, int, int]:
        """Shape of one output image, ordered by ``channel_major``."""
        if self.channel_major:
            return (self.channels, self.height, self.width)
        return (self.height, self.width, self.channels)

    @property
    def shape(self) -> tuple[int, ...]:
        return self.image_shape

    @property
    def output_dtype(self) -> np.dtype:
        return OUTPUT_TYPES[self.type_string]

    @property
    def element_size(self) -> int:
        return self.output_dtype.itemsize

    @property
    def byte_size(self) -> int:
        """Bytes needed to hold one fully loaded record."""
        return math.prod(self.shape) * self.element_size


# Canonical multicrop placements, in output order.
CENTER = Point(0.5, 0.5)
CORNER_OFFSETS = (
    Point(0.0, 0.0),  # NW
    Point(0.0, 1.0),  # SW
    Point(1.0, 0.0),  # NE
    Point(1.0, 1.0),  # SE
)


class MulticropConfig(ImageConfig):
    """Configuration for deterministic multi-view evaluation crops.

    Inherits every ``ImageConfig`` field.  ``shape`` gains a leading view
    axis of ``len(multicrop_scales) * crops_per_scale * (2 if include_flips
    else 1)``.
    """

    multicrop_scales: list[float]
    crops_per_scale: int = 5
    include_flips: bool = True

    @model_validator(mode="after")
    def _validate_multicrop(self) -> MulticropConfig:
        if self.crops_per_scale not in (1, 5):
            raise ValueError("crops_per_scale must be 1 or 5")
        if not self.multicrop_scales:
            raise ValueError("multicrop_scales must not be empty")
        for s in self.multicrop_scales:
            if not 0.0 < s < 1.0:
                raise ValueError(
                    "multicrop_scales values must be between 0.0 and 1.0"
                )
        return self

    @property
    def offsets(self) -> tuple[Point, ...]:
        if self.crops_per_scale == 5:
            return (CENTER, *CORNER_OFFSETS)
        return (CENTER,)

    @property
    def num_views(self) -> int:
        flips = 2 if self.include_flips else 1
        return len(self.multicrop_scales) * self.crops_per_scale * flips

    @property
    def shape(self) -> tuple[int, ...]:
        return (self.num_views, *self.image_shape)
