"""Compose extract → sample → transform → load for one record."""

from __future__ import annotations

from typing import Any

import numpy as np
from loguru import logger

from image_etl.config import ImageConfig, MulticropConfig
from image_etl.decoded import Decoded
from image_etl.extract import ImageExtractor
from image_etl.loader import ImageLoader
from image_etl.params import ParamFactory
from image_etl.transforms import ImageTransformer, MulticropTransformer


class ImageProvider:
    """Single-record image pipeline driven by one configuration.

    A ``MulticropConfig`` selects the deterministic multicrop transform;
    any other ``ImageConfig`` samples fresh ``TransformParams`` per record.

    Args:
        config: Validated image or multicrop configuration.
        rng: Optional random engine shared with the caller; defaults to one
            seeded from ``config.seed``.
    """

    def __init__(
        self, config: ImageConfig, rng: np.random.Generator | None = None
    ) -> None:
        self.config = config
        self.extractor = ImageExtractor(config)
        self.factory = ParamFactory(config, rng)
        self.loader = ImageLoader(config)
        self._multicrop: MulticropTransformer | None = None
        self._transformer = ImageTransformer()
        if isinstance(config, MulticropConfig):
            self._multicrop = MulticropTransformer(config)

    def transform(self, decoded: Decoded) -> Decoded | None:
        if self._multicrop is not None:
            return self._multicrop.transform(None, decoded)
        params = self.factory.make_params(decoded)
        return self._transformer.transform(params, decoded)

    def provide(self, data: bytes, buffer: Any) -> bool:
        """Decode, transform and load one record into ``buffer``.

        Returns:
            ``False`` if the transformed images disagreed in size and
            nothing was written.
        """
        decoded = self.extractor.extract(data)
        transformed = self.transform(decoded)
        if transformed is None:
            return False
        self.loader.load([buffer], transformed)
        return True

    def to_array(self, data: bytes) -> np.ndarray | None:
        """Like ``provide`` but allocates an array of ``config.shape``."""
        out = np.empty(self.config.shape, dtype=self.config.output_dtype)
        if not self.provide(data, out):
            logger.debug("Record produced mismatched image sizes; skipped")
            return None
        return out
