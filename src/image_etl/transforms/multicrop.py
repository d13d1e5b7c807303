"""Deterministic multi-view crops for evaluation."""

from __future__ import annotations

from image_etl.config import MulticropConfig
from image_etl.decoded import Decoded
from image_etl.geometry import Box, linear_scale, max_proportional, shift, to_box
from image_etl.params import TransformParams
from image_etl.transforms import functional as F


class MulticropTransformer:
    """Produce a fixed grid of crops (and flips) per scale.

    For every configured scale, in order, a box of ``scale`` times the largest
    output-proportional box is placed at each canonical offset (center, then
    NW, SW, NE, SE when ``crops_per_scale == 5``), resized to the output size
    and appended.  With ``include_flips`` each crop is followed immediately by
    its horizontal mirror.

    Sampled parameters are ignored; the output depends on the config alone.
    """

    def __init__(self, config: MulticropConfig) -> None:
        self._cfg = config

    def cropboxes(self, decoded: Decoded) -> list[Box]:
        in_size = decoded.image_size
        base = max_proportional(in_size, self._cfg.output_size)
        boxes = []
        for scale in self._cfg.multicrop_scales:
            size = linear_scale(base, scale)
            for offset in self._cfg.offsets:
                origin = shift(in_size, size, offset.x, offset.y)
                boxes.append(to_box(origin, size, in_size))
        return boxes

    def transform(
        self, params: TransformParams | None, decoded: Decoded
    ) -> Decoded | None:
        output_size = (self._cfg.width, self._cfg.height)
        boxes = self.cropboxes(decoded)
        views = []
        for img in decoded:
            for box in boxes:
                view = F.resize(F.crop(img, box), output_size)
                views.append(view)
                if self._cfg.include_flips:
                    views.append(F.hflip(view))

        rc = Decoded()
        if not rc.add(views):
            return None
        return rc
