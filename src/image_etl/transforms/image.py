"""Apply sampled ``TransformParams`` to every image of a record."""

from __future__ import annotations

from loguru import logger

from image_etl.decoded import Decoded
from image_etl.params import TransformParams
from image_etl.transforms import functional as F


class ImageTransformer:
    """Rotate, crop, resize, jitter, light and flip each image in order.

    The crop box is trusted as produced by ``ParamFactory``, which keeps it
    inside the source bounds; it is not re-validated here.
    """

    def transform(
        self, params: TransformParams, decoded: Decoded
    ) -> Decoded | None:
        """Return the transformed images, or ``None`` if their sizes disagree."""
        results = []
        for img in decoded:
            out = F.rotate(img, params.angle)
            out = F.crop(out, params.cropbox)
            out = F.resize(out, params.output_size)
            out = F.cbs_jitter(out, params.photometric)
            out = F.lighting(out, params.lighting, params.color_noise_std)
            if params.flip:
                out = F.hflip(out)
            results.append(out)

        rc = Decoded()
        if not rc.add(results):
            logger.warning(
                f"Transformed images disagree in size; dropping record of "
                f"{decoded.image_count} image(s)"
            )
            return None
        return rc
