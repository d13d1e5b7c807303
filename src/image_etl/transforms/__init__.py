"""Per-record image transforms.

``ImageTransformer`` applies randomly sampled ``TransformParams`` for
training; ``MulticropTransformer`` produces a fixed set of evaluation views
from the config alone.  Both return a new ``Decoded`` or ``None`` when the
resulting images disagree in size.
"""

from image_etl.transforms.image import ImageTransformer
from image_etl.transforms.multicrop import MulticropTransformer

__all__ = [
    "ImageTransformer",
    "MulticropTransformer",
]
