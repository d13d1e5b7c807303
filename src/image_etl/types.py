"""Type aliases and TypedDicts for image_etl inter-module contracts."""

from typing import TypedDict

import torch


class ImageRecord(TypedDict):
    """One loaded record yielded by ``BlockImageDataset``.

    image: Tensor of ``config.shape`` and the configured output dtype.
    target: Raw target payload, passed through unchanged.
    """

    image: torch.Tensor
    target: bytes
