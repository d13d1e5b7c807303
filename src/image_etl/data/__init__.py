"""torch data pipeline over block sources."""

from image_etl.data.dataset import BlockImageDataset

__all__ = ["BlockImageDataset"]
