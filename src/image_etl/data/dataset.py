"""Stream block records through the image pipeline as torch tensors."""

from __future__ import annotations

from collections.abc import Iterator

import torch
from loguru import logger
from torch.utils.data import IterableDataset

from image_etl.blocks import BlockIterator, BufferPair
from image_etl.errors import DecodeError
from image_etl.provider import ImageProvider
from image_etl.types import ImageRecord


class BlockImageDataset(IterableDataset[ImageRecord]):
    """Iterable dataset over every record of every block, one epoch per pass.

    Each pass resets the iterator and performs exactly ``iterator.count``
    reads.  Records that fail to decode, or whose images disagree in size
    after transformation, are skipped with a warning rather than ending the
    epoch.

    Meant for ``num_workers=0`` or one dataset per worker: the block iterator
    is not shared safely across processes.

    Args:
        iterator: Sequential block iterator over the record source.
        provider: Per-record pipeline turning encoded bytes into arrays.
    """

    def __init__(self, iterator: BlockIterator, provider: ImageProvider) -> None:
        self.iterator = iterator
        self.provider = provider

    def __iter__(self) -> Iterator[ImageRecord]:
        self.iterator.reset()
        skipped = 0
        buffers = BufferPair()
        for _ in range(self.iterator.count):
            block = self.iterator.index
            buffers.clear()
            self.iterator.read(buffers)
            for data, target in buffers.records():
                try:
                    arr = self.provider.to_array(data)
                except DecodeError as exc:
                    logger.warning(f"Skipping record in block {block}: {exc}")
                    skipped += 1
                    continue
                if arr is None:
                    skipped += 1
                    continue
                yield {"image": torch.from_numpy(arr), "target": target}
        if skipped:
            logger.warning(f"Skipped {skipped} record(s) this epoch")
