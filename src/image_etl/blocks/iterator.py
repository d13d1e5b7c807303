"""Sequential, epoch-wrapping iteration over a block source."""

from __future__ import annotations

from loguru import logger

from image_etl.blocks.base import BlockLoader, BufferPair


class BlockIterator:
    """Read blocks ``0 .. count - 1`` in order, then start over.

    ``count`` is fixed at construction from ``loader.block_count()``.  After
    the last block the index silently returns to 0; callers that care about
    epoch boundaries count reads themselves.

    Not thread-safe: use one iterator per consumer or guard it with a lock.
    """

    def __init__(self, loader: BlockLoader) -> None:
        self._loader = loader
        self._count = loader.block_count()
        self._index = 0
        if self._count <= 0:
            raise ValueError("block source reports no blocks")
        logger.debug(f"BlockIterator: {self._count} block(s) per epoch")

    @property
    def count(self) -> int:
        return self._count

    @property
    def index(self) -> int:
        return self._index

    def read(self, dest: BufferPair) -> None:
        """Load the current block into ``dest`` and advance."""
        self._loader.load_block(dest, self._index)
        self._index += 1
        if self._index == self._count:
            self.reset()

    def reset(self) -> None:
        self._index = 0
