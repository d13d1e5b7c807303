"""Block loader over records already held in memory."""

from __future__ import annotations

from collections.abc import Sequence

from image_etl.blocks.base import BlockLoader, BufferPair, Record, blocks_for


class MemoryBlockLoader(BlockLoader):
    """Serve ``records`` in consecutive runs of ``block_size``.

    The final block holds the remainder when ``len(records)`` is not a
    multiple of ``block_size``.
    """

    def __init__(self, records: Sequence[Record], block_size: int) -> None:
        self._records = list(records)
        self._block_size = block_size
        self._block_count = blocks_for(len(self._records), block_size)

    def load_block(self, dest: BufferPair, block_num: int) -> None:
        if not 0 <= block_num < self._block_count:
            raise IndexError(
                f"block {block_num} out of range for {self._block_count} block(s)"
            )
        start = block_num * self._block_size
        for data, target in self._records[start : start + self._block_size]:
            dest.append(data, target)

    def object_count(self) -> int:
        return len(self._records)

    def block_count(self) -> int:
        return self._block_count
