"""Block source interface and the buffer pair it fills."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field

Record = tuple[bytes, bytes]


@dataclass
class BufferPair:
    """Parallel lists of record payloads and their targets for one block."""

    data: list[bytes] = field(default_factory=list)
    target: list[bytes] = field(default_factory=list)

    def append(self, data: bytes, target: bytes) -> None:
        self.data.append(data)
        self.target.append(target)

    def clear(self) -> None:
        self.data.clear()
        self.target.clear()

    def records(self) -> Iterator[Record]:
        return zip(self.data, self.target, strict=True)

    def __len__(self) -> int:
        return len(self.data)


def blocks_for(object_count: int, block_size: int) -> int:
    """Number of blocks needed for ``object_count`` records; the last may be short."""
    if block_size <= 0:
        raise ValueError(f"block_size must be > 0, got {block_size}")
    return math.ceil(object_count / block_size)


class BlockLoader(ABC):
    """A source of fixed-size record blocks addressed by index."""

    @abstractmethod
    def load_block(self, dest: BufferPair, block_num: int) -> None:
        """Append every record of block ``block_num`` to ``dest``."""

    @abstractmethod
    def object_count(self) -> int:
        """Total number of records across all blocks."""

    @abstractmethod
    def block_count(self) -> int:
        """Number of blocks an epoch consists of."""
