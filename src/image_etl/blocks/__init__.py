"""Block sources and sequential block iteration."""

from image_etl.blocks.base import BlockLoader, BufferPair, Record, blocks_for
from image_etl.blocks.http import MacrobatchLoader
from image_etl.blocks.iterator import BlockIterator
from image_etl.blocks.memory import MemoryBlockLoader

__all__ = [
    "BlockIterator",
    "BlockLoader",
    "BufferPair",
    "MacrobatchLoader",
    "MemoryBlockLoader",
    "Record",
    "blocks_for",
]
