"""Tests for block sources and BlockIterator."""

from unittest.mock import MagicMock

import pytest
import requests

from image_etl.blocks import (
    BlockIterator,
    BlockLoader,
    BufferPair,
    MacrobatchLoader,
    MemoryBlockLoader,
    blocks_for,
)
from image_etl.errors import TransportError


class RecordingLoader(BlockLoader):
    """Block loader that records which block indices were requested."""

    def __init__(self, count: int) -> None:
        self.count = count
        self.requested: list[int] = []

    def load_block(self, dest: BufferPair, block_num: int) -> None:
        self.requested.append(block_num)
        dest.append(f"data{block_num}".encode(), f"target{block_num}".encode())

    def object_count(self) -> int:
        return self.count

    def block_count(self) -> int:
        return self.count


class TestBlockIterator:
    def test_wraps_after_count_reads(self) -> None:
        loader = RecordingLoader(3)
        it = BlockIterator(loader)
        dest = BufferPair()
        for _ in range(3):
            it.read(dest)
        assert it.index == 0
        assert loader.requested == [0, 1, 2]

    def test_second_epoch_repeats_order(self) -> None:
        loader = RecordingLoader(2)
        it = BlockIterator(loader)
        dest = BufferPair()
        for _ in range(5):
            it.read(dest)
        assert loader.requested == [0, 1, 0, 1, 0]
        assert it.index == 1

    def test_reset_returns_to_start(self) -> None:
        loader = RecordingLoader(4)
        it = BlockIterator(loader)
        it.read(BufferPair())
        it.read(BufferPair())
        it.reset()
        assert it.index == 0
        it.reset()
        assert it.index == 0
        it.read(BufferPair())
        assert loader.requested == [0, 1, 0]

    def test_single_block(self) -> None:
        it = BlockIterator(RecordingLoader(1))
        it.read(BufferPair())
        assert it.index == 0

    def test_count_fixed_at_construction(self) -> None:
        loader = RecordingLoader(3)
        it = BlockIterator(loader)
        loader.count = 10
        assert it.count == 3

    def test_empty_source_rejected(self) -> None:
        with pytest.raises(ValueError, match="no blocks"):
            BlockIterator(RecordingLoader(0))

    def test_read_fills_destination(self) -> None:
        it = BlockIterator(RecordingLoader(2))
        dest = BufferPair()
        it.read(dest)
        assert list(dest.records()) == [(b"data0", b"target0")]


class TestMemoryBlockLoader:
    def _records(self, n: int) -> list[tuple[bytes, bytes]]:
        return [(bytes([i]), bytes([i + 100])) for i in range(n)]

    def test_counts(self) -> None:
        loader = MemoryBlockLoader(self._records(10), block_size=4)
        assert loader.object_count() == 10
        assert loader.block_count() == 3

    def test_last_block_is_remainder(self) -> None:
        loader = MemoryBlockLoader(self._records(10), block_size=4)
        dest = BufferPair()
        loader.load_block(dest, 2)
        assert dest.data == [bytes([8]), bytes([9])]
        assert dest.target == [bytes([108]), bytes([109])]

    def test_out_of_range(self) -> None:
        loader = MemoryBlockLoader(self._records(4), block_size=4)
        with pytest.raises(IndexError):
            loader.load_block(BufferPair(), 1)

    def test_iterator_visits_every_record_once_per_epoch(self) -> None:
        records = self._records(7)
        it = BlockIterator(MemoryBlockLoader(records, block_size=3))
        seen = BufferPair()
        for _ in range(it.count):
            it.read(seen)
        assert list(seen.records()) == records
        assert it.index == 0


def test_blocks_for() -> None:
    assert blocks_for(0, 5) == 0
    assert blocks_for(5, 5) == 1
    assert blocks_for(6, 5) == 2
    with pytest.raises(ValueError, match="block_size"):
        blocks_for(5, 0)


class TestMacrobatchLoader:
    def _loader(self, session: MagicMock, **kwargs: object) -> MacrobatchLoader:
        params = {
            "base_url": "http://nds.example/",
            "tag_id": 7,
            "shard_count": 4,
            "shard_index": 1,
            "block_size": 100,
            "object_count": 250,
            "deserialize": lambda body: [(body, b"t0"), (body[::-1], b"t1")],
            "session": session,
        }
        params.update(kwargs)
        return MacrobatchLoader(**params)  # type: ignore[arg-type]

    def test_url(self) -> None:
        loader = self._loader(MagicMock())
        assert loader.url(3) == (
            "http://nds.example/macrobatch?macro_batch_index=3"
            "&macro_batch_max_size=100&tag_id=7&shard_count=4&shard_index=1"
        )

    def test_block_count(self) -> None:
        loader = self._loader(MagicMock())
        assert loader.object_count() == 250
        assert loader.block_count() == 3

    def test_load_block_deserializes_body(self) -> None:
        session = MagicMock()
        session.get.return_value = MagicMock(ok=True, content=b"abc")
        loader = self._loader(session)
        dest = BufferPair()
        loader.load_block(dest, 0)
        assert list(dest.records()) == [(b"abc", b"t0"), (b"cba", b"t1")]
        url = session.get.call_args.args[0]
        assert "macro_batch_index=0" in url

    def test_http_error_raises_transport_error(self) -> None:
        session = MagicMock()
        session.get.return_value = MagicMock(
            ok=False, status_code=503, reason="Service Unavailable"
        )
        loader = self._loader(session)
        with pytest.raises(TransportError, match="503") as exc_info:
            loader.load_block(BufferPair(), 2)
        assert exc_info.value.status == 503
        assert "macro_batch_index=2" in exc_info.value.url
        assert exc_info.value.reason == "Service Unavailable"

    def test_connection_error_raises_transport_error(self) -> None:
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("refused")
        loader = self._loader(session)
        with pytest.raises(TransportError, match="refused") as exc_info:
            loader.load_block(BufferPair(), 0)
        assert exc_info.value.status == 0

    def test_requests_deflate_per_request(self) -> None:
        session = MagicMock()
        session.headers = {}
        session.get.return_value = MagicMock(ok=True, content=b"abc")
        loader = self._loader(session)
        loader.load_block(BufferPair(), 0)
        assert session.get.call_args.kwargs["headers"] == {
            "Accept-Encoding": "deflate"
        }
        assert session.headers == {}

    def test_context_manager_closes_session(self) -> None:
        session = MagicMock()
        session.get.return_value = MagicMock(ok=True, content=b"abc")
        with self._loader(session) as loader:
            loader.load_block(BufferPair(), 0)
            session.close.assert_not_called()
        session.close.assert_called_once_with()

    def test_invalid_shard_index(self) -> None:
        with pytest.raises(ValueError, match="shard_index"):
            self._loader(MagicMock(), shard_index=4)
