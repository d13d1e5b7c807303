"""Fetch macrobatches from a remote dataset service over HTTP.

The service shards a tagged dataset and returns each macrobatch as one
archive body.  Splitting that body into ``(data, target)`` records is left to
an injected ``deserialize`` callable.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

import requests
from loguru import logger

from image_etl.blocks.base import BlockLoader, BufferPair, Record, blocks_for
from image_etl.errors import TransportError

Deserializer = Callable[[bytes], Iterable[Record]]

_HEADERS = {"Accept-Encoding": "deflate"}


class MacrobatchLoader(BlockLoader):
    """Block loader backed by the ``/macrobatch`` HTTP endpoint.

    The service has no count query, so the caller supplies ``object_count``
    (typically from the dataset manifest) and blocks are ``block_size``
    records each.

    Args:
        base_url: Service root, without a trailing ``/macrobatch``.
        tag_id: Dataset tag to read.
        shard_count: Number of shards the dataset is split into.
        shard_index: Shard served by this loader; ``0 <= shard_index <
            shard_count``.
        block_size: Maximum number of records per macrobatch.
        object_count: Records available to this shard.
        deserialize: Turns a response body into ``(data, target)`` records.
        session: Optional ``requests.Session`` to reuse; one is created
            otherwise so connections persist across blocks.  The loader is
            a context manager and closes the session on exit.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        tag_id: int,
        shard_count: int,
        shard_index: int,
        block_size: int,
        object_count: int,
        deserialize: Deserializer,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        if not 0 <= shard_index < shard_count:
            raise ValueError(
                f"shard_index ({shard_index}) must be in [0, {shard_count})"
            )
        self._base_url = base_url.rstrip("/")
        self._tag_id = tag_id
        self._shard_count = shard_count
        self._shard_index = shard_index
        self._block_size = block_size
        self._object_count = object_count
        self._deserialize = deserialize
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout

    def url(self, block_num: int) -> str:
        return (
            f"{self._base_url}/macrobatch?"
            f"macro_batch_index={block_num}"
            f"&macro_batch_max_size={self._block_size}"
            f"&tag_id={self._tag_id}"
            f"&shard_count={self._shard_count}"
            f"&shard_index={self._shard_index}"
        )

    def get(self, url: str) -> bytes:
        """GET ``url`` and return the response body, following redirects."""
        try:
            response = self._session.get(
                url,
                headers=_HEADERS,
                timeout=self._timeout,
                allow_redirects=True,
            )
        except requests.RequestException as exc:
            raise TransportError(url, 0, str(exc)) from exc
        if not response.ok:
            raise TransportError(url, response.status_code, response.reason or "")
        return response.content

    def load_block(self, dest: BufferPair, block_num: int) -> None:
        url = self.url(block_num)
        body = self.get(url)
        count = 0
        for data, target in self._deserialize(body):
            dest.append(data, target)
            count += 1
        logger.debug(f"Loaded {count} record(s) from {url}")

    def object_count(self) -> int:
        return self._object_count

    def block_count(self) -> int:
        return blocks_for(self._object_count, self._block_size)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> MacrobatchLoader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
