"""Write transformed images into caller-owned output buffers.

Each image occupies ``channels * height * width * element_size`` bytes,
laid out either planar (channel-major, one contiguous plane per channel) or
interleaved (channel-minor, all channels of a pixel adjacent).  Pixels are
converted element-wise from ``uint8`` to the configured output type.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

from image_etl.config import ImageConfig
from image_etl.decoded import Decoded


def convert_mix_channels(
    source: Sequence[np.ndarray],
    target: Sequence[np.ndarray],
    from_to: Sequence[int],
) -> None:
    """Copy channels from ``source`` arrays into ``target`` arrays, converting type.

    Channels are numbered consecutively across all arrays of a side: an HWC
    source with 3 channels contributes channels 0..2, a 2-D target plane
    contributes one.  ``from_to`` is a flat list of ``(src, dst)`` channel
    index pairs.
    """
    if len(from_to) % 2:
        raise ValueError("from_to must hold (source, target) index pairs")

    def _channels(arrays: Sequence[np.ndarray]) -> list[tuple[np.ndarray, int | None]]:
        flat: list[tuple[np.ndarray, int | None]] = []
        for arr in arrays:
            if arr.ndim == 2:
                flat.append((arr, None))
            else:
                flat.extend((arr, ch) for ch in range(arr.shape[2]))
        return flat

    src_channels = _channels(source)
    dst_channels = _channels(target)
    for src_idx, dst_idx in zip(from_to[0::2], from_to[1::2], strict=True):
        src, s_ch = src_channels[src_idx]
        dst, d_ch = dst_channels[dst_idx]
        values = src if s_ch is None else src[:, :, s_ch]
        if d_ch is None:
            dst[...] = values.astype(dst.dtype, copy=False)
        else:
            dst[:, :, d_ch] = values.astype(dst.dtype, copy=False)


def _byte_view(buffer: Any) -> np.ndarray:
    """Writable flat ``uint8`` view over any C-contiguous writable buffer."""
    view = memoryview(buffer)
    if view.readonly:
        raise ValueError("output buffer is read-only")
    return np.frombuffer(view.cast("B"), dtype=np.uint8)


class ImageLoader:
    """Load a ``Decoded`` set into ``buffers[0]`` using the config's layout."""

    def __init__(self, config: ImageConfig) -> None:
        self._cfg = config

    def image_stride(self, decoded: Decoded) -> int:
        """Bytes occupied by one image of ``decoded`` in the output buffer."""
        width, height = decoded.image_size
        return int(self._cfg.channels * width * height * self._cfg.element_size)

    def load(self, buffers: Sequence[Any], decoded: Decoded) -> None:
        cfg = self._cfg
        raw = _byte_view(buffers[0])
        stride = self.image_stride(decoded)
        expected = stride * decoded.image_count
        if raw.nbytes != expected:
            raise ValueError(
                f"output buffer holds {raw.nbytes} bytes, expected {expected} "
                f"({decoded.image_count} image(s) x {stride} bytes)"
            )

        width, height = (int(v) for v in decoded.image_size)
        dtype = cfg.output_dtype
        identity = [i for ch in range(cfg.channels) for i in (ch, ch)]
        for i, img in enumerate(decoded):
            out = raw[i * stride : (i + 1) * stride].view(dtype)
            if cfg.channel_major:
                planes = out.reshape(cfg.channels, height, width)
                target = [planes[ch] for ch in range(cfg.channels)]
            else:
                target = [out.reshape(height, width, cfg.channels)]
            convert_mix_channels([img], target, identity)
