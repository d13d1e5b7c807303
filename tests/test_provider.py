"""Tests for ImageProvider and the extractor it builds on."""

import numpy as np
import pytest
from conftest import make_indexed_image

from image_etl.config import ImageConfig, MulticropConfig
from image_etl.errors import DecodeError
from image_etl.extract import ImageExtractor, encode
from image_etl.provider import ImageProvider


class TestImageExtractor:
    @pytest.mark.parametrize("channels", [1, 3])
    def test_extract(self, indexed_png: bytes, channels: int) -> None:
        cfg = ImageConfig(height=30, width=30, channels=channels)
        decoded = ImageExtractor(cfg).extract(indexed_png)
        assert decoded.image_count == 1
        assert decoded.image_size == (256, 256)
        assert decoded[0].shape == (256, 256, channels)

    def test_gray_source_promoted_to_rgb(self) -> None:
        gray = np.zeros((256, 256, 1), dtype=np.uint8)
        cfg = ImageConfig(height=30, width=30, channels=3)
        decoded = ImageExtractor(cfg).extract(encode(gray))
        assert decoded[0].shape == (256, 256, 3)

    def test_rgb_round_trip_is_lossless(
        self, indexed_image: np.ndarray, indexed_png: bytes
    ) -> None:
        cfg = ImageConfig(height=30, width=30)
        decoded = ImageExtractor(cfg).extract(indexed_png)
        np.testing.assert_array_equal(decoded[0], indexed_image)

    def test_garbage_raises_decode_error(self) -> None:
        cfg = ImageConfig(height=30, width=30)
        with pytest.raises(DecodeError, match="decode failure"):
            ImageExtractor(cfg).extract(b"not an image")


class TestImageProvider:
    def test_to_array_shape_and_dtype(self, indexed_png: bytes) -> None:
        cfg = ImageConfig(
            height=32,
            width=48,
            scale=[0.5, 1.0],
            angle=[-10, 10],
            flip_enable=True,
            type_string="float",
        )
        out = ImageProvider(cfg).to_array(indexed_png)
        assert out is not None
        assert out.shape == (3, 32, 48)
        assert out.dtype == np.float32

    def test_provide_into_buffer(self, indexed_png: bytes) -> None:
        cfg = ImageConfig(height=16, width=16, channel_major=False)
        buf = bytearray(cfg.byte_size)
        assert ImageProvider(cfg).provide(indexed_png, buf)
        assert any(buf)

    def test_multicrop_config_selects_multicrop(self, indexed_png: bytes) -> None:
        cfg = MulticropConfig(height=224, width=224, multicrop_scales=[0.875])
        out = ImageProvider(cfg).to_array(indexed_png)
        assert out is not None
        assert out.shape == (10, 3, 224, 224)
        # Center view, channel 0 holds the source column
        assert out[0, 0, 0, 0] == 16

    def test_same_seed_same_output(self) -> None:
        png = encode(make_indexed_image(128, 96))
        cfg = ImageConfig(
            height=24,
            width=24,
            seed=11,
            scale=[0.3, 0.9],
            center=False,
            photometric=[-0.2, 0.2],
        )
        a = [ImageProvider(cfg).to_array(png) for _ in range(2)]
        np.testing.assert_array_equal(a[0], a[1])

    def test_negative_seed(self, indexed_png: bytes) -> None:
        cfg = ImageConfig(height=8, width=8, seed=-1, center=False)
        out = ImageProvider(cfg).to_array(indexed_png)
        assert out is not None
        assert out.shape == (3, 8, 8)
