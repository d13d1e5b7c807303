"""In-memory set of equally sized decoded images."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import numpy as np

from image_etl.geometry import Size


def image_size(image: np.ndarray) -> Size:
    """``(width, height)`` of an HWC image array."""
    return Size(image.shape[1], image.shape[0])


class Decoded:
    """Ordered list of HWC ``uint8`` image arrays sharing one width and height.

    ``add`` never raises on a size mismatch: it returns ``False`` and leaves
    the instance unchanged, so callers can drop the record and move on.
    """

    def __init__(self, images: Iterable[np.ndarray] | None = None) -> None:
        self._images: list[np.ndarray] = []
        if images is not None and not self.add(list(images)):
            raise ValueError("images passed to Decoded must share one size")

    def add(self, image: np.ndarray | list[np.ndarray]) -> bool:
        """Append one image or a list of images.

        A list is added atomically: if any member disagrees in size with the
        images already held (or with each other), nothing is added.

        Returns:
            ``True`` if the image(s) were appended.
        """
        batch = image if isinstance(image, list) else [image]
        if not batch:
            return True
        expected = self.image_size if self._images else image_size(batch[0])
        if any(image_size(img) != expected for img in batch):
            return False
        self._images.extend(batch)
        return True

    @property
    def image_count(self) -> int:
        return len(self._images)

    @property
    def image_size(self) -> Size:
        if not self._images:
            raise IndexError("Decoded holds no images")
        return image_size(self._images[0])

    def get_image(self, index: int) -> np.ndarray:
        return self._images[index]

    def __len__(self) -> int:
        return len(self._images)

    def __getitem__(self, index: int) -> np.ndarray:
        return self._images[index]

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self._images)

    def __repr__(self) -> str:
        if not self._images:
            return "Decoded(empty)"
        w, h = self.image_size
        return f"Decoded(count={len(self._images)}, size={w}x{h})"
