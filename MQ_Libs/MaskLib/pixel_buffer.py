"""
Pixel buffer and mask data model for Marquee.

A PixelBuffer is a row-major RGBA byte buffer (8 bits per channel). The same
type is used for source images and for masks: a mask stores its selection
strength redundantly in all four channels (R = G = B = A), so every mask is
also a valid grayscale image.

Classes:
    PixelBuffer: Immutable RGBA buffer with Pillow interop

Functions:
    coerce_buffer: Accept a PixelBuffer or a PIL Image
    ensure_same_size: Fail fast on mismatched buffers
"""

from dataclasses import dataclass
from typing import Any, Tuple

import numpy as np
from PIL import Image

from MQ_Libs.constants import CHANNELS, MASK_SELECTED, MASK_UNSELECTED, SELECTION_THRESHOLD

RgbaColor = Tuple[int, int, int, int]


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """
    Immutable RGBA pixel buffer.

    Attributes:
        width: Buffer width in pixels (> 0)
        height: Buffer height in pixels (> 0)
        data: Read-only uint8 array of shape (height, width, 4)
    """
    width: int
    height: int
    data: np.ndarray

    def __post_init__(self) -> None:
        width = int(self.width)
        height = int(self.height)
        if width <= 0 or height <= 0:
            raise ValueError(f"Buffer dimensions must be positive, got {width}x{height}")

        arr = np.asarray(self.data)
        expected = width * height * CHANNELS
        if arr.size != expected:
            raise ValueError(
                f"Buffer length {arr.size} does not match {width}x{height}x{CHANNELS} = {expected}"
            )

        arr = np.array(arr, dtype=np.uint8, copy=True).reshape(height, width, CHANNELS)
        arr.setflags(write=False)

        object.__setattr__(self, "width", width)
        object.__setattr__(self, "height", height)
        object.__setattr__(self, "data", arr)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes) -> "PixelBuffer":
        """Build a buffer from raw row-major RGBA bytes."""
        return cls(width, height, np.frombuffer(bytes(data), dtype=np.uint8))

    @classmethod
    def from_image(cls, image: Any) -> "PixelBuffer":
        """
        Build a buffer from a PIL Image.

        The image is converted to RGBA first.

        Raises:
            TypeError: If image is not a PIL Image
        """
        if not hasattr(image, "mode") or not hasattr(image, "convert"):
            raise TypeError(f"Expected PIL Image, got {type(image)}")
        rgba = image.convert("RGBA")
        width, height = rgba.size
        return cls(width, height, np.asarray(rgba, dtype=np.uint8))

    @classmethod
    def from_alpha(cls, alpha: np.ndarray) -> "PixelBuffer":
        """
        Build a mask from an alpha plane of shape (height, width).

        Values are clipped to [0, 255] and mirrored into R, G and B.
        """
        plane = np.clip(np.asarray(alpha), 0, 255).astype(np.uint8)
        if plane.ndim != 2:
            raise ValueError(f"Alpha plane must be 2D, got shape {plane.shape}")
        height, width = plane.shape
        return cls(width, height, np.repeat(plane[:, :, np.newaxis], CHANNELS, axis=2))

    @classmethod
    def from_selection(cls, selected: np.ndarray) -> "PixelBuffer":
        """Build a binary mask (0/255) from a boolean indicator array."""
        plane = np.where(np.asarray(selected, dtype=bool), MASK_SELECTED, MASK_UNSELECTED)
        return cls.from_alpha(plane)

    @classmethod
    def blank(cls, width: int, height: int) -> "PixelBuffer":
        """An all-transparent buffer (an empty mask)."""
        return cls(width, height, np.zeros((int(height), int(width), CHANNELS), dtype=np.uint8))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def alpha(self) -> np.ndarray:
        """Alpha plane (height, width), read-only view."""
        return self.data[:, :, 3]

    def selected(self) -> np.ndarray:
        """Boolean array of selected pixels (alpha > 127)."""
        return self.alpha > SELECTION_THRESHOLD

    def pixel(self, x: int, y: int) -> RgbaColor:
        r, g, b, a = (int(v) for v in self.data[y, x])
        return r, g, b, a

    def to_bytes(self) -> bytes:
        return self.data.tobytes()

    def to_image(self) -> Any:
        """Return a new RGBA PIL Image with the buffer contents."""
        return Image.fromarray(np.ascontiguousarray(self.data))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.size == other.size and np.array_equal(self.data, other.data)

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"


def coerce_buffer(value: Any) -> PixelBuffer:
    """
    Accept a PixelBuffer or a PIL Image and return a PixelBuffer.

    Raises:
        TypeError: If value is neither
    """
    if isinstance(value, PixelBuffer):
        return value
    if hasattr(value, "mode") and hasattr(value, "convert"):
        return PixelBuffer.from_image(value)
    raise TypeError(f"Expected PixelBuffer or PIL Image, got {type(value)}")


def ensure_same_size(first: PixelBuffer, second: PixelBuffer) -> None:
    if first.size != second.size:
        raise ValueError(
            f"Buffer dimensions differ: {first.width}x{first.height} "
            f"vs {second.width}x{second.height}"
        )
