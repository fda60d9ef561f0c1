from enum import Enum
from dataclasses import dataclass

import numpy as np

from cardshot.core.errors import DecodeError


class PixelLayout(Enum):
    """Channel layout of a decoded frame. RGBA reserves its 4th byte for alpha/padding."""
    RGB = 3
    RGBA = 4

    @property
    def channels(self) -> int:
        return self.value

    @property
    def has_padding(self) -> bool:
        return self is PixelLayout.RGBA


@dataclass(frozen=True, eq=False)
class Frame:
    """A decoded image: uint8 pixels of shape (height, width, layout.channels)."""
    pixels: np.ndarray
    layout: PixelLayout

    def __post_init__(self):
        pixels = self.pixels
        if not isinstance(pixels, np.ndarray) or pixels.dtype != np.uint8:
            raise DecodeError(f"Frame pixels must be a uint8 array, got {getattr(pixels, 'dtype', type(pixels))}")
        if pixels.ndim != 3 or pixels.shape[2] != self.layout.channels:
            raise DecodeError(f"Frame shape {pixels.shape} does not match layout {self.layout.name}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise DecodeError("Frame has no pixels")

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def bytes_per_line(self) -> int:
        return self.width * self.layout.channels

    @property
    def data(self) -> bytes:
        """Raw pixel bytes in row-major order."""
        return np.ascontiguousarray(self.pixels).tobytes()

    @classmethod
    def from_bytes(cls, data: bytes, width: int, height: int, layout: PixelLayout) -> "Frame":
        if width <= 0 or height <= 0:
            raise DecodeError(f"Invalid frame size {width}x{height}")
        expected = width * height * layout.channels
        if len(data) != expected:
            raise DecodeError(f"Expected {expected} bytes for {width}x{height} {layout.name}, got {len(data)}")
        pixels = np.frombuffer(data, dtype=np.uint8).reshape((height, width, layout.channels)).copy()
        return cls(pixels, layout)


def is_blank(frame: Frame) -> bool:
    """
    A frame is blank when every inspected byte is zero. The alpha/padding
    byte of RGBA pixels is never inspected.
    """
    pixels = frame.pixels
    if frame.layout.has_padding:
        pixels = pixels[:, :, :3]
    return not np.any(pixels)
