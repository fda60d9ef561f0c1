import logging

from typing import List, Optional, Union

import numpy as np

from cardshot.core.errors import StreamOpenError, FrameReadError, DecodeError
from cardshot.perception.frame import Frame, PixelLayout
from cardshot.perception.engines.base import BaseCaptureEngine

logger = logging.getLogger(__name__)

ScriptItem = Union[np.ndarray, BaseException]


class MockCaptureEngine(BaseCaptureEngine):
    """
    A scripted capture engine for tests and dry runs.

    `read_raw` first replays `script` in order: arrays are returned, exceptions
    are raised as FrameReadError. Once the script is exhausted it generates
    frames itself, `blank_frames` all-black warm-up frames followed by frames
    carrying a 24-bit counter in the first pixel.
    """

    def __init__(self, width: int = 1920, height: int = 1080, layout: PixelLayout = PixelLayout.RGBA,
                 script: Optional[List[ScriptItem]] = None, blank_frames: int = 0,
                 open_error: Optional[str] = None):
        self._width = width
        self._height = height
        self.layout = layout
        self._script = list(script or [])
        self._blank_frames = blank_frames
        self._open_error = open_error

        self.is_open = False
        self.frame_count = 0
        self.start_calls = 0
        self.read_calls = 0
        self.stop_calls = 0
        self.release_calls = 0
        logger.info(f"Initialized MockCaptureEngine with resolution {self._width}x{self._height} ({layout.name})")

    def start(self):
        """Starts the mock stream, or fails if an open error was configured."""
        self.start_calls += 1
        if self._open_error is not None:
            raise StreamOpenError(f"Failed to open mock camera: {self._open_error}")
        if self.is_open:
            logger.warning("MockCaptureEngine stream is already open.")
            return
        self.is_open = True
        self.frame_count = 0
        logger.info("MockCaptureEngine started.")

    def read_raw(self) -> np.ndarray:
        self.read_calls += 1
        if not self.is_open:
            raise FrameReadError("Mock stream is not open")

        if self._script:
            item = self._script.pop(0)
            if isinstance(item, BaseException):
                raise FrameReadError(f"Failed to read frame: {item}") from item
            return item

        image = self._generate_frame()
        self.frame_count += 1
        return image

    def _generate_frame(self) -> np.ndarray:
        image = np.zeros((self._height, self._width, self.layout.channels), dtype=np.uint8)
        if self.layout.has_padding:
            image[:, :, 3] = 255  # opaque, still blank

        if self.frame_count < self._blank_frames:
            return image

        # Store a 1-based frame counter as a 24-bit integer in the RGB channels of the top-left pixel
        count = self.frame_count - self._blank_frames + 1
        image[0, 0, 0] = (count >> 16) & 0xFF
        image[0, 0, 1] = (count >> 8) & 0xFF
        image[0, 0, 2] = count & 0xFF
        return image

    def decode(self, raw: np.ndarray) -> Frame:
        if not isinstance(raw, np.ndarray):
            raise DecodeError(f"Expected a numpy array, got {type(raw).__name__}")
        return Frame(raw.copy(), self.layout)

    def stop(self):
        """Stops the mock stream."""
        self.stop_calls += 1
        if self.is_open:
            self.is_open = False
            logger.info("MockCaptureEngine stopped.")

    def release(self):
        self.release_calls += 1
        logger.info("MockCaptureEngine released.")

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height
