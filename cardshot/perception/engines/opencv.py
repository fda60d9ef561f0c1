import logging

import cv2
import numpy as np

from cardshot.core.config import CaptureConfig
from cardshot.core.errors import StreamOpenError, FrameReadError, DecodeError
from cardshot.perception.devices import DeviceInfo
from cardshot.perception.frame import Frame, PixelLayout
from cardshot.perception.engines.base import BaseCaptureEngine

logger = logging.getLogger(__name__)

BACKENDS = {
    'auto': cv2.CAP_ANY,
    'dshow': cv2.CAP_DSHOW,
    'msmf': cv2.CAP_MSMF,
    'v4l2': cv2.CAP_V4L2,
    'avfoundation': cv2.CAP_AVFOUNDATION,
}


class OpenCVCaptureEngine(BaseCaptureEngine):
    """A capture engine for UVC capture cards, backed by cv2.VideoCapture."""
    layout = PixelLayout.RGB

    def __init__(self, config: CaptureConfig, device: DeviceInfo):
        """Creates the engine for a device; the stream is not opened until start()."""
        self.config = config
        self.device = device
        self.api_preference = BACKENDS[config.backend]

        self._cap = None
        self._width = 0
        self._height = 0
        self.backend_name = config.backend
        logger.info(f"Created camera {device} with backend {self.backend_name}")

    @property
    def is_open(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    def start(self):
        """Opens the device and negotiates the highest resolution it accepts."""
        if self.is_open:
            logger.warning(f"Camera {self.device} is already streaming.")
            return

        try:
            self._cap = cv2.VideoCapture(self.device.index, self.api_preference)
        except cv2.error as e:
            raise StreamOpenError(f"Failed to open camera {self.device}: {e}") from e

        if not self._cap.isOpened():
            raise StreamOpenError(f"Failed to open camera {self.device}. Is another program using it?")

        # Drivers clamp oversized requests to the largest mode they support
        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.requested_width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.requested_height)
        self._width = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self._height = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        try:
            self.backend_name = self._cap.getBackendName()
        except cv2.error:
            pass

        logger.info(f"Opened camera with format {self.width}x{self.height} ({self.backend_name})")

    def read_raw(self) -> np.ndarray:
        if not self.is_open:
            raise FrameReadError(f"Camera {self.device} is not streaming.")
        try:
            ok, raw = self._cap.read()
        except cv2.error as e:
            raise FrameReadError(f"Failed to read frame from {self.device}: {e}") from e
        if not ok or raw is None:
            raise FrameReadError(f"Failed to read frame from {self.device}. Was the device unplugged?")
        return raw

    def decode(self, raw: np.ndarray) -> Frame:
        """Converts an OpenCV BGR/BGRA/grayscale image into a fresh RGB frame."""
        if not isinstance(raw, np.ndarray) or raw.size == 0:
            raise DecodeError("Captured frame is empty")
        if raw.dtype != np.uint8:
            raise DecodeError(f"Unsupported sample type {raw.dtype}")

        if raw.ndim == 2:
            code = cv2.COLOR_GRAY2RGB
        elif raw.ndim == 3 and raw.shape[2] == 3:
            code = cv2.COLOR_BGR2RGB
        elif raw.ndim == 3 and raw.shape[2] == 4:
            code = cv2.COLOR_BGRA2RGB
        else:
            raise DecodeError(f"Unsupported frame shape {raw.shape}")

        try:
            pixels = cv2.cvtColor(raw, code)
        except cv2.error as e:
            raise DecodeError(f"Failed to convert frame: {e}") from e
        return Frame(pixels, self.layout)

    def stop(self):
        """Stops streaming and closes the device."""
        if self._cap is not None:
            self._cap.release()
            logger.info(f"Stopped stream on camera {self.device}")

    def release(self):
        self._cap = None
        logger.info("Closed camera")

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height
