import logging

import pytest
import numpy as np

from cardshot.output.base import ClipboardSink
from cardshot.perception.frame import Frame, PixelLayout


logger = logging.getLogger(__name__)


def pytest_addoption(parser):
    parser.addoption("--run-hardware", action="store_true", default=False,
                     help="Run tests that need a real capture card attached")


def pytest_configure(config):
    config.addinivalue_line("markers", "hardware: needs a real capture card attached")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-hardware"):
        return
    skip_hardware = pytest.mark.skip(reason="needs --run-hardware")
    for item in items:
        if "hardware" in item.keywords:
            item.add_marker(skip_hardware)


# --- Helpers shared by the test modules ---

def blank_pixels(height: int = 4, width: int = 6, layout: PixelLayout = PixelLayout.RGBA, alpha: int = 255) -> np.ndarray:
    """An all-black image. RGBA images get the given alpha so only the padding byte is set."""
    pixels = np.zeros((height, width, layout.channels), dtype=np.uint8)
    if layout.has_padding:
        pixels[:, :, 3] = alpha
    return pixels


def content_pixels(height: int = 4, width: int = 6, layout: PixelLayout = PixelLayout.RGBA, seed: int = 0) -> np.ndarray:
    """A deterministic image with non-zero colour content."""
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, size=(height, width, layout.channels), dtype=np.uint8)
    pixels[0, 0, 0] = 200
    return pixels


class StubClipboardSink(ClipboardSink):
    """Records the frames it receives instead of touching the system clipboard."""

    def __init__(self, error: Exception = None):
        self.frames = []
        self.error = error

    def set_image(self, frame: Frame):
        if self.error is not None:
            raise self.error
        self.frames.append((frame.width, frame.height, frame.layout, frame.data))


@pytest.fixture
def stub_sink():
    return StubClipboardSink()
