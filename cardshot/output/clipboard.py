import logging

from PySide6.QtGui import QGuiApplication, QImage

from cardshot.core.errors import ClipboardError
from cardshot.output.base import ClipboardSink
from cardshot.perception.frame import Frame, PixelLayout


logger = logging.getLogger(__name__)

QIMAGE_FORMATS = {
    PixelLayout.RGB: QImage.Format.Format_RGB888,
    PixelLayout.RGBA: QImage.Format.Format_RGBA8888,
}


def frame_to_qimage(frame: Frame) -> QImage:
    """Builds a QImage that owns a copy of the frame's pixels."""
    data = frame.data
    image = QImage(data, frame.width, frame.height, frame.bytes_per_line, QIMAGE_FORMATS[frame.layout])
    # QImage only borrows `data`; copy() detaches it before `data` is freed
    return image.copy()


class QtClipboardSink(ClipboardSink):
    """Places frames on the system clipboard through Qt."""

    def set_image(self, frame: Frame):
        if QGuiApplication.instance() is None:
            raise ClipboardError("Failed to copy to clipboard: no Qt application is running")

        clipboard = QGuiApplication.clipboard()
        if clipboard is None:
            raise ClipboardError("Failed to copy to clipboard: system clipboard is unavailable")

        image = frame_to_qimage(frame)
        if image.isNull():
            raise ClipboardError(f"Failed to copy to clipboard: could not build a {frame.width}x{frame.height} image")

        clipboard.setImage(image)
        logger.info("Copied to clipboard")
