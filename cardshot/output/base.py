from abc import ABC, abstractmethod

from cardshot.perception.frame import Frame


class ClipboardSink(ABC):
    """Destination for a captured frame."""
    @abstractmethod
    def set_image(self, frame: Frame):
        """Make the frame the clipboard's image content. Raises ClipboardError."""
        pass
