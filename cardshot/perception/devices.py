import re
import logging

from dataclasses import dataclass
from typing import Iterable, List

from cardshot.core.config import CaptureConfig
from cardshot.core.errors import NoDeviceFound


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeviceInfo:
    """A video input as reported by the operating system."""
    index: int
    name: str
    device_id: str = ""

    def __str__(self) -> str:
        return f"#{self.index} {self.name}"


class DeviceMatcher:
    """Decides whether a camera name belongs to a supported capture card."""

    def __init__(self, patterns: Iterable[str]):
        self.patterns = [re.compile(p) for p in patterns]

    @classmethod
    def from_config(cls, config: CaptureConfig) -> "DeviceMatcher":
        return cls(config.device_patterns)

    def matches(self, name: str) -> bool:
        return any(p.search(name) for p in self.patterns)


def list_video_devices() -> List[DeviceInfo]:
    """
    Enumerate the video inputs known to Qt Multimedia.

    The position in the returned list is used as the OpenCV device index,
    which holds for the default backend on each platform.
    """
    from PySide6.QtMultimedia import QMediaDevices

    devices = []
    for index, camera in enumerate(QMediaDevices.videoInputs()):
        device_id = camera.id().data().decode('utf-8', errors='replace')
        devices.append(DeviceInfo(index=index, name=camera.description(), device_id=device_id))
    logger.debug(f"Enumerated {len(devices)} video inputs: {[d.name for d in devices]}")
    return devices


def find_capture_card(devices: Iterable[DeviceInfo], matcher: DeviceMatcher) -> DeviceInfo:
    """
    Return the first device whose name matches.

    Raises:
        NoDeviceFound: listing every available device name.
    """
    devices = list(devices)
    for device in devices:
        if matcher.matches(device.name):
            return device
    raise NoDeviceFound([d.name for d in devices])
