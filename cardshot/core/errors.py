from typing import List, Optional


class CardshotError(Exception):
    """Base class for every error surfaced to the user."""


class AcquisitionError(CardshotError):
    """Acquiring a frame from the capture device failed."""


class StreamOpenError(AcquisitionError):
    """The device rejected the request to start streaming."""


class FrameReadError(AcquisitionError):
    """Reading a raw frame from an open stream failed."""


class DecodeError(AcquisitionError):
    """A raw frame could not be decoded into the target pixel layout."""


class WarmupTimeoutError(AcquisitionError):
    """The device kept producing blank frames past the warm-up bound."""

    def __init__(self, attempts: int, elapsed: float):
        self.attempts = attempts
        self.elapsed = elapsed
        super().__init__(
            f"Capture device produced only blank frames ({attempts} frames in {elapsed:.1f}s). "
            "Check that the HDMI source is on and sending a signal."
        )


class NoDeviceFound(CardshotError):
    """No enumerated camera matched the configured capture-card names."""

    def __init__(self, available: Optional[List[str]] = None):
        self.available = list(available or [])
        message = "No supported cameras found"
        if self.available:
            message += "\nAvailable cameras:" + "".join(f"\n  - {name}" for name in self.available)
        super().__init__(message)


class ClipboardError(CardshotError):
    """The image could not be placed on the system clipboard."""


class PermissionDeniedError(CardshotError):
    """Camera access was denied by the operating system."""


class ConfigError(CardshotError):
    """The configuration files or command-line overrides are invalid."""
