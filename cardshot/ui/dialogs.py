import sys
import logging

from PySide6.QtCore import Qt, QCameraPermission
from PySide6.QtWidgets import QApplication, QMessageBox

from cardshot.core.errors import PermissionDeniedError


logger = logging.getLogger(__name__)

PERMISSION_MESSAGE = "Camera permission is required to take a screenshot."


def ensure_application() -> QApplication:
    """Return the running QApplication, creating one if needed."""
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv[:1])
    return app


def show_error(title: str, message: str):
    """Show a modal error dialog and block until the user dismisses it."""
    ensure_application()
    QMessageBox.critical(None, title, message)


def check_camera_permission(app: QApplication):
    """
    Check the OS camera permission where the platform has one.

    Raises:
        PermissionDeniedError: if the user has denied camera access.
    """
    status = app.checkPermission(QCameraPermission())
    if status == Qt.PermissionStatus.Denied:
        raise PermissionDeniedError(PERMISSION_MESSAGE)
    if status == Qt.PermissionStatus.Undetermined:
        # The OS prompts on first open
        logger.info("Camera permission not yet determined.")
