"""
Background worker threads for controller service calls.
"""
from PyQt6.QtCore import QThread, pyqtSignal
from typing import Any, Callable
import logging

logger = logging.getLogger(__name__)


class ServiceCallWorker(QThread):
    """
    Runs one blocking service call off the UI thread.

    Signals:
        succeeded(token, result): Emitted with the call's return value
        failed(token, error): Emitted with the raised exception
    """
    succeeded = pyqtSignal(int, object)
    failed = pyqtSignal(int, object)

    def __init__(self, *, token: int, call: Callable[[], Any], parent=None):
        super().__init__(parent)
        self._token = token
        self._call = call

    @property
    def token(self) -> int:
        """Get the worker's token for identifying responses."""
        return self._token

    def run(self) -> None:
        """Execute the service call."""
        try:
            result = self._call()
        except Exception as e:
            # Delivered to the controller, which decides how to present it.
            self.failed.emit(self._token, e)
            return
        self.succeeded.emit(self._token, result)
