"""
Shared state machine for page controllers.

Each controller owns transient page state (loading flag, error message,
entity data, form fields) and routes every service call through one
dispatcher. Calls run inline by default; with ``background=True`` they run
on a ServiceCallWorker and their results come back through queued signals.

Overlapping calls are not cancelled: whichever finishes last writes the
view state.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from mediavault.ui.workers import ServiceCallWorker

logger = logging.getLogger(__name__)


class ViewStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


@dataclass
class _PendingCall:
    action: str
    on_success: Callable[[Any], None]
    error_message: str
    on_error: Optional[Callable[[Exception], None]] = None


class ViewController(QObject):
    """
    Base for page controllers.

    Signals:
        changed(): Emitted after any state mutation; views re-render on it
    """
    changed = pyqtSignal()

    # Routes that need a stored token set this.
    requires_auth = False

    def __init__(self, *, background: bool = False, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.loading = False
        self.loaded = False
        self.error: Optional[str] = None

        self._background = background
        self._next_token = 0
        self._pending: Dict[int, _PendingCall] = {}
        self._workers: Dict[int, ServiceCallWorker] = {}

    @property
    def status(self) -> ViewStatus:
        if self.loading:
            return ViewStatus.LOADING
        if self.error:
            return ViewStatus.ERROR
        if self.loaded:
            return ViewStatus.LOADED
        return ViewStatus.IDLE

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _dispatch(
        self,
        action: str,
        call: Callable[[], Any],
        *,
        on_success: Callable[[Any], None],
        error_message: str,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> int:
        self._next_token += 1
        token = self._next_token
        self._pending[token] = _PendingCall(action, on_success, error_message, on_error)

        self.loading = True
        self.error = None
        self._notify()

        if self._background:
            worker = ServiceCallWorker(token=token, call=call)
            worker.succeeded.connect(self._on_worker_succeeded)
            worker.failed.connect(self._on_worker_failed)
            worker.finished.connect(self._on_worker_finished)
            self._workers[token] = worker
            worker.start()
            return token

        try:
            result = call()
        except Exception as e:
            self._finish_failure(token, e)
        else:
            self._finish_success(token, result)
        return token

    @pyqtSlot()
    def _on_worker_finished(self) -> None:
        worker = self.sender()
        if isinstance(worker, ServiceCallWorker):
            worker.wait()
            self._workers.pop(worker.token, None)
            worker.deleteLater()

    @pyqtSlot(int, object)
    def _on_worker_succeeded(self, token: int, result: Any) -> None:
        self._finish_success(token, result)

    @pyqtSlot(int, object)
    def _on_worker_failed(self, token: int, error: Exception) -> None:
        self._finish_failure(token, error)

    def _finish_success(self, token: int, result: Any) -> None:
        pending = self._pending.pop(token, None)
        if pending is None:
            return
        self.loading = bool(self._pending)
        self.loaded = True
        logger.debug(f"{type(self).__name__}: {pending.action} #{token} succeeded")
        pending.on_success(result)
        self._notify()

    def _finish_failure(self, token: int, error: Exception) -> None:
        pending = self._pending.pop(token, None)
        if pending is None:
            return
        self.loading = bool(self._pending)
        logger.error(
            f"{type(self).__name__}: {pending.action} #{token} failed: {error}",
            exc_info=error,
        )
        self.error = pending.error_message
        if pending.on_error is not None:
            pending.on_error(error)
        self._notify()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def set_error(self, message: Optional[str]) -> None:
        self.error = message
        self._notify()

    def _notify(self) -> None:
        self.changed.emit()
