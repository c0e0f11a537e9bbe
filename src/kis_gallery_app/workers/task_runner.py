"""Run blocking work (image decoding) on the Qt thread pool."""
from __future__ import annotations

from typing import Any, Callable, Optional, Set

from loguru import logger
from PyQt6.QtCore import QObject, QRunnable, QThreadPool, pyqtSignal

SuccessCallback = Callable[[Any], None]
FailureCallback = Callable[[str], None]


class TaskSignals(QObject):
    """Signals a background task emits back to the GUI thread."""

    finished = pyqtSignal(object)
    failed = pyqtSignal(str)


class BackgroundTask(QRunnable):
    """Wrap one callable for execution in the Qt thread pool."""

    def __init__(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        super().__init__()
        self.fn = fn
        self.args = args
        self.kwargs = kwargs
        self.signals = TaskSignals()

    @property
    def name(self) -> str:
        return getattr(self.fn, "__name__", repr(self.fn))

    def run(self) -> None:
        try:
            result = self.fn(*self.args, **self.kwargs)
        except Exception as exc:  # noqa: BLE001
            logger.opt(exception=exc).debug("Background task {} failed", self.name)
            self.signals.failed.emit(str(exc))
        else:
            self.signals.finished.emit(result)


class TaskRunner:
    """QThreadPool wrapper that keeps submitted tasks alive until they report back."""

    def __init__(self, max_threads: int | None = None) -> None:
        self._pool = QThreadPool.globalInstance()
        if max_threads is not None:
            self._pool.setMaxThreadCount(max_threads)
        self._active: Set[BackgroundTask] = set()

    @property
    def active_count(self) -> int:
        return len(self._active)

    def submit(
        self,
        fn: Callable[..., Any],
        *args: Any,
        on_success: SuccessCallback,
        on_failure: Optional[FailureCallback] = None,
        **kwargs: Any,
    ) -> BackgroundTask:
        task = BackgroundTask(fn, *args, **kwargs)
        self._active.add(task)
        task.signals.finished.connect(lambda result, t=task: self._on_finished(t, result, on_success))
        task.signals.failed.connect(lambda message, t=task: self._on_failed(t, message, on_failure))
        logger.debug("Submitting background task {}", task.name)
        self._pool.start(task)
        return task

    def _on_finished(self, task: BackgroundTask, result: Any, on_success: SuccessCallback) -> None:
        self._active.discard(task)
        on_success(result)

    def _on_failed(self, task: BackgroundTask, message: str, on_failure: Optional[FailureCallback]) -> None:
        self._active.discard(task)
        if on_failure is not None:
            on_failure(message)
