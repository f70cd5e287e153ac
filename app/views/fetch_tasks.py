from __future__ import annotations

from collections.abc import Callable
import itertools
from typing import Any

from PySide6.QtCore import QObject, QRunnable, QThreadPool
from loguru import logger

from core.models import FetchResult


class _FetchTask(QRunnable):
    """QRunnable for background location fetches.

    Emits `receiver.locationsLoaded(token, result)` upon completion. The
    receiver is expected to own a Qt `Signal(int, object)` named
    `locationsLoaded`; the queued connection delivers on the GUI thread.
    """

    def __init__(self, *, repo: Any, receiver: QObject, token: int) -> None:
        super().__init__()
        self._repo = repo
        self._receiver = receiver
        self._token = token

    def run(self) -> None:  # type: ignore[override]
        try:
            result = self._repo.fetch()
        except Exception as ex:  # pragma: no cover - GUI background task
            logger.exception("Location fetch task failed")
            result = FetchResult(success=False, message=str(ex))
        try:
            self._receiver.locationsLoaded.emit(self._token, result)  # type: ignore[attr-defined]
        except RuntimeError as ex:  # pragma: no cover - receiver already destroyed
            logger.debug("Fetch result dropped: {}", ex)


class FetchTaskRunner:
    """Dispatches location fetches to the global thread pool.

    `start` matches the fetch starter expected by `LocationMapVM`; results
    come back through `deliver`, which the receiver's signal is connected to.
    """

    def __init__(self, *, repo: Any, receiver: QObject) -> None:
        self._repo = repo
        self._receiver = receiver
        self._pool = QThreadPool.globalInstance()
        self._tokens = itertools.count(1)
        self._pending: dict[int, Callable[[FetchResult], None]] = {}

    def start(self, callback: Callable[[FetchResult], None]) -> int:
        """Start a fetch; `callback` receives the result on the GUI thread."""
        token = next(self._tokens)
        self._pending[token] = callback
        self._pool.start(_FetchTask(repo=self._repo, receiver=self._receiver, token=token))
        return token

    def deliver(self, token: int, result: FetchResult) -> None:
        """Hand a finished fetch to its callback."""
        callback = self._pending.pop(token, None)
        if callback is not None:
            callback(result)

    def cancel_all(self) -> None:
        """Forget pending callbacks; late results are dropped."""
        self._pending.clear()
