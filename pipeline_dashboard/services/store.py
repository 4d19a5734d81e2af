from __future__ import annotations

import logging
from collections.abc import Callable

from ..models.config_models import DashboardConfig
from ..models.report import Report
from .loader import LoadOutcome, load_report
from .source import SourceProvider

"""Owned container for the current Report plus load observers.

The current report is replaced by reference once a load cycle completes; it is
never updated field by field. Observers are notified once per completed load,
in no guaranteed order.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ReportObserver",
    "ReportStore",
    "refresh",
]

ReportObserver = Callable[[Report], None]


class ReportStore:
    """Current Report holder with publish/subscribe notification."""

    def __init__(self) -> None:
        self._current: Report | None = None
        self._observers: list[ReportObserver] = []

    @property
    def current(self) -> Report | None:
        return self._current

    def subscribe(self, observer: ReportObserver) -> Callable[[], None]:
        """Register an observer; returns a function that unregisters it.

        If a Report already exists the observer is called immediately and
        synchronously, then again after every later load.
        """
        self._observers.append(observer)
        if self._current is not None:
            self._notify(observer, self._current)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def publish(self, report: Report) -> None:
        """Replace the current Report and notify every observer once."""
        self._current = report
        for observer in list(self._observers):
            self._notify(observer, report)

    def _notify(self, observer: ReportObserver, report: Report) -> None:
        try:
            observer(report)
        except Exception:
            # 1つのオブザーバ失敗で他への通知を止めない
            logger.exception(f"report observer failed: {observer!r}")


def refresh(
    store: ReportStore,
    config: DashboardConfig,
    provider: SourceProvider | None = None,
) -> LoadOutcome:
    """Run one load cycle and publish its Report."""
    outcome = load_report(config, provider)
    store.publish(outcome.report)
    return outcome
