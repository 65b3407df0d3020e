"""Progress reporting for import runs. Reporters never affect control flow."""

import logging
from typing import Callable, Protocol

from jobber_reconcile.models.result import ImportProgress, ProgressStage

logger = logging.getLogger(__name__)


class ProgressReporter(Protocol):
    def report(self, stage: ProgressStage, percent: int, message: str) -> None: ...


class NullReporter:
    """Discards every milestone."""

    def report(self, stage: ProgressStage, percent: int, message: str) -> None:
        return None


class LoggingReporter:
    """Logs milestones at INFO."""

    def __init__(self, log: logging.Logger = logger):
        self._log = log

    def report(self, stage: ProgressStage, percent: int, message: str) -> None:
        self._log.info("[%s %3d%%] %s", stage, percent, message)


class CallbackReporter:
    """
    Forwards milestones to a callable taking ImportProgress.
    A failing callback is logged and ignored.
    """

    def __init__(self, callback: Callable[[ImportProgress], object]):
        self._callback = callback

    def report(self, stage: ProgressStage, percent: int, message: str) -> None:
        try:
            self._callback(ImportProgress(stage=stage, percent=percent, message=message))
        except Exception as e:
            logger.warning("Progress callback failed at %s %d%%: %s", stage, percent, e)
