"""
Log emitter - hands structured phase events to a request's log function.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..core.query_types import LogAction, LogEvent, LogStep

logger = logging.getLogger(__name__)


def _noop(event: LogEvent) -> None:
    return None


class LogEmitter:
    """
    Emits LogEvents to an injected sink.

    Usage:
        log = LogEmitter(descriptor.log_function)
        log.emit(LogAction.parse, LogStep.start)
        log.emit(LogAction.request, LogStep.status, key="variables", data={"id": 1})
    """

    def __init__(self, log_function: Optional[Callable[[LogEvent], Any]] = None):
        self.log_function = log_function or _noop

    def emit(
        self,
        action: LogAction,
        step: LogStep,
        key: Optional[str] = None,
        data: Any = None,
    ) -> None:
        event = LogEvent(action=action, step=step, key=key, data=data)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"{action.value}/{step.value}{f' {key}' if key else ''}")
        self.log_function(event)

    def start(self, action: LogAction) -> None:
        self.emit(action, LogStep.start)

    def end(self, action: LogAction) -> None:
        self.emit(action, LogStep.end)

    def status(self, key: str, data: Any) -> None:
        self.emit(LogAction.request, LogStep.status, key=key, data=data)
