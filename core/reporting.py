"""
Diagnostic Reporting
====================

The calculation never writes to a console or UI directly. It hands
FTLEvent objects to a reporter; LoggingReporter is the default.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FTLEvent:
    level: str          # 'debug', 'info' or 'warning'
    message: str
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {'level': self.level, 'message': self.message, 'context': dict(self.context)}


class LoggingReporter:
    """Forward events to the standard logging module"""

    _LEVELS = {
        'debug': logging.DEBUG,
        'info': logging.INFO,
        'warning': logging.WARNING,
    }

    def __init__(self, log: logging.Logger = None):
        self.log = log or logger

    def report(self, event: FTLEvent) -> None:
        self.log.log(self._LEVELS.get(event.level, logging.INFO), event.message)


class CollectingReporter(LoggingReporter):
    """Keep events in memory (API diagnostics, tests) and still log them"""

    def __init__(self, log: logging.Logger = None):
        super().__init__(log)
        self.events: List[FTLEvent] = []

    def report(self, event: FTLEvent) -> None:
        self.events.append(event)
        super().report(event)

    @property
    def warnings(self) -> List[FTLEvent]:
        return [e for e in self.events if e.level == 'warning']
