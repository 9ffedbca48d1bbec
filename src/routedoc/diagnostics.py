"""Diagnostic sinks.

Every degradation notice produced while documenting routes goes through a
``DiagnosticSink``. The default sink forwards to the standard ``logging``
module; ``CollectingSink`` keeps records in memory.
"""

import logging
from typing import Any, Protocol

from pydantic import BaseModel

logger = logging.getLogger("routedoc")

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class Diagnostic(BaseModel):
    """One recorded notice."""

    level: str  # debug / info / warning / error
    message: str
    context: dict[str, Any] = {}


class DiagnosticSink(Protocol):
    def emit(self, level: str, message: str, **context: Any) -> None: ...


class LoggingSink:
    """Forward diagnostics to the ``routedoc`` logger.

    Debug notices are dropped unless ``debug`` is enabled.
    """

    def __init__(self, debug: bool = False, log: logging.Logger | None = None):
        self.debug = debug
        self.log = log or logger

    def emit(self, level: str, message: str, **context: Any) -> None:
        if level == "debug" and not self.debug:
            return
        if context:
            message = f"{message} {context}"
        self.log.log(_LEVELS.get(level, logging.INFO), message)


class CollectingSink:
    """Keep diagnostics in memory."""

    def __init__(self) -> None:
        self.records: list[Diagnostic] = []

    def emit(self, level: str, message: str, **context: Any) -> None:
        self.records.append(Diagnostic(level=level, message=message, context=context))

    def messages(self, level: str | None = None) -> list[str]:
        return [r.message for r in self.records if level is None or r.level == level]


DEFAULT_SINK = LoggingSink()
