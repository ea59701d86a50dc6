"""Output lines produced by commands, and the console-capture sink."""

import logging
import re
import time
from abc import ABC, abstractmethod
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Deque, Iterator, List, Sequence

from colorama import Fore, Style

# strips colour escape sequences for plain-text consumers
_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


class LineKind(str, Enum):
    COMMAND = "command"
    OUTPUT = "output"
    ERROR = "error"
    SUCCESS = "success"


@dataclass(frozen=True)
class OutputLine:
    kind: LineKind
    text: str

    @property
    def plain(self) -> str:
        return strip_ansi(self.text)


def out(text: str = "") -> OutputLine:
    return OutputLine(LineKind.OUTPUT, text)


def ok(text: str) -> OutputLine:
    return OutputLine(LineKind.SUCCESS, text)


def err(text: str) -> OutputLine:
    return OutputLine(LineKind.ERROR, text)


def lines(texts: Sequence[str], kind: LineKind = LineKind.OUTPUT) -> List[OutputLine]:
    return [OutputLine(kind, t) for t in texts]


def c(text: Any, color: str = Fore.CYAN) -> str:
    """Colourise text for terminal display."""
    return f"{color}{text}{Style.RESET_ALL}"


def bold(text: Any) -> str:
    return f"{Style.BRIGHT}{text}{Style.RESET_ALL}"


def strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


# ---------- console capture ----------

class OutputSink(ABC):
    """Anything that accepts captured console output.

    ``kind`` is one of log, info, warn, error, debug.
    """

    @abstractmethod
    def emit(self, kind: str, args: Sequence[Any]) -> None:
        ...


@dataclass
class ConsoleMessage:
    kind: str
    content: str
    timestamp: float
    count: int = 1


class ConsoleBuffer(OutputSink):
    """Keeps the most recent messages, folding consecutive duplicates."""

    def __init__(self, limit: int = 100) -> None:
        self.messages: Deque[ConsoleMessage] = deque(maxlen=limit)

    def emit(self, kind: str, args: Sequence[Any]) -> None:
        content = " ".join(str(a) for a in args)
        last = self.messages[-1] if self.messages else None
        if last and last.kind == kind and last.content == content:
            last.count += 1
            return
        self.messages.append(ConsoleMessage(kind, content, time.time()))

    def clear(self) -> None:
        self.messages.clear()

    def __len__(self) -> int:
        return len(self.messages)


_LEVEL_KINDS = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warn",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


class _SinkHandler(logging.Handler):
    def __init__(self, sink: OutputSink) -> None:
        super().__init__()
        self.sink = sink

    def emit(self, record: logging.LogRecord) -> None:
        kind = _LEVEL_KINDS.get(record.levelno, "log")
        self.sink.emit(kind, [self.format(record)])


@contextmanager
def capture_console(sink: OutputSink, logger_name: str = "devterm",
                    level: int = logging.DEBUG) -> Iterator[OutputSink]:
    """Forward records of ``logger_name`` to ``sink`` for the ``with`` block."""
    logger = logging.getLogger(logger_name)
    handler = _SinkHandler(sink)
    handler.setLevel(level)
    previous = logger.level
    logger.addHandler(handler)
    if logger.level == logging.NOTSET or logger.level > level:
        logger.setLevel(level)
    try:
        yield sink
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous)
