import logging
import os
import sys

import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from colorama import Fore

from devterm.output import (
    ConsoleBuffer,
    LineKind,
    OutputSink,
    c,
    capture_console,
    err,
    lines,
    strip_ansi,
)


class FakeSink(OutputSink):
    def __init__(self):
        self.events = []

    def emit(self, kind, args):
        self.events.append((kind, list(args)))


def test_line_helpers():
    line = err(c("boom", Fore.RED))
    assert line.kind is LineKind.ERROR
    assert line.plain == "boom"
    assert [l.kind for l in lines(["a", "b"], LineKind.SUCCESS)] == [LineKind.SUCCESS] * 2
    assert strip_ansi("\x1b[1m\x1b[34mdocs/\x1b[0m") == "docs/"


def test_sink_interface_requires_emit():
    with pytest.raises(TypeError):
        OutputSink()

    class Silent(OutputSink):
        pass

    with pytest.raises(TypeError):
        Silent()
    assert isinstance(FakeSink(), OutputSink)


def test_console_buffer_folds_consecutive_duplicates():
    buf = ConsoleBuffer(limit=3)
    buf.emit("warn", ["disk", "low"])
    buf.emit("warn", ["disk low"])
    buf.emit("info", ["ok"])
    buf.emit("warn", ["disk low"])
    assert [(m.kind, m.content, m.count) for m in buf.messages] == [
        ("warn", "disk low", 2),
        ("info", "ok", 1),
        ("warn", "disk low", 1),
    ]
    buf.emit("error", ["x"])
    assert len(buf) == 3
    assert buf.messages[0].kind == "info"
    buf.clear()
    assert len(buf) == 0


def test_capture_console_is_scoped():
    sink = FakeSink()
    log = logging.getLogger("devterm.test")
    parent = logging.getLogger("devterm")
    handlers_before = list(parent.handlers)
    with capture_console(sink):
        log.debug("quiet")
        log.warning("careful %s", "now")
        log.error("broken")
    log.warning("after")
    assert sink.events == [
        ("debug", ["quiet"]),
        ("warn", ["careful now"]),
        ("error", ["broken"]),
    ]
    assert parent.handlers == handlers_before


def test_capture_console_respects_level():
    sink = FakeSink()
    with capture_console(sink, level=logging.WARNING):
        logging.getLogger("devterm.x").info("hidden")
        logging.getLogger("devterm.x").warning("shown")
    assert sink.events == [("warn", ["shown"])]
