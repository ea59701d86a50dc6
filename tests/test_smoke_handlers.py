import sys
import os
import traceback
import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from devterm.errors import ShellError
from devterm.output import OutputLine
from devterm.shell import ShellSession


def test_smoke_handlers_do_not_raise():
    """Call every registered handler with an empty argument list and fail if
    any of them raises something other than a ShellError. Handlers returning
    error lines are considered acceptable.
    """
    session = ShellSession()
    table = session.commands
    failures = []
    for name in table.names():
        cmd = table.get(name)
        try:
            result = cmd.execute([], session.context)
        except ShellError:
            continue
        except Exception:
            failures.append((name, traceback.format_exc()))
            continue
        if not all(isinstance(line, OutputLine) for line in result):
            failures.append((name, f"returned {result!r}"))

    if failures:
        msgs = []
        for n, tb in failures:
            msgs.append(f"{n}:\n{tb}")
        pytest.fail(f"{len(failures)} handlers misbehaved:\n\n" + "\n\n".join(msgs))


def test_every_line_through_the_pipeline_returns_lines():
    session = ShellSession()
    for name in session.commands.names():
        for line in (name, f"{name} src", f"{name} -x nope"):
            produced = session.execute_command(line)
            assert isinstance(produced, list), line
