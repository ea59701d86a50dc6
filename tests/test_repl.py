import io
import os
import sys

import colorama

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from devterm.output import strip_ansi
from devterm.repl import DevShell, main
from devterm.shell import ShellSession


def make_shell():
    buf = io.StringIO()
    shell = DevShell(ShellSession(), spin=0, stdout=buf, use_readline=False)
    return shell, buf


def test_lines_go_through_the_session():
    shell, buf = make_shell()
    assert not shell.onecmd("pwd")
    assert strip_ansi(buf.getvalue()) == "/\n"
    assert shell.session.command_history == ["pwd"]


def test_help_is_not_the_cmd_builtin():
    shell, buf = make_shell()
    shell.onecmd("help")
    assert "Available Commands" in strip_ansi(buf.getvalue())


def test_prompt_tracks_cwd():
    shell, _ = make_shell()
    shell.onecmd("cd src")
    shell.postcmd(False, "cd src")
    assert "~/src" in strip_ansi(shell.prompt)


def test_errors_are_red():
    shell, buf = make_shell()
    shell.onecmd("cat nope")
    assert buf.getvalue().startswith(colorama.Fore.RED)


def test_events():
    shell, buf = make_shell()
    shell.onecmd("clear")
    assert "\033c" in buf.getvalue()
    shell.onecmd("snake")
    assert "graphical host" in buf.getvalue()
    assert shell.session.events == []
    assert shell.onecmd("exit")
    assert shell.onecmd("EOF")


def test_empty_line_does_not_repeat():
    shell, buf = make_shell()
    shell.onecmd("whoami")
    assert not shell.emptyline()
    assert shell.session.command_history == ["whoami"]


def test_completion_hooks():
    shell, _ = make_shell()
    assert shell.completenames("hi") == ["history"]
    assert shell.completedefault("sr", "cat sr", 4, 6) == ["src/"]
    assert shell.complete_help("pw", "help pw", 5, 7) == ["pwd"]


def test_intro_is_the_welcome_banner():
    shell, _ = make_shell()
    assert strip_ansi(shell.intro).startswith("DEVTERM Terminal [Version 3.0.2]")


def test_main_runs_commands(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DEVTERM_CONFIG", raising=False)
    try:
        assert main(["-c", "cd docs", "-c", "pwd"]) == 0
    finally:
        colorama.deinit()
    try:
        assert main(["-c", "cat nope"]) == 1
    finally:
        colorama.deinit()
    out = strip_ansi(capsys.readouterr().out)
    assert "/docs" in out
    assert "cat: nope: No such file or directory" in out
