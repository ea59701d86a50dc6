"""Interactive front end: a ``cmd.Cmd`` loop around one ``ShellSession``.

Every line goes through the session pipeline (there are no ``do_*``
commands here); output lines are coloured by kind.  Tab completion and
persistent history are available when the readline module is present.
Host events raised by commands (``screen:clear``, ``game:snake``,
``session:exit`` ...) are handled after each line.
"""

import argparse
import os
import sys
import time
from cmd import Cmd
from typing import List, Optional

from colorama import Fore, Style, init as colorama_init

from devterm.config import PRODUCT, VERSION
from devterm.output import LineKind, OutputLine, capture_console
from devterm.shell import ShellSession

# optional module
try:
    import readline
except ImportError:
    readline = None

HISTORY_FILE = "~/.devterm_history"

# simulated commands that show a spinner before their output
SLOW_COMMANDS = {"npm", "curl", "ping", "git"}

_KIND_COLOURS = {
    LineKind.ERROR: Fore.RED,
    LineKind.SUCCESS: Fore.GREEN,
}


def spinner(msg: str = "running", seconds: float = 0.6) -> None:
    """Display a simple spinner for a given duration."""
    s = "|/-\\"
    end = time.time() + seconds
    i = 0
    while time.time() < end:
        sys.stdout.write(f"\r{Fore.YELLOW}{msg}... {s[i % 4]}{Style.RESET_ALL}")
        sys.stdout.flush()
        i += 1
        time.sleep(0.1)
    sys.stdout.write("\r" + " " * (len(msg) + 8) + "\r")
    sys.stdout.flush()


def render(line: OutputLine) -> str:
    colour = _KIND_COLOURS.get(line.kind)
    if colour is None:
        return line.text
    return f"{colour}{line.text}{Style.RESET_ALL}"


class DevShell(Cmd):
    def __init__(self, session: Optional[ShellSession] = None, spin: float = 0.6,
                 stdout=None, use_readline: bool = True) -> None:
        super().__init__(stdout=stdout)
        self.session = session if session is not None else ShellSession()
        self.spin = spin
        welcome = self.session.commands.get("welcome")
        if welcome is not None:
            self.intro = "\n".join(render(l) for l in welcome.execute([], self.session.context))
        else:
            self.intro = f"{PRODUCT} Terminal [Version {VERSION}]"
        self._update_prompt()
        if readline and use_readline:
            self._setup_readline()

    def _setup_readline(self) -> None:
        hist = os.path.expanduser(HISTORY_FILE)
        try:
            readline.read_history_file(hist)
        except OSError:
            pass
        import atexit
        atexit.register(readline.write_history_file, hist)
        # whole tokens, so "src/li" completes as one word
        readline.set_completer_delims(" \t\n")
        doc = getattr(readline, "__doc__", "") or ""
        if "libedit" in doc:
            readline.parse_and_bind("bind ^I rl_complete")
        else:
            readline.parse_and_bind("tab: complete")
        readline.parse_and_bind("set show-all-if-ambiguous on")
        readline.parse_and_bind("set completion-ignore-case on")

    def _update_prompt(self) -> None:
        p = self.session.get_prompt()
        self.prompt = (f"{Fore.GREEN}{p['user']}{Style.RESET_ALL}:"
                       f"{Style.BRIGHT}{Fore.BLUE}{p['path']}{Style.RESET_ALL}$ ")

    def _write(self, text: str) -> None:
        self.stdout.write(text + "\n")

    # ---- core overrides
    def onecmd(self, line: str) -> bool:
        # route everything, including "help", through the session
        if line == "EOF":
            self._write("")
            return True
        return self.default(line)

    def emptyline(self) -> bool:
        return False

    def default(self, line: str) -> bool:
        line = line.strip()
        if not line:
            return False
        head = line.split()[0].lower()
        if self.spin and head in SLOW_COMMANDS:
            spinner(f"running '{head}'", self.spin)
        for out_line in self.session.execute_command(line):
            self._write(render(out_line))
        return self._handle_events()

    def _handle_events(self) -> bool:
        stop = False
        while self.session.events:
            event = self.session.events.pop(0)
            if event == "screen:clear":
                self.stdout.write("\033c")
            elif event == "game:snake":
                self._write(f"{Fore.YELLOW}(the snake game needs the graphical host){Style.RESET_ALL}")
            elif event.startswith("open:"):
                self._write(f"{Fore.LIGHTBLACK_EX}{event[5:]}{Style.RESET_ALL}")
            elif event == "session:exit":
                stop = True
        return stop

    def postcmd(self, stop: bool, line: str) -> bool:
        self._update_prompt()
        return stop

    # ---- completion
    def completenames(self, text: str, *ignored) -> List[str]:
        return self.session.get_command_suggestions(text)

    def completedefault(self, text: str, line: str, begidx: int, endidx: int) -> List[str]:
        return self.session.complete(line[:endidx])

    def complete_help(self, text: str, line: str, begidx: int, endidx: int) -> List[str]:
        return self.session.get_command_suggestions(text)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="devterm", description="In-memory developer terminal")
    parser.add_argument("-c", "--command", action="append", default=[],
                        help="run a command and exit (repeatable)")
    parser.add_argument("--config", default="", help="path to a devterm.yaml file")
    parser.add_argument("--no-spinner", action="store_true", help="skip the simulated delay")
    args = parser.parse_args(argv)

    colorama_init(autoreset=True)
    session = ShellSession.from_config(args.config)
    shell = DevShell(session, spin=0 if args.no_spinner or args.command else 0.6,
                     use_readline=not args.command)
    with capture_console(session.console):
        if args.command:
            for line in args.command:
                if shell.onecmd(line):
                    break
            return 1 if session.last_error else 0
        try:
            shell.cmdloop()
        except KeyboardInterrupt:
            shell._write("")
    return 0


if __name__ == "__main__":
    sys.exit(main())
