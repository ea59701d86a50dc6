"""The shell session: working directory, environment, aliases, history and
the per-line execution pipeline.

A submitted line is trimmed, recorded in history, alias-expanded (one
level), and then either handled directly (``clear``/``cls``, ``history``),
dispatched through the command table, or handed to the conversational
fallback.  Nothing raises out of ``execute_command``.
"""

import logging
import time
from typing import Dict, List, Optional, Tuple

from colorama import Fore, Style

from devterm.commands import h_history
from devterm.completion import command_suggestions, file_suggestions, suggest
from devterm.config import (
    CONSOLE_LIMIT,
    DEFAULT_ALIASES,
    DEFAULT_ENV,
    PACK_PATH,
    PRODUCT,
    VERSION,
    base_tree,
    load_config,
    load_yaml_pack,
)
from devterm.entities import Entity, File, VPath
from devterm.filesystem import VirtualFileSystem
from devterm.output import ConsoleBuffer, LineKind, OutputLine, bold, c, out
from devterm.registry import CommandTable
from devterm.seed import DEFAULT_TREE

logger = logging.getLogger(__name__)


class ShellContext:
    """What a command handler may see and change."""

    def __init__(self, session: "ShellSession") -> None:
        self._session = session

    @property
    def cwd(self) -> str:
        return self._session.cwd

    @cwd.setter
    def cwd(self, value: str) -> None:
        self._session.cwd = VPath.parse(value).absolute

    @property
    def fs(self) -> VirtualFileSystem:
        return self._session.fs

    @property
    def tree(self) -> List[Entity]:
        return self._session.fs.tree

    @property
    def files(self) -> List[File]:
        return self._session.fs.files

    def open_file(self, name: str) -> Optional[str]:
        return self._session.fs.open_file(name)

    @property
    def env(self) -> Dict[str, str]:
        return self._session.env

    def set_env(self, key: str, value: str) -> None:
        self._session.env[key] = value

    @property
    def aliases(self) -> Dict[str, str]:
        return self._session.aliases

    def set_alias(self, name: str, command: str) -> None:
        self._session.aliases[name] = command

    @property
    def commands(self) -> CommandTable:
        return self._session.commands

    @property
    def history(self) -> List[str]:
        return self._session.command_history

    @property
    def console(self) -> ConsoleBuffer:
        return self._session.console

    @property
    def started(self) -> float:
        return self._session.started_at

    def emit(self, event: str) -> None:
        """Signal the host (e.g. ``game:snake``); events queue on the session."""
        logger.info("host event %s", event)
        self._session.events.append(event)


def _step(text: str) -> OutputLine:
    return out(f"{Fore.LIGHTBLACK_EX}⠋ {text}...{Style.RESET_ALL}")


def _done(text: str) -> OutputLine:
    return out(f"{Fore.GREEN}✓{Style.RESET_ALL} {Fore.LIGHTBLACK_EX}{text}{Style.RESET_ALL}")


def agent_response(text: str) -> List[OutputLine]:
    """Conversational reply for a line that names no command."""
    lowered = text.lower()
    if "fix" in lowered or "bug" in lowered:
        return [
            _step("Reading active context"),
            _step("Analyzing control flow"),
            _done("Context loaded"),
            out(),
            out(bold("Analysis:")),
            out("I've scanned the directory. To fix issues, I recommend running the test suite first:"),
            out(f"  {c('npm run test')}"),
        ]
    if "optimize" in lowered or "perf" in lowered:
        return [
            _step("Measuring bundle size"),
            _step("Checking hydration metrics"),
            _done("Performance profile ready"),
            out(),
            out(bold("Optimization Plan:")),
            out("1. Implement code splitting for the Terminal component."),
            out("2. Use Next.js Image optimization."),
            out(f"Run {c('npm run solve:problem')} to apply auto-fixes."),
        ]
    if "hello" in lowered or "hi " in lowered or lowered == "hi":
        return [
            out(),
            out(f"{bold('Hello!')} I am {PRODUCT} Agent (v{VERSION})."),
            out("I can help you navigate the system, execute code, or answer questions about the portfolio."),
        ]
    return [
        _step("Parsing intent"),
        out(),
        out(f'I understand you want to "{Style.DIM}{text}{Style.RESET_ALL}".'),
        out("As a terminal interface, I can execute commands. For complex reasoning, please use the Chat Panel."),
        out(f"Try running {c('help')} to see what I can do here."),
    ]


class ShellSession:
    def __init__(self, fs: Optional[VirtualFileSystem] = None,
                 env: Optional[Dict[str, str]] = None,
                 aliases: Optional[Dict[str, str]] = None,
                 commands: Optional[CommandTable] = None) -> None:
        self.fs = fs if fs is not None else VirtualFileSystem(DEFAULT_TREE)
        self.env: Dict[str, str] = dict(DEFAULT_ENV if env is None else env)
        self.aliases: Dict[str, str] = dict(DEFAULT_ALIASES if aliases is None else aliases)
        self.commands = commands if commands is not None else CommandTable()
        self.cwd = "/"
        self.command_history: List[str] = []
        self.history_index = -1
        self.buffer: List[OutputLine] = []
        self.console = ConsoleBuffer(CONSOLE_LIMIT)
        self.events: List[str] = []
        self.last_error: Optional[str] = None
        self.started_at = time.time()
        self.context = ShellContext(self)

    @classmethod
    def from_config(cls, path: str = "", pack_path: str = PACK_PATH) -> "ShellSession":
        """Session built from ``devterm.yaml`` and the ``commands.yaml`` pack, if present."""
        config = load_config(path)
        table = CommandTable(pack=load_yaml_pack(pack_path))
        return cls(VirtualFileSystem(base_tree(config)), config["env"], config["aliases"], table)

    # ---- pipeline
    def _expand(self, line: str) -> Tuple[str, List[str]]:
        parts = line.split()
        head = parts[0].lower()
        if head in self.aliases:
            parts = f"{self.aliases[head]} {' '.join(parts[1:])}".split()
            logger.debug("alias %s -> %s", head, " ".join(parts))
        if not parts:
            return "", []
        return parts[0].lower(), parts[1:]

    def execute_command(self, raw_input: str) -> List[OutputLine]:
        """Run one line; returns the lines it produced (also appended to ``buffer``)."""
        trimmed = raw_input.strip()
        if not trimmed:
            return []
        if not self.command_history or self.command_history[-1] != trimmed:
            self.command_history.append(trimmed)
        self.history_index = -1

        name, args = self._expand(trimmed)
        if name in ("clear", "cls"):
            self.buffer.clear()
            self.events.append("screen:clear")
            return []
        if name == "history":
            produced = h_history(args, self.context)
        elif name and name in self.commands:
            produced = self.commands.run(name, args, self.context)
        else:
            produced = agent_response(trimmed)

        for line in produced:
            if line.kind is LineKind.ERROR:
                self.last_error = line.plain
        self.buffer.append(OutputLine(LineKind.COMMAND, trimmed))
        self.buffer.extend(produced)
        return produced

    # ---- history recall
    def navigate_history(self, direction: str) -> str:
        """Step the recall cursor ``up`` (older) or ``down`` (newer).

        Moving down past the newest entry returns an empty line.
        """
        if direction not in ("up", "down"):
            raise ValueError(f"direction must be 'up' or 'down', not {direction!r}")
        if not self.command_history:
            return ""
        last = len(self.command_history) - 1
        if direction == "up":
            index = last if self.history_index == -1 else max(0, self.history_index - 1)
        elif self.history_index in (-1, last):
            index = -1
        else:
            index = self.history_index + 1
        self.history_index = index
        return "" if index == -1 else self.command_history[index]

    # ---- completion and prompt
    def _completion_names(self) -> List[str]:
        return self.commands.names() + list(self.aliases)

    def get_command_suggestions(self, prefix: str) -> List[str]:
        return command_suggestions(prefix, self._completion_names())

    def get_file_suggestions(self, prefix: str, cwd: Optional[str] = None) -> List[str]:
        return file_suggestions(prefix, self.fs.tree, cwd or self.cwd)

    def complete(self, line: str) -> List[str]:
        return suggest(line, self._completion_names(), self.fs.tree, self.cwd)

    def get_prompt(self) -> Dict[str, str]:
        path = "~" if self.cwd == "/" else f"~{self.cwd}"
        return {"path": path, "user": self.env.get("USER", "guest")}
