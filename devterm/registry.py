"""Command table: the closed core registry plus the open novelty table."""

import logging
from collections import OrderedDict
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional

from devterm.commands import BUILTINS, Command, missing_builtins
from devterm.errors import ShellError
from devterm.novelty import NOVELTY, canned_command
from devterm.output import OutputLine, err

if TYPE_CHECKING:
    from devterm.shell import ShellContext

logger = logging.getLogger(__name__)


class CommandTable:
    """Lookup and dispatch for every command a session knows.

    Core commands come from ``BUILTINS`` and cannot be replaced.  The open
    table starts as a copy of ``NOVELTY`` (or ``extras``) and accepts late
    registration, e.g. from a YAML pack.
    """

    def __init__(self, extras: Optional[Mapping[str, Command]] = None,
                 pack: Optional[Dict[str, List[str]]] = None) -> None:
        missing = missing_builtins()
        if missing:
            raise RuntimeError("core commands without a handler: " + ", ".join(m.value for m in missing))
        self._core: "OrderedDict[str, Command]" = OrderedDict((cid.value, cmd) for cid, cmd in BUILTINS.items())
        self._open: "OrderedDict[str, Command]" = OrderedDict()
        for command in (NOVELTY if extras is None else extras).values():
            self.register(command)
        for name, text_lines in (pack or {}).items():
            self.register(canned_command(name, text_lines))

    def register(self, command: Command) -> bool:
        key = command.name.lower()
        if key in self._core:
            logger.warning("refusing to override core command %r", key)
            return False
        self._open[key] = command
        return True

    def unregister(self, name: str) -> bool:
        return self._open.pop(name.lower(), None) is not None

    def get(self, name: str) -> Optional[Command]:
        key = name.lower()
        return self._core.get(key) or self._open.get(key)

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def names(self) -> List[str]:
        return list(self._core) + list(self._open)

    def by_category(self) -> "OrderedDict[str, List[Command]]":
        groups: "OrderedDict[str, List[Command]]" = OrderedDict()
        for cmd in list(self._core.values()) + list(self._open.values()):
            groups.setdefault(cmd.category, []).append(cmd)
        return groups

    def run(self, name: str, args: List[str], ctx: "ShellContext") -> List[OutputLine]:
        """Execute ``name``; every failure comes back as an error line."""
        cmd = self.get(name)
        if cmd is None:
            return [err(f"{name}: command not found")]
        logger.debug("dispatch %s %s", cmd.name, args)
        try:
            result = cmd.execute(args, ctx)
        except ShellError as e:
            logger.debug("%s: %s", type(e).__name__, e.message)
            return [err(e.message)]
        except Exception as e:
            logger.exception("command %s failed", cmd.name)
            return [err(f"{cmd.name}: {e}")]
        return list(result or [])
