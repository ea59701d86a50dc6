"""Tab completion over command names, aliases and directory entries."""

from typing import Iterable, List

from devterm.config import FILE_COMMANDS, MAX_SUGGESTIONS
from devterm.entities import Entity, Folder
from devterm.paths import children_at, resolve


def command_suggestions(prefix: str, names: Iterable[str]) -> List[str]:
    """Names starting with ``prefix`` (any case); an empty prefix lists the first ten."""
    unique = list(dict.fromkeys(names))
    if not prefix:
        return unique[:10]
    p = prefix.lower()
    return [n for n in unique if n.lower().startswith(p)][:MAX_SUGGESTIONS]


def file_suggestions(prefix: str, tree: List[Entity], cwd: str) -> List[str]:
    """Entries of ``cwd`` starting with ``prefix``; folders end with ``/``.

    A prefix containing ``/`` completes inside that directory and keeps the
    directory part, so ``src/l`` gives ``src/lib/``.
    """
    head, _, pattern = prefix.rpartition("/")
    base = resolve(cwd, head or "/") if "/" in prefix else cwd
    lead = head + "/" if "/" in prefix else ""
    p = pattern.lower()
    matches = []
    for item in children_at(tree, base):
        if not item.name.lower().startswith(p):
            continue
        suffix = "/" if isinstance(item, Folder) else ""
        matches.append(f"{lead}{item.name}{suffix}")
    return matches[:MAX_SUGGESTIONS]


def suggest(line: str, names: Iterable[str], tree: List[Entity], cwd: str) -> List[str]:
    """Pick the completion mode from the token position in ``line``.

    A single token completes command names; later tokens of a file command
    complete directory entries.  Trailing whitespace starts a new, empty
    token.
    """
    tokens = line.split()
    if line and line[-1].isspace():
        tokens.append("")
    if len(tokens) <= 1:
        return command_suggestions(tokens[0] if tokens else "", names)
    if tokens[0].lower() in FILE_COMMANDS:
        return file_suggestions(tokens[-1], tree, cwd)
    return []
