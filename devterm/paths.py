"""Path resolution against the shell's working directory, and tree lookup."""

from typing import List, Optional, Tuple

from devterm.entities import Entity, Folder, VPath, walk


def resolve(cwd: str, target: str) -> str:
    """Resolve ``target`` against ``cwd`` and return a normalized absolute path.

    ``/x`` and ``~/x`` are absolute (``~`` is the root, not a home
    directory), ``..`` and ``../rest`` pop one segment per step, ``.`` is
    ``cwd`` and anything else is appended.  Popping past the root stays at
    the root.
    """
    if target.startswith("/") or target.startswith("~"):
        return VPath.parse(target).absolute
    if target == "..":
        return VPath.parse(cwd).parent.absolute
    if target.startswith("../"):
        return resolve(VPath.parse(cwd).parent.absolute, target[3:])
    if target == ".":
        return VPath.parse(cwd).absolute
    return VPath.parse(VPath.parse(cwd).absolute + "/" + target).absolute


def lookup(tree: List[Entity], path: str) -> Optional[Entity]:
    """Walk ``path`` segment by segment through a materialized tree.

    Matching is case-sensitive.  The root resolves to a synthetic folder
    holding the top-level entries.
    """
    vpath = VPath.parse(path)
    if vpath.is_root:
        return Folder(name="root", children=tree, is_open=True)
    nodes = tree
    item: Optional[Entity] = None
    for i, segment in enumerate(vpath.parts):
        item = next((n for n in nodes if n.name == segment), None)
        if item is None:
            return None
        if isinstance(item, Folder):
            nodes = item.children
        elif i != len(vpath.parts) - 1:
            return None
    return item


def children_at(tree: List[Entity], path: str) -> List[Entity]:
    item = lookup(tree, path)
    if isinstance(item, Folder):
        return item.children
    return []


def all_entries(items: List[Entity]) -> List[Tuple[str, Entity]]:
    """Every (relative path, entity) below ``items`` in tree order."""
    return [(str(p), e) for p, e in walk(items)]
