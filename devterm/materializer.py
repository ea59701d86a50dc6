"""Merge the base tree and the mutation journal into the observable view."""

from typing import List, Optional, Set, Tuple

from devterm.entities import Entity, File, Folder, VPath, walk
from devterm.journal import MutationJournal

View = Tuple[List[Entity], List[File]]


def _filter_base(items: List[Entity], base: VPath, journal: MutationJournal) -> List[Entity]:
    result: List[Entity] = []
    for item in items:
        path = base.child(item.name)
        if journal.is_deleted(path):
            continue
        if isinstance(item, Folder):
            result.append(Folder(
                name=item.name,
                children=_filter_base(item.children, path, journal),
                is_open=item.is_open,
            ))
        else:
            result.append(journal.content_for(path, item))
    return result


def _ensure_folder(root: List[Entity], path: VPath) -> Optional[List[Entity]]:
    """Locate or synthesize the folder chain for ``path``.

    Returns the children list of the last folder, or None when a segment is
    already taken by a file (a file is never turned into a folder).
    """
    nodes = root
    for segment in path.parts:
        found = next((n for n in nodes if n.name == segment), None)
        if found is None:
            found = Folder(name=segment, is_open=True)
            nodes.append(found)
        elif not isinstance(found, Folder):
            return None
        found.is_open = True
        nodes = found.children
    return nodes


def materialize(base: List[Entity], journal: MutationJournal) -> View:
    """Return ``(tree, files)`` for ``base`` with ``journal`` applied.

    Pure: ``base`` is never mutated and equal inputs give equal outputs.
    ``files`` is the flat list keyed by full path, base files first (in tree
    order) followed by created files (in creation order).
    """
    tree = _filter_base(base, VPath(), journal)

    for folder in sorted(journal.created_folders, key=len):
        if journal.is_deleted(folder):
            continue
        _ensure_folder(tree, folder)

    placed: Set[VPath] = set()
    created_files: List[File] = []
    for path, file in journal.created.items():
        if journal.is_deleted(path):
            continue
        current = journal.content_for(path, file)
        siblings = _ensure_folder(tree, path.parent)
        if siblings is None:
            continue
        node = File(name=path.name, type=current.type, content=current.content, is_open=current.is_open)
        idx = next((i for i, n in enumerate(siblings) if n.name == path.name), None)
        if idx is None:
            siblings.append(node)
        elif isinstance(siblings[idx], Folder):
            continue
        else:
            siblings[idx] = node
        placed.add(path)
        created_files.append(File(name=str(path), type=current.type, content=current.content,
                                  is_open=current.is_open))

    files: List[File] = []
    for path, item in walk(_filter_base(base, VPath(), journal)):
        if isinstance(item, File) and path not in placed:
            files.append(File(name=str(path), type=item.type, content=item.content, is_open=item.is_open))
    files.extend(created_files)
    return tree, files


class Materializer:
    """Caches the materialized view until the journal version changes."""

    def __init__(self, base: List[Entity], journal: MutationJournal) -> None:
        self.base = base
        self.journal = journal
        self._version = -1
        self._view: View = ([], [])

    def view(self) -> View:
        if self._version != self.journal.version:
            self._view = materialize(self.base, self.journal)
            self._version = self.journal.version
        return self._view

    @property
    def tree(self) -> List[Entity]:
        return self.view()[0]

    @property
    def files(self) -> List[File]:
        return self.view()[1]
