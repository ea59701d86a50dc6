"""The filesystem core exposed to the host: read, open, create, delete, list.

All mutations go through the journal; the base tree passed in is shared
read-only with the host and never modified.
"""

import logging
from typing import List, Optional, Union

from devterm.entities import Entity, File, Folder, VPath, file_type_for, walk
from devterm.journal import MutationJournal
from devterm.materializer import Materializer
from devterm.paths import lookup
from devterm.search import SearchResult, search_files

logger = logging.getLogger(__name__)


class VirtualFileSystem:
    """Copy-on-write document tree plus the host's open-file bookkeeping."""

    def __init__(self, base: Optional[List[Entity]] = None,
                 open_files: Optional[List[str]] = None, active_file: str = "") -> None:
        self.base: List[Entity] = list(base or [])
        self.journal = MutationJournal()
        self._materializer = Materializer(self.base, self.journal)
        self.open_files: List[str] = list(open_files or [])
        self.active_file = active_file

    # ---- views
    @property
    def tree(self) -> List[Entity]:
        return self._materializer.tree

    @property
    def files(self) -> List[File]:
        return self._materializer.files

    @property
    def version(self) -> int:
        return self.journal.version

    @property
    def current_file(self) -> Optional[File]:
        return self.get_file_by_name(self.active_file) if self.active_file else None

    def get_file_by_name(self, filename: str) -> Optional[File]:
        """Flat lookup: exact path first, then case-insensitive."""
        key = str(VPath.parse(filename))
        for f in self.files:
            if f.name == key:
                return f
        lowered = key.lower()
        for f in self.files:
            if f.name.lower() == lowered:
                return f
        return None

    def file_exists(self, filename: str) -> bool:
        path = VPath.parse(filename)
        return any(f.name == str(path) for f in self.files)

    def read_file(self, filename: str) -> Optional[str]:
        found = self.get_file_by_name(filename)
        return found.content if found else None

    # ---- editor state
    def open_file(self, file: Union[File, str]) -> Optional[str]:
        found = self.get_file_by_name(file) if isinstance(file, str) else file
        if found is None:
            return None
        if found.name not in self.open_files:
            self.open_files.append(found.name)
        self.active_file = found.name
        return found.name

    def close_file(self, filename: str) -> None:
        self.open_files = [f for f in self.open_files if f != filename]
        if self.active_file == filename:
            self.active_file = self.open_files[-1] if self.open_files else ""

    def close_all_files(self) -> None:
        self.open_files = []
        self.active_file = ""

    def close_other_files(self, keep: str) -> None:
        self.open_files = [keep]
        self.active_file = keep

    def update_file_content(self, filename: str, content: str) -> None:
        self.journal.modify(VPath.parse(filename), content)

    def reset_file(self, filename: str) -> bool:
        return self.journal.reset(VPath.parse(filename))

    def is_file_modified(self, filename: str) -> bool:
        return VPath.parse(filename) in self.journal.modified

    # ---- mutations
    def _blocked_by_file(self, path: VPath) -> bool:
        for ancestor in list(path.ancestors()) + [path]:
            if isinstance(lookup(self.tree, ancestor.absolute), File):
                return True
        return False

    def create_file(self, filename: str, content: str = "") -> Optional[File]:
        """Create (or replace) a file; parents are synthesized by the view."""
        path = VPath.parse(filename)
        if path.is_root:
            return None
        if isinstance(lookup(self.tree, path.absolute), Folder):
            logger.warning("create_file: %s is a directory", path)
            return None
        if any(isinstance(lookup(self.tree, a.absolute), File) for a in path.ancestors()):
            logger.warning("create_file: parent of %s is a file", path)
            return None
        new_file = File(name=str(path), type=file_type_for(path.name), content=content, is_open=True)
        self.journal.create(path, new_file)
        if new_file.name not in self.open_files:
            self.open_files.append(new_file.name)
        self.active_file = new_file.name
        return new_file

    def create_file_with_path(self, file_path: str, content: str = "") -> Optional[File]:
        path = VPath.parse(file_path)
        if path.is_root:
            return None
        for ancestor in path.ancestors():
            if not self.create_folder(str(ancestor)):
                return None
        return self.create_file(str(path), content)

    def create_folder(self, folder_path: str) -> bool:
        """Record an explicit folder.  A path already taken by a file is rejected."""
        path = VPath.parse(folder_path)
        if path.is_root:
            return False
        if self._blocked_by_file(path):
            logger.warning("create_folder: %s conflicts with an existing file", path)
            return False
        self.journal.add_folder(path)
        return True

    def delete_file(self, filename: str) -> bool:
        found = self.get_file_by_name(filename)
        if found is None:
            return False
        self.journal.delete(VPath.parse(found.name))
        self.close_file(found.name)
        return True

    def delete_folder(self, folder_path: str) -> bool:
        """Delete a folder with everything below it and close open handles there."""
        path = VPath.parse(folder_path)
        folder = None if path.is_root else lookup(self.tree, path.absolute)
        if not isinstance(folder, Folder):
            return False
        # every descendant, folders included, so recreating ``path`` starts empty
        doomed = [p for p, _ in walk(folder.children, path)]
        for f in self.files:
            file_path = VPath.parse(f.name)
            if file_path.is_within(path) and file_path not in doomed:
                doomed.append(file_path)
        self.journal.drop_folders_under(path)
        self.journal.drop_created_under(path)
        for file_path in doomed:
            self.journal.delete(file_path)
        self.journal.delete(path)
        prefix = str(path) + "/"
        self.open_files = [f for f in self.open_files if not f.startswith(prefix)]
        if self.active_file.startswith(prefix):
            self.active_file = self.open_files[-1] if self.open_files else ""
        return True

    # ---- listing and search
    def list_directory(self, dir_path: str = "") -> List[str]:
        """Immediate children of ``dir_path``, folders suffixed with ``/``."""
        item = lookup(self.tree, VPath.parse(dir_path).absolute)
        if not isinstance(item, Folder):
            return []
        return sorted(c.name + "/" if isinstance(c, Folder) else c.name for c in item.children)

    def search(self, query: str, **options) -> List[SearchResult]:
        return search_files(self.files, query, **options)
