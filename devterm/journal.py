"""Mutation journal: the overlays recorded on top of the immutable base tree."""

import logging
from collections import OrderedDict
from typing import Dict, Optional, Set

from devterm.entities import File, VPath

logger = logging.getLogger(__name__)


class MutationJournal:
    """Pending creations, deletions and content edits for one session.

    Nothing here touches the base tree.  Every write bumps ``version`` so a
    memoized materialized view knows it is stale.
    """

    def __init__(self) -> None:
        self.deleted: Set[VPath] = set()
        # insertion order is creation order; re-creating moves to the end
        self.created: "OrderedDict[VPath, File]" = OrderedDict()
        self.created_folders: Set[VPath] = set()
        self.modified: Dict[VPath, str] = {}
        self.version = 0

    def _bump(self) -> None:
        self.version += 1

    def is_deleted(self, path: VPath) -> bool:
        return path in self.deleted

    def content_for(self, path: VPath, file: File) -> File:
        """Apply the content overlay to ``file`` if one is recorded."""
        content: Optional[str] = self.modified.get(path)
        if content is None:
            return file
        return File(name=file.name, type=file.type, content=content, is_open=file.is_open)

    def create(self, path: VPath, file: File) -> None:
        # un-tombstone before re-adding, last write wins
        self.deleted.discard(path)
        self.created.pop(path, None)
        self.created[path] = file
        logger.debug("journal: created %s", path)
        self._bump()

    def delete(self, path: VPath) -> None:
        self.modified.pop(path, None)
        self.created.pop(path, None)
        self.deleted.add(path)
        logger.debug("journal: deleted %s", path)
        self._bump()

    def add_folder(self, path: VPath) -> bool:
        self.deleted.discard(path)
        if path in self.created_folders:
            return False
        self.created_folders.add(path)
        logger.debug("journal: created folder %s", path)
        self._bump()
        return True

    def drop_folders_under(self, path: VPath) -> None:
        self.created_folders = {f for f in self.created_folders if not f.is_within(path)}
        self._bump()

    def drop_created_under(self, path: VPath) -> None:
        for key in [k for k in self.created if k.is_within(path)]:
            del self.created[key]
            self.modified.pop(key, None)
        self._bump()

    def modify(self, path: VPath, content: str) -> None:
        self.modified[path] = content
        logger.debug("journal: modified %s (%d chars)", path, len(content))
        self._bump()

    def reset(self, path: VPath) -> bool:
        if path not in self.modified:
            return False
        del self.modified[path]
        self._bump()
        return True
