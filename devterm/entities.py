"""Entity tree nodes and the canonical path value.

A base tree is a list of ``File`` and ``Folder`` nodes supplied by the host.
Inside the tree a node's ``name`` is a single path segment.  In the flat file
list produced by the materializer the same ``File`` carries its full path as
``name`` (e.g. ``src/lib/util.ts``).  Both views are derived from one
``VPath`` so they cannot disagree.
"""

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Tuple, Union


@dataclass(frozen=True)
class File:
    name: str
    type: str = "markdown"
    content: str = ""
    is_open: bool = False


@dataclass
class Folder:
    name: str
    children: List["Entity"] = field(default_factory=list)
    is_open: bool = False


Entity = Union[File, Folder]


# extension -> display kind
_FILE_TYPES = {
    "json": "json",
    "md": "markdown",
    "lock": "lock",
    "ts": "typescript",
    "tsx": "typescript",
    "js": "javascript",
    "jsx": "javascript",
    "css": "css",
    "xml": "xml",
}


def file_type_for(filename: str) -> str:
    """Return the content kind used for highlighting a file name."""
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return _FILE_TYPES.get(ext, "markdown")


@dataclass(frozen=True)
class VPath:
    """Absolute path inside the virtual tree as an ordered tuple of segments.

    ``VPath.parse`` accepts ``a/b``, ``/a/b``, ``~/a/b`` and backslashes,
    drops empty and ``.`` segments and folds ``..`` (never above the root).
    ``str()`` gives the flat-list key (no leading slash) and ``absolute``
    the shell form (leading slash, root is ``/``).
    """

    parts: Tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: Union[str, "VPath", None]) -> "VPath":
        if isinstance(text, VPath):
            return text
        raw = (text or "").replace("\\", "/")
        if raw.startswith("~"):
            raw = raw[1:]
        parts: List[str] = []
        for seg in raw.split("/"):
            if not seg or seg == ".":
                continue
            if seg == "..":
                if parts:
                    parts.pop()
                continue
            parts.append(seg)
        return cls(tuple(parts))

    @property
    def is_root(self) -> bool:
        return not self.parts

    @property
    def name(self) -> str:
        return self.parts[-1] if self.parts else ""

    @property
    def parent(self) -> "VPath":
        return VPath(self.parts[:-1])

    @property
    def absolute(self) -> str:
        return "/" + "/".join(self.parts)

    def child(self, segment: str) -> "VPath":
        return VPath(self.parts + (segment,))

    def is_within(self, other: "VPath") -> bool:
        """True if ``self`` equals ``other`` or lies underneath it."""
        n = len(other.parts)
        return self.parts[:n] == other.parts

    def ancestors(self) -> Iterator["VPath"]:
        """Yield every proper ancestor, shortest first, excluding the root."""
        for i in range(1, len(self.parts)):
            yield VPath(self.parts[:i])

    def __str__(self) -> str:
        return "/".join(self.parts)

    def __len__(self) -> int:
        return len(self.parts)


def walk(items: List[Entity], base: VPath = VPath()) -> Iterator[Tuple[VPath, Entity]]:
    """Depth-first (path, entity) pairs in tree order."""
    for item in items:
        path = base.child(item.name)
        yield path, item
        if isinstance(item, Folder):
            yield from walk(item.children, path)


def tree_from_data(data: Any) -> List[Entity]:
    """Build a base tree from plain nested data, e.g. a YAML document.

    Each node is a mapping: folders have ``children`` (a list), files have
    ``content`` and optionally ``type``.  A bare string is an empty file.
    """
    nodes: List[Entity] = []
    for node in data or []:
        if isinstance(node, str):
            nodes.append(File(name=node, type=file_type_for(node)))
            continue
        if not isinstance(node, dict) or "name" not in node:
            raise ValueError(f"invalid tree node: {node!r}")
        name = str(node["name"])
        if "children" in node or node.get("type") == "folder":
            nodes.append(Folder(
                name=name,
                children=tree_from_data(node.get("children")),
                is_open=bool(node.get("open", False)),
            ))
        else:
            nodes.append(File(
                name=name,
                type=str(node.get("type") or file_type_for(name)),
                content=str(node.get("content", "")),
            ))
    return nodes
