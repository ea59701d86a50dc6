"""devterm: an in-memory developer terminal over a copy-on-write document tree."""

from devterm.config import VERSION as __version__
from devterm.entities import File, Folder, VPath
from devterm.filesystem import VirtualFileSystem
from devterm.output import LineKind, OutputLine
from devterm.shell import ShellSession

__all__ = [
    "File",
    "Folder",
    "LineKind",
    "OutputLine",
    "ShellSession",
    "VPath",
    "VirtualFileSystem",
    "__version__",
]
