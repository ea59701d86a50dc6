"""Defaults and optional YAML configuration.

Settings live in module globals, reset whenever the process restarts.  A
``devterm.yaml`` in the working directory (or the file named by the
``DEVTERM_CONFIG`` environment variable) may override the environment,
the aliases and the base tree::

    env:
      USER: alice
    aliases:
      gs: git status
    tree:
      - name: README.md
        content: "# hello"
      - name: src
        children:
          - name: app.ts
            content: "export {}"
"""

import logging
import os
from typing import Any, Dict, List

import yaml

from devterm.entities import Entity, tree_from_data
from devterm.seed import DEFAULT_TREE

logger = logging.getLogger(__name__)

VERSION = "3.0.2"
HOSTNAME = "devterm.local"
PRODUCT = "DEVTERM"

CONFIG_PATH = "devterm.yaml"
PACK_PATH = "commands.yaml"

DEFAULT_ENV: Dict[str, str] = {
    "USER": "guest",
    "HOME": "~",
    "SHELL": "/bin/devterm-sh",
    "PATH": "/usr/local/bin:/usr/bin:/bin",
    "TERM": "xterm-256color",
    "EDITOR": "code",
    "NODE_VERSION": "20.10.0",
    "NPM_VERSION": "10.2.3",
}

DEFAULT_ALIASES: Dict[str, str] = {
    "ll": "ls -la",
    "la": "ls -a",
    "cls": "clear",
    "..": "cd ..",
    "c": "clear",
}

# commands whose later arguments complete against directory entries
FILE_COMMANDS = ("cat", "open", "head", "tail", "wc", "grep", "cd", "ls")

MAX_SUGGESTIONS = 8
CONSOLE_LIMIT = 100


def _read_yaml(path: str) -> Any:
    if not os.path.exists(path):
        return None
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_config(path: str = "") -> Dict[str, Any]:
    """Return ``{"env", "aliases", "tree"}`` with file values merged over defaults.

    ``tree`` is None when the file does not supply one.
    """
    path = path or os.environ.get("DEVTERM_CONFIG", CONFIG_PATH)
    data = _read_yaml(path) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    env = dict(DEFAULT_ENV)
    env.update({str(k): str(v) for k, v in (data.get("env") or {}).items()})
    aliases = dict(DEFAULT_ALIASES)
    aliases.update({str(k): str(v) for k, v in (data.get("aliases") or {}).items()})
    tree: Any = None
    if data.get("tree") is not None:
        tree = tree_from_data(data["tree"])
    if data:
        logger.info("loaded configuration from %s", path)
    return {"env": env, "aliases": aliases, "tree": tree}


def load_yaml_pack(path: str = PACK_PATH) -> Dict[str, List[str]]:
    """Load an external YAML command pack: ``name: text`` or ``name: [lines]``."""
    data = _read_yaml(path) or {}
    pack: Dict[str, List[str]] = {}
    for k, v in data.items():
        if isinstance(v, list):
            pack[str(k)] = [str(x) for x in v]
        else:
            pack[str(k)] = str(v).splitlines() or [""]
    return pack


def base_tree(config: Dict[str, Any]) -> List[Entity]:
    if config.get("tree") is not None:
        return config["tree"]
    return DEFAULT_TREE
