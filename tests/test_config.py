import os
import sys

import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from devterm.config import DEFAULT_ALIASES, base_tree, load_config, load_yaml_pack
from devterm.entities import File, Folder, file_type_for, tree_from_data
from devterm.registry import CommandTable
from devterm.seed import DEFAULT_TREE
from devterm.shell import ShellSession

CONFIG = """\
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
      - notes.txt
"""

PACK = """\
motd: Welcome aboard
banner:
  - line one
  - line two
ls: should not win
"""


def test_defaults_without_files(tmp_path):
    cfg = load_config(str(tmp_path / "missing.yaml"))
    assert cfg["env"]["USER"] == "guest"
    assert cfg["aliases"] == DEFAULT_ALIASES
    assert cfg["tree"] is None
    assert base_tree(cfg) is DEFAULT_TREE
    assert load_yaml_pack(str(tmp_path / "missing.yaml")) == {}


def test_config_file_merges_over_defaults(tmp_path):
    path = tmp_path / "devterm.yaml"
    path.write_text(CONFIG, encoding="utf-8")
    cfg = load_config(str(path))
    assert cfg["env"]["USER"] == "alice"
    assert cfg["env"]["SHELL"] == "/bin/devterm-sh"
    assert cfg["aliases"]["gs"] == "git status"
    assert cfg["aliases"]["ll"] == "ls -la"
    tree = base_tree(cfg)
    assert tree[0] == File("README.md", "markdown", "# hello")
    assert isinstance(tree[1], Folder)
    assert [c.name for c in tree[1].children] == ["app.ts", "notes.txt"]
    assert tree[1].children[0].type == "typescript"


def test_config_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "other.yaml"
    path.write_text("env:\n  USER: bob\n", encoding="utf-8")
    monkeypatch.setenv("DEVTERM_CONFIG", str(path))
    assert load_config()["env"]["USER"] == "bob"


def test_non_mapping_config_is_rejected(tmp_path):
    path = tmp_path / "devterm.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_tree_from_data_validation():
    assert tree_from_data([{"name": "docs", "type": "folder"}]) == [Folder("docs")]
    with pytest.raises(ValueError):
        tree_from_data([{"content": "no name"}])
    with pytest.raises(ValueError):
        tree_from_data([42])


def test_file_type_for():
    assert file_type_for("a.TSX") == "typescript"
    assert file_type_for("package-lock.lock") == "lock"
    assert file_type_for("Makefile") == "markdown"


def test_yaml_pack_registers_canned_commands(tmp_path):
    path = tmp_path / "commands.yaml"
    path.write_text(PACK, encoding="utf-8")
    pack = load_yaml_pack(str(path))
    assert pack["banner"] == ["line one", "line two"]
    table = CommandTable(pack=pack)
    assert table.get("motd").category == "custom"
    assert table.get("ls").description == "List directory contents"
    s = ShellSession(commands=table)
    assert [l.plain for l in s.execute_command("banner")] == ["line one", "line two"]
    assert [l.plain for l in s.execute_command("MOTD")] == ["Welcome aboard"]


def test_session_from_config(tmp_path):
    cfg = tmp_path / "devterm.yaml"
    cfg.write_text(CONFIG, encoding="utf-8")
    pack = tmp_path / "commands.yaml"
    pack.write_text(PACK, encoding="utf-8")
    s = ShellSession.from_config(str(cfg), str(pack))
    assert s.get_prompt()["user"] == "alice"
    assert s.fs.list_directory("src") == ["app.ts", "notes.txt"]
    assert [l.plain for l in s.execute_command("motd")] == ["Welcome aboard"]
    assert [l.plain for l in s.execute_command("gs")][0] == "On branch main"
