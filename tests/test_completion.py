import os
import sys

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from devterm.completion import command_suggestions, file_suggestions, suggest
from devterm.entities import File
from devterm.filesystem import VirtualFileSystem
from devterm.seed import DEFAULT_TREE
from devterm.shell import ShellSession


def test_command_prefix_is_case_insensitive():
    s = ShellSession()
    assert s.get_command_suggestions("hi") == ["history"]
    assert s.get_command_suggestions("L") == ["ls", "ll", "la"]
    assert s.complete("pw") == ["pwd"]


def test_empty_prefix_lists_first_ten():
    names = [f"cmd{i}" for i in range(20)]
    assert command_suggestions("", names) == names[:10]
    assert suggest("", names, [], "/") == names[:10]


def test_suggestions_are_capped_and_unique():
    names = [f"go{i}" for i in range(20)] + ["go1"]
    assert command_suggestions("go", names) == [f"go{i}" for i in range(8)]


def test_file_commands_complete_directory_entries():
    s = ShellSession()
    assert s.complete("cat sr") == ["src/"]
    assert s.complete("cat read") == ["README.md"]
    assert s.complete("cat ") == ["README.md", "package.json", ".gitignore", "src/", "docs/"]
    assert s.complete("grep TODO sr") == ["src/"]
    s.execute_command("cd src")
    assert s.complete("ls l") == ["lib/"]


def test_other_multi_token_lines_get_nothing():
    s = ShellSession()
    assert s.complete("echo sr") == []
    assert s.complete("git st") == []


def test_nested_prefix_keeps_directory_part():
    assert file_suggestions("src/l", DEFAULT_TREE, "/") == ["src/lib/"]
    assert file_suggestions("/docs/a", DEFAULT_TREE, "/src") == ["/docs/about.md"]
    assert file_suggestions("../R", DEFAULT_TREE, "/src") == ["../README.md"]


def test_file_suggestions_capped_at_eight():
    fs = VirtualFileSystem([File(f"f{i}.md") for i in range(12)])
    assert len(file_suggestions("f", fs.tree, "/")) == 8
    s = ShellSession(fs=fs)
    assert s.get_file_suggestions("f1") == ["f1.md", "f10.md", "f11.md"]
