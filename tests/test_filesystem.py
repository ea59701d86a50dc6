import os
import sys

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from devterm.entities import File, Folder, VPath
from devterm.filesystem import VirtualFileSystem
from devterm.seed import DEFAULT_TREE
from devterm.shell import ShellSession


def test_create_with_path_on_empty_tree():
    fs = VirtualFileSystem([])
    created = fs.create_file_with_path("src/lib/util.ts", "export {}")
    assert created is not None and created.name == "src/lib/util.ts"
    assert created.type == "typescript"
    assert fs.list_directory("src") == ["lib/"]
    assert fs.list_directory("src/lib") == ["util.ts"]
    assert fs.read_file("src/lib/util.ts") == "export {}"


def test_nested_create_next_to_base_entries():
    fs = VirtualFileSystem(DEFAULT_TREE)
    fs.create_file_with_path("src/lib/util.ts", "")
    assert fs.list_directory("src") == ["app.ts", "lib/"]
    assert fs.list_directory("src/lib") == ["render.ts", "util.ts"]


def test_list_directory_root_sorted_with_folder_suffix():
    fs = VirtualFileSystem(DEFAULT_TREE)
    assert fs.list_directory("") == [".gitignore", "README.md", "docs/", "package.json", "src/"]
    assert fs.list_directory("nowhere") == []
    assert fs.list_directory("README.md") == []


def test_delete_create_round_trip():
    fs = VirtualFileSystem(DEFAULT_TREE)
    assert fs.delete_file("README.md")
    assert fs.read_file("README.md") is None
    assert not fs.delete_file("README.md")
    fs.create_file("README.md", "x")
    assert fs.read_file("README.md") == "x"
    assert VPath.parse("README.md") not in fs.journal.deleted
    assert [f.name for f in fs.files].count("README.md") == 1


def test_delete_folder_cascades_and_closes_handles():
    fs = VirtualFileSystem(DEFAULT_TREE, open_files=["README.md"])
    fs.open_file("src/app.ts")
    fs.create_file("src/new.ts", "x")
    assert fs.active_file == "src/new.ts"
    assert fs.delete_folder("src")
    assert not any(f.name.startswith("src/") for f in fs.files)
    assert "src/" not in fs.list_directory("")
    assert fs.open_files == ["README.md"]
    assert fs.active_file == "README.md"
    assert not fs.delete_folder("src")
    assert not fs.delete_folder("")


def test_recreate_inside_deleted_folder():
    fs = VirtualFileSystem(DEFAULT_TREE)
    fs.delete_folder("src")
    fs.create_file("src/fresh.ts", "y")
    assert fs.list_directory("src") == ["fresh.ts"]
    assert fs.read_file("src/app.ts") is None


def test_recreated_folder_starts_empty():
    base = [Folder("src", children=[
        File("a.ts", "typescript", "a"),
        Folder("lib", children=[File("u.ts", "typescript", "u")]),
        Folder("empty"),
    ])]
    fs = VirtualFileSystem(base)
    assert fs.delete_folder("src")
    assert fs.create_folder("src")
    assert fs.list_directory("src") == []
    assert fs.create_file_with_path("src/lib/new.ts", "n") is not None
    assert fs.list_directory("src") == ["lib/"]
    assert fs.list_directory("src/lib") == ["new.ts"]
    assert fs.read_file("src/lib/u.ts") is None
    assert fs.files == [File("src/lib/new.ts", "typescript", "n", is_open=True)]


def test_rm_r_then_mkdir_gives_an_empty_directory():
    s = ShellSession()
    s.execute_command("rm -r src")
    s.execute_command("mkdir src")
    assert s.fs.list_directory("src") == []
    assert not any(f.name.startswith("src/") for f in s.fs.files)


def test_folder_file_conflicts_are_rejected():
    fs = VirtualFileSystem(DEFAULT_TREE)
    assert not fs.create_folder("README.md")
    assert not fs.create_folder("README.md/inner")
    assert fs.create_file("src", "x") is None
    assert fs.create_file("README.md/x.md") is None
    assert fs.create_file_with_path("README.md/deep/x.md") is None
    assert not fs.create_folder("/")


def test_create_folder_materializes_empty():
    fs = VirtualFileSystem([])
    assert fs.create_folder("notes/daily")
    assert fs.list_directory("") == ["notes/"]
    assert fs.list_directory("notes") == ["daily/"]


def test_flat_lookup_falls_back_to_case_insensitive():
    fs = VirtualFileSystem(DEFAULT_TREE)
    assert fs.get_file_by_name("readme.md").name == "README.md"
    assert fs.file_exists("README.md")
    assert not fs.file_exists("readme.md")
    assert fs.get_file_by_name("missing.md") is None


def test_open_and_close_bookkeeping():
    fs = VirtualFileSystem(DEFAULT_TREE)
    assert fs.open_file("docs/about.md") == "docs/about.md"
    assert fs.open_file(File("README.md")) == "README.md"
    assert fs.open_file("nope") is None
    assert fs.open_files == ["docs/about.md", "README.md"]
    fs.close_file("README.md")
    assert fs.active_file == "docs/about.md"
    assert fs.current_file.content.startswith("# About")
    fs.close_other_files("package.json")
    assert fs.open_files == ["package.json"]
    fs.close_all_files()
    assert fs.open_files == [] and fs.current_file is None


def test_content_overlay_and_reset():
    fs = VirtualFileSystem(DEFAULT_TREE)
    original = fs.read_file("package.json")
    fs.update_file_content("package.json", "{}")
    assert fs.is_file_modified("package.json")
    assert fs.read_file("package.json") == "{}"
    assert fs.reset_file("package.json")
    assert not fs.reset_file("package.json")
    assert fs.read_file("package.json") == original


def test_version_bumps_on_every_write():
    fs = VirtualFileSystem(DEFAULT_TREE)
    v0 = fs.version
    fs.create_file("a.md")
    fs.update_file_content("a.md", "x")
    fs.delete_file("a.md")
    assert fs.version == v0 + 3


def test_search_facade():
    fs = VirtualFileSystem(DEFAULT_TREE)
    results = fs.search("render", max_results=10)
    assert {r.file_path for r in results} == {"src/app.ts", "src/lib/render.ts"}
