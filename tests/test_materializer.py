import copy
import os
import sys

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from devterm.entities import File, Folder, VPath
from devterm.journal import MutationJournal
from devterm.materializer import Materializer, materialize
from devterm.seed import DEFAULT_TREE


def _busy_journal():
    j = MutationJournal()
    j.create(VPath.parse("src/lib/util.ts"), File("src/lib/util.ts", "typescript", "export {}"))
    j.delete(VPath.parse("docs/about.md"))
    j.modify(VPath.parse("README.md"), "# changed")
    j.add_folder(VPath.parse("notes/daily"))
    return j


def test_materialize_is_idempotent():
    j = _busy_journal()
    first = materialize(DEFAULT_TREE, j)
    second = materialize(DEFAULT_TREE, j)
    assert first == second


def test_materialize_never_touches_base():
    before = copy.deepcopy(DEFAULT_TREE)
    materialize(DEFAULT_TREE, _busy_journal())
    assert DEFAULT_TREE == before


def test_flat_list_is_keyed_by_full_path():
    tree, files = materialize(DEFAULT_TREE, _busy_journal())
    names = [f.name for f in files]
    assert "src/lib/util.ts" in names
    assert "src/lib/render.ts" in names
    assert "docs/about.md" not in names
    # base files first, created files last
    assert names[-1] == "src/lib/util.ts"
    readme = next(f for f in files if f.name == "README.md")
    assert readme.content == "# changed"


def test_tree_nodes_use_segment_names():
    tree, _ = materialize(DEFAULT_TREE, _busy_journal())
    src = next(n for n in tree if n.name == "src")
    lib = next(n for n in src.children if n.name == "lib")
    assert sorted(n.name for n in lib.children) == ["render.ts", "util.ts"]
    notes = next(n for n in tree if n.name == "notes")
    assert isinstance(notes, Folder) and notes.is_open
    assert notes.children[0].name == "daily"


def test_created_file_replaces_base_entry():
    base = [File("a.md", content="old")]
    j = MutationJournal()
    j.create(VPath.parse("a.md"), File("a.md", content="new"))
    tree, files = materialize(base, j)
    assert tree == [File("a.md", content="new")]
    assert [(f.name, f.content) for f in files] == [("a.md", "new")]


def test_created_entry_never_turns_file_into_folder():
    base = [File("a.md", content="x")]
    j = MutationJournal()
    j.add_folder(VPath.parse("a.md/inner"))
    j.create(VPath.parse("a.md/b.md"), File("a.md/b.md"))
    tree, files = materialize(base, j)
    assert tree == [File("a.md", content="x")]
    assert [f.name for f in files] == ["a.md"]


def test_delete_then_create_round_trip():
    j = MutationJournal()
    path = VPath.parse("README.md")
    j.delete(path)
    assert all(f.name != "README.md" for f in materialize(DEFAULT_TREE, j)[1])
    j.create(path, File("README.md", content="x"))
    assert path not in j.deleted
    files = materialize(DEFAULT_TREE, j)[1]
    assert [f.content for f in files if f.name == "README.md"] == ["x"]


def test_materializer_memoizes_on_version():
    j = MutationJournal()
    m = Materializer(DEFAULT_TREE, j)
    first = m.view()
    assert m.view() is first
    j.modify(VPath.parse("README.md"), "edited")
    second = m.view()
    assert second is not first
    assert any(f.content == "edited" for f in second[1])
