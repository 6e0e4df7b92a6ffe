import os
import stat
import sys
from pathlib import Path

import pytest
from anytree import PreOrderIter

from structview import TreeConfig, build_tree
from structview.tree import filter_entries


def _collect_paths(node, root: Path):
    """
    Collect relative POSIX paths from the built tree (including directories).
    Returns a set of strings.
    """
    rels = set()
    root = root.resolve()
    for n in PreOrderIter(node):
        p = getattr(n, "fs_path", None)
        assert p is not None, "each node must carry a `fs_path` attribute"
        rels.add("" if p == root else p.relative_to(root).as_posix())
    return rels


def _make_file(p: Path, content: str = "x"):
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content, encoding="utf-8")


def _fixture(tmp_path: Path):
    # root/{a.txt, sub/{b.py, .hidden}}
    _make_file(tmp_path / "a.txt", "alpha\n")
    _make_file(tmp_path / "sub/b.py", "x = 1\n")
    _make_file(tmp_path / "sub/.hidden", "secret\n")


def test_root_must_exist(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        build_tree(TreeConfig(root=tmp_path / "missing"))


def test_root_must_be_a_directory(tmp_path: Path):
    f = tmp_path / "single.txt"
    _make_file(f, "hello")
    with pytest.raises(NotADirectoryError):
        build_tree(TreeConfig(root=f))


def test_default_options_hide_dot_entries(tmp_path: Path):
    _fixture(tmp_path)

    node = build_tree(TreeConfig(root=tmp_path))
    rels = _collect_paths(node, tmp_path)

    assert rels == {"", "a.txt", "sub", "sub/b.py"}


def test_show_hidden_reveals_dot_entries(tmp_path: Path):
    _fixture(tmp_path)

    node = build_tree(TreeConfig(root=tmp_path, show_hidden=True))
    rels = _collect_paths(node, tmp_path)

    assert rels == {"", "a.txt", "sub", "sub/b.py", "sub/.hidden"}


def test_hidden_rule_applies_to_directories(tmp_path: Path):
    _make_file(tmp_path / ".config/settings.toml")
    _make_file(tmp_path / "visible.txt")

    rels = _collect_paths(build_tree(TreeConfig(root=tmp_path)), tmp_path)
    assert ".config" not in rels
    assert ".config/settings.toml" not in rels


def test_node_attributes(tmp_path: Path):
    _fixture(tmp_path)

    node = build_tree(TreeConfig(root=tmp_path))
    assert node.is_dir is True
    assert node.level == -1

    sub = next(n for n in PreOrderIter(node) if n.name == "sub")
    assert sub.is_dir is True
    assert sub.level == 0
    bpy = next(n for n in PreOrderIter(node) if n.name == "b.py")
    assert bpy.is_dir is False
    assert bpy.level == 1
    # nothing read or annotated with default options
    assert bpy.line_count is None
    assert bpy.byte_size is None


def test_ignored_folder_removes_whole_subtree(tmp_path: Path):
    _fixture(tmp_path)
    _make_file(tmp_path / "sub/deeper/c.py")

    for depth in (None, 0, 1, 5):
        node = build_tree(TreeConfig(root=tmp_path, ignore_folders={"sub"}, max_depth=depth))
        rels = _collect_paths(node, tmp_path)
        assert rels == {"", "a.txt"}


def test_ignore_match_is_exact_and_case_sensitive(tmp_path: Path):
    (tmp_path / "Sub").mkdir()
    (tmp_path / "subway").mkdir()

    rels = _collect_paths(build_tree(TreeConfig(root=tmp_path, ignore_folders={"sub"})), tmp_path)
    assert "Sub" in rels
    assert "subway" in rels


def test_ignore_applies_to_directories_only(tmp_path: Path):
    _make_file(tmp_path / "notes")

    rels = _collect_paths(build_tree(TreeConfig(root=tmp_path, ignore_folders={"notes"})), tmp_path)
    assert "notes" in rels


def test_default_ignore_folders_are_always_applied(tmp_path: Path):
    for d in ["node_modules/pkg", "__pycache__", "target/release", "src"]:
        (tmp_path / d).mkdir(parents=True)
    _make_file(tmp_path / "node_modules/pkg/index.js")
    _make_file(tmp_path / "src/main.rs")

    rels = _collect_paths(
        build_tree(TreeConfig(root=tmp_path, ignore_folders={"other"}, show_hidden=True)),
        tmp_path,
    )
    assert rels == {"", "src", "src/main.rs"}


def test_extension_filter_keeps_directories(tmp_path: Path):
    _fixture(tmp_path)

    rels = _collect_paths(build_tree(TreeConfig(root=tmp_path, extension="py")), tmp_path)
    assert rels == {"", "sub", "sub/b.py"}


def test_extension_filter_is_exact_and_case_sensitive(tmp_path: Path):
    for name in ["a.py", "b.PY", "c.pyc", "d.tar.py", "py", "e"]:
        _make_file(tmp_path / name)

    rels = _collect_paths(build_tree(TreeConfig(root=tmp_path, extension="py")), tmp_path)
    assert rels == {"", "a.py", "d.tar.py"}


def test_only_folders(tmp_path: Path):
    _fixture(tmp_path)
    (tmp_path / "sub/empty").mkdir()

    rels = _collect_paths(build_tree(TreeConfig(root=tmp_path, only_folders=True)), tmp_path)
    assert rels == {"", "sub", "sub/empty"}


def test_max_depth_lists_but_does_not_expand(tmp_path: Path):
    # d0/d1/d2/f.txt
    _make_file(tmp_path / "d0/d1/d2/f.txt")
    _make_file(tmp_path / "d0/top.txt")

    rels0 = _collect_paths(build_tree(TreeConfig(root=tmp_path, max_depth=0)), tmp_path)
    assert rels0 == {"", "d0"}

    rels1 = _collect_paths(build_tree(TreeConfig(root=tmp_path, max_depth=1)), tmp_path)
    assert rels1 == {"", "d0", "d0/d1", "d0/top.txt"}

    rels2 = _collect_paths(build_tree(TreeConfig(root=tmp_path, max_depth=2)), tmp_path)
    assert rels2 == {"", "d0", "d0/d1", "d0/d1/d2", "d0/top.txt"}

    rels_all = _collect_paths(build_tree(TreeConfig(root=tmp_path)), tmp_path)
    assert "d0/d1/d2/f.txt" in rels_all


def test_max_depth_bounds_node_levels(tmp_path: Path):
    _make_file(tmp_path / "a/b/c/d/e/f.txt")

    for depth in range(4):
        node = build_tree(TreeConfig(root=tmp_path, max_depth=depth))
        levels = [n.level for n in PreOrderIter(node)]
        assert max(levels) == depth
        deepest = [n for n in PreOrderIter(node) if n.level == depth]
        assert len(deepest) == 1
        assert deepest[0].is_dir and deepest[0].is_leaf


def test_sorting_is_dirs_first_then_files_case_insensitive(tmp_path: Path):
    # Build a mix of names with varying case
    (tmp_path / "bDir").mkdir()
    (tmp_path / "ADir").mkdir()
    _make_file(tmp_path / "z.txt")
    _make_file(tmp_path / "A.txt")
    _make_file(tmp_path / "b.txt")

    node = build_tree(TreeConfig(root=tmp_path))
    names = [c.name for c in node.children]

    assert names == ["ADir", "bDir", "A.txt", "b.txt", "z.txt"]


def test_filter_entries_tie_break_and_idempotence(tmp_path: Path):
    config = TreeConfig(root=tmp_path)
    entries = [
        (tmp_path / "readme", False),
        (tmp_path / "README", False),
        (tmp_path / "Readme", False),
        (tmp_path / "lib", True),
    ]

    once = filter_entries(entries, config)
    twice = filter_entries(once, config)
    reversed_input = filter_entries(list(reversed(entries)), config)

    assert [p.name for p, _ in once] == ["lib", "README", "Readme", "readme"]
    assert once == twice == reversed_input


def test_nested_levels_are_sorted_independently(tmp_path: Path):
    _make_file(tmp_path / "pkg/zeta.py")
    _make_file(tmp_path / "pkg/Alpha.py")
    (tmp_path / "pkg/mid").mkdir()

    node = build_tree(TreeConfig(root=tmp_path))
    pkg = node.children[0]
    assert [c.name for c in pkg.children] == ["mid", "Alpha.py", "zeta.py"]


@pytest.mark.skipif(not os.name == "posix", reason="Permission bits test is POSIX-only")
def test_unreadable_directory_is_skipped_safely(tmp_path: Path, caplog: pytest.LogCaptureFixture):
    secret = tmp_path / "secret"
    secret.mkdir()
    _make_file(secret / "hidden.txt")
    _make_file(tmp_path / "zz_sibling.txt")

    # remove read/execute so iterdir raises PermissionError
    secret.chmod(0)
    try:
        if os.access(secret, os.R_OK):
            pytest.skip("running with privileges that bypass permission bits")
        with caplog.at_level("WARNING", logger="structview.tree"):
            node = build_tree(TreeConfig(root=tmp_path))
        rels = _collect_paths(node, tmp_path)
        # directory exists as a node, but children couldn't be listed
        assert "secret" in rels
        assert "secret/hidden.txt" not in rels
        assert "zz_sibling.txt" in rels
        assert any("Cannot list directory" in r.getMessage() for r in caplog.records)
    finally:
        # restore perms to avoid cleanup issues on some systems
        secret.chmod(stat.S_IRWXU)


@pytest.mark.skipif(sys.platform.startswith("win"), reason="Symlink creation needs privileges on Windows")
def test_symlink_directory_traversal_flag(tmp_path: Path):
    real = tmp_path / "real"
    real.mkdir()
    _make_file(real / "inside.txt")

    link = tmp_path / "linkdir"
    link.symlink_to(real, target_is_directory=True)

    # Default: symlinked directories are walked like any directory
    rels = _collect_paths(build_tree(TreeConfig(root=tmp_path)), tmp_path)
    assert "linkdir/inside.txt" in rels

    rels2 = _collect_paths(build_tree(TreeConfig(root=tmp_path, follow_symlinks=False)), tmp_path)
    assert "linkdir" in rels2
    assert "linkdir/inside.txt" not in rels2
    assert "real/inside.txt" in rels2


@pytest.mark.skipif(sys.platform.startswith("win"), reason="Symlink creation needs privileges on Windows")
def test_symlink_cycle_is_not_expanded(tmp_path: Path, caplog: pytest.LogCaptureFixture):
    _make_file(tmp_path / "pkg/mod.py")
    (tmp_path / "pkg/loop").symlink_to(tmp_path, target_is_directory=True)

    with caplog.at_level("WARNING", logger="structview.tree"):
        node = build_tree(TreeConfig(root=tmp_path))
    rels = _collect_paths(node, tmp_path)

    assert rels == {"", "pkg", "pkg/loop", "pkg/mod.py"}
    assert any("cycle" in r.getMessage() for r in caplog.records)


def test_empty_directory_returns_only_root_node(tmp_path: Path):
    node = build_tree(TreeConfig(root=tmp_path))
    nodes = list(PreOrderIter(node))
    assert len(nodes) == 1
    assert nodes[0].fs_path == tmp_path.resolve()
    assert nodes[0].is_dir is True


def test_ignore_folders_rejects_a_bare_string(tmp_path: Path):
    with pytest.raises(TypeError, match="not a string"):
        TreeConfig(root=tmp_path, ignore_folders="sub")

    config = TreeConfig(root=tmp_path, ignore_folders=["sub"])
    assert "sub" in config.ignore_folders
    assert "s" not in config.ignore_folders
