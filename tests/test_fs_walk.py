"""Tests for the visitor-driven directory walk."""

import os
from unittest.mock import patch

import pytest

from phpweb.services.fs_walk import WalkAction, walk_tree


@pytest.fixture
def tree(tmp_path, write_file):
    """A small tree:  a.txt, b/c.txt, b/d/e.txt, z.txt"""
    root = tmp_path / "tree"
    write_file(root / "z.txt")
    write_file(root / "a.txt")
    write_file(root / "b" / "c.txt")
    write_file(root / "b" / "d" / "e.txt")
    return root


class TestWalkTree:
    """Tests for walk_tree."""

    def test_lexicographic_depth_first_order(self, tree):
        """Test entries are visited sorted by name, descending as they come."""
        seen = []

        def visit(entry):
            seen.append(entry.path.relative_to(tree).as_posix())
            return WalkAction.CONTINUE

        stopped = walk_tree(tree, visit)

        assert stopped is False
        assert seen == [".", "a.txt", "b", "b/c.txt", "b/d", "b/d/e.txt", "z.txt"]

    def test_skip_does_not_descend(self, tree):
        seen = []

        def visit(entry):
            seen.append(entry.path.name)
            if entry.path.name == "b":
                return WalkAction.SKIP
            return WalkAction.CONTINUE

        walk_tree(tree, visit)

        assert "c.txt" not in seen
        assert "z.txt" in seen

    def test_stop_ends_walk(self, tree):
        seen = []

        def visit(entry):
            seen.append(entry.path.name)
            return WalkAction.STOP if entry.path.name == "c.txt" else WalkAction.CONTINUE

        stopped = walk_tree(tree, visit)

        assert stopped is True
        assert seen[-1] == "c.txt"
        assert "z.txt" not in seen

    def test_file_flags(self, tree):
        kinds = {}

        def visit(entry):
            kinds[entry.path.name] = (entry.is_dir, entry.is_file)
            return WalkAction.CONTINUE

        walk_tree(tree, visit)

        assert kinds["a.txt"] == (False, True)
        assert kinds["d"] == (True, False)

    def test_symlinked_directory_not_followed(self, tree, tmp_path, write_file):
        outside = tmp_path / "outside"
        write_file(outside / "hidden.txt")
        (tree / "link").symlink_to(outside, target_is_directory=True)
        seen = []

        def visit(entry):
            seen.append(entry.path.name)
            return WalkAction.CONTINUE

        walk_tree(tree, visit)

        assert "link" in seen
        assert "hidden.txt" not in seen

    def test_unreadable_directory_reported_to_visitor(self, tree):
        """Test a listing error is handed to the visitor and the walk carries on."""
        real_scandir = os.scandir
        broken = str(tree / "b")

        def scandir(path):
            if str(path) == broken:
                raise PermissionError(13, "Permission denied", broken)
            return real_scandir(path)

        errors = []
        seen = []

        def visit(entry):
            if entry.error is not None:
                errors.append(entry.path)
                return WalkAction.SKIP
            seen.append(entry.path.name)
            return WalkAction.CONTINUE

        with patch("phpweb.services.fs_walk.os.scandir", side_effect=scandir):
            stopped = walk_tree(tree, visit)

        assert stopped is False
        assert errors == [tree / "b"]
        assert "c.txt" not in seen
        assert "z.txt" in seen

    def test_unreadable_root_raises(self, tree):
        """Test a listing error on the root propagates instead of reaching the visitor."""
        real_scandir = os.scandir

        def scandir(path):
            if str(path) == str(tree):
                raise PermissionError(13, "Permission denied", str(tree))
            return real_scandir(path)

        visited = []

        def visit(entry):
            visited.append(entry)
            return WalkAction.CONTINUE

        with patch("phpweb.services.fs_walk.os.scandir", side_effect=scandir):
            with pytest.raises(PermissionError):
                walk_tree(tree, visit)

        assert all(entry.error is None for entry in visited)

    def test_missing_root_raises(self, tmp_path):
        with pytest.raises(OSError):
            walk_tree(tmp_path / "missing", lambda entry: WalkAction.CONTINUE)

    def test_file_root_raises(self, tmp_path, write_file):
        write_file(tmp_path / "file.txt")

        with pytest.raises(OSError):
            walk_tree(tmp_path / "file.txt", lambda entry: WalkAction.CONTINUE)
