"""Tests for directory pattern expansion."""

import pytest

from livewatch.watching.expand import expand_dirs


@pytest.fixture
def tree(tmp_path):
    for rel in ["app/js", "app/css", "app/vendor/lib", ".git/objects", "node_modules/x"]:
        (tmp_path / rel).mkdir(parents=True)
    (tmp_path / "app" / "index.html").write_text("<html>")
    return tmp_path


def rel(paths, root):
    prefix = root.as_posix()
    return sorted(p[len(prefix):].lstrip("/") or "." for p in paths)


class TestExpandDirs:
    """Tests for expand_dirs."""

    def test_root_pattern(self, tree):
        assert expand_dirs(["."], tree) == [tree.as_posix()]

    def test_recursive_pattern_includes_root(self, tree):
        result = rel(expand_dirs(["**"], tree), tree)
        assert "." in result
        assert "app/vendor/lib" in result

    def test_only_directories(self, tree):
        result = rel(expand_dirs(["app/*"], tree), tree)
        assert result == ["app/css", "app/js", "app/vendor"]

    def test_default_excludes(self, tree):
        result = rel(expand_dirs(["**", "!.git", "!node_modules"], tree), tree)
        assert ".git" not in result
        assert ".git/objects" not in result
        assert "node_modules/x" not in result
        assert "app/js" in result

    def test_exclusion_covers_descendants(self, tree):
        result = rel(expand_dirs(["app/**", "!app/vendor"], tree), tree)
        assert result == ["app", "app/css", "app/js"]

    def test_no_duplicates(self, tree):
        result = expand_dirs(["app", "app/*", "app"], tree)
        assert len(result) == len(set(result))
        assert result[0] == (tree / "app").as_posix()

    def test_missing_directory(self, tree):
        assert expand_dirs(["nope/**"], tree) == []

    def test_forward_slashes(self, tree):
        assert all("\\" not in p for p in expand_dirs(["**"], tree))
