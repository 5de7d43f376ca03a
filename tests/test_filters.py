"""Tests for change event normalization and filtering."""

import pytest

from livewatch.watching.events import MODIFY, RENAME
from livewatch.watching.filters import ChangeEventFilter, is_ignored, normalize_path


class TestNormalizePath:
    """Tests for normalize_path."""

    def test_joins_directory_and_name(self):
        assert normalize_path("app/js", "main.js") == "app/js/main.js"

    def test_backslashes_become_forward_slashes(self):
        assert normalize_path("app\\js", "lib\\main.js") == "app/js/lib/main.js"

    def test_collapses_dot_segments(self):
        assert normalize_path("./app/../src", "./a.js") == "src/a.js"

    def test_empty_directory(self):
        assert normalize_path("", "a.js") == "a.js"


class TestIsIgnored:
    """Tests for ignore pattern matching."""

    def test_basename_pattern(self):
        assert is_ignored(["*.tmp"], "app/cache/x.tmp")

    def test_dot_files_match_wildcards(self):
        assert is_ignored(["*.swp"], "app/.main.js.swp")
        assert is_ignored(["*"], "app/.hidden")

    def test_pattern_with_slash_matches_whole_path(self):
        assert is_ignored(["build/*"], "build/out.js")
        assert not is_ignored(["build/*"], "src/out.js")

    def test_no_match(self):
        assert not is_ignored(["*.tmp"], "app/main.js")
        assert not is_ignored([], "app/main.js")

    def test_bang_is_literal(self):
        assert not is_ignored(["!*.js"], "main.js")
        assert is_ignored(["!*.js"], "!main.js")

    def test_case_sensitive(self):
        assert not is_ignored(["*.TMP"], "x.tmp")


class TestChangeEventFilter:
    """Tests for ChangeEventFilter.filter."""

    @pytest.fixture
    def tree(self, tmp_path):
        (tmp_path / "app").mkdir()
        (tmp_path / "app" / "main.js").write_text("1")
        (tmp_path / "app" / "notes.tmp").write_text("x")
        (tmp_path / "app" / "sub").mkdir()
        return tmp_path

    def test_existing_file_passes(self, tree):
        event_filter = ChangeEventFilter([])
        directory = (tree / "app").as_posix()
        assert event_filter.filter(MODIFY, "main.js", directory) == f"{directory}/main.js"

    def test_rename_kind_passes_too(self, tree):
        event_filter = ChangeEventFilter([])
        directory = (tree / "app").as_posix()
        assert event_filter.filter(RENAME, "main.js", directory) == f"{directory}/main.js"

    def test_ignored_file_dropped(self, tree):
        event_filter = ChangeEventFilter(["*.tmp"])
        assert event_filter.filter(MODIFY, "notes.tmp", (tree / "app").as_posix()) is None

    def test_missing_file_dropped(self, tree):
        event_filter = ChangeEventFilter([])
        assert event_filter.filter(RENAME, "gone.js", (tree / "app").as_posix()) is None

    def test_directory_dropped(self, tree):
        event_filter = ChangeEventFilter([])
        assert event_filter.filter(RENAME, "sub", (tree / "app").as_posix()) is None

    def test_custom_ignore_predicate(self, tree):
        seen = []

        def predicate(patterns, path):
            seen.append((patterns, path))
            return True

        event_filter = ChangeEventFilter(["x"], ignore_predicate=predicate)
        directory = (tree / "app").as_posix()

        assert event_filter.filter(MODIFY, "main.js", directory) is None
        assert seen == [(["x"], f"{directory}/main.js")]

    def test_slash_pattern_relative_to_root(self, tree):
        event_filter = ChangeEventFilter(["app/*.js"], root=tree.as_posix())
        assert event_filter.filter(MODIFY, "main.js", (tree / "app").as_posix()) is None

    def test_slash_pattern_does_not_match_elsewhere(self, tree):
        event_filter = ChangeEventFilter(["sub/*.js"], root=tree.as_posix())
        directory = (tree / "app").as_posix()
        assert event_filter.filter(MODIFY, "main.js", directory) == f"{directory}/main.js"

    def test_predicate_sees_root_relative_path(self, tree):
        seen = []

        def predicate(patterns, path):
            seen.append(path)
            return False

        event_filter = ChangeEventFilter(["x"], ignore_predicate=predicate, root=tree.as_posix())
        event_filter.filter(MODIFY, "main.js", (tree / "app").as_posix())

        assert seen == ["app/main.js"]

    def test_path_outside_root_kept_whole(self, tree):
        event_filter = ChangeEventFilter([], root=(tree / "app" / "sub").as_posix())
        path = (tree / "app" / "main.js").as_posix()
        assert event_filter.relative(path) == path
