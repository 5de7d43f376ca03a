"""Tests for task resolution and batching."""

import pytest

from livewatch.tasks.batch import TaskBatchBuilder, TaskGroup
from livewatch.tasks.resolver import TaskResolver, extension_of


class TestExtensionOf:
    """Tests for extension_of."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("app/main.js", "js"),
            ("app/style.min.css", "css"),
            ("Makefile", ""),
            ("app/.eslintrc", ""),
            ("app.v2/readme", ""),
        ],
    )
    def test_extension(self, path, expected):
        assert extension_of(path) == expected


class TestTaskResolver:
    """Tests for TaskResolver."""

    def test_by_extension(self):
        resolver = TaskResolver({"js": ["lint", "build"]})
        assert resolver.resolve("app/a.js") == ["lint", "build"]

    def test_string_entry(self):
        assert TaskResolver({"css": "sass"}).resolve("a.css") == ["sass"]

    def test_wildcard_fallback(self):
        resolver = TaskResolver({"js": ["build"], "*": ["copy"]})
        assert resolver.resolve("logo.png") == ["copy"]
        assert resolver.resolve("a.js") == ["build"]

    def test_no_match(self):
        assert TaskResolver({"js": ["build"]}).resolve("a.css") == []

    def test_callable_entry(self):
        seen = []

        def pick(path):
            seen.append(path)
            return ["test"] if path.endswith("_test.py") else "run"

        resolver = TaskResolver({"py": pick})

        assert resolver.resolve("a_test.py") == ["test"]
        assert resolver.resolve("a.py") == ["run"]
        assert seen == ["a_test.py", "a.py"]

    def test_callable_returning_nothing(self):
        assert TaskResolver({"*": lambda path: None}).resolve("a.txt") == []

    def test_empty_list(self):
        assert TaskResolver({"js": []}).resolve("a.js") == []


class TestTaskBatchBuilder:
    """Tests for TaskBatchBuilder."""

    @pytest.fixture
    def builder(self):
        return TaskBatchBuilder(
            TaskResolver({"js": ["lint", "build"], "css": ["build"], "md": "docs"})
        )

    def test_groups_are_distinct(self, builder):
        batch = builder.build(builder.resolve_all(["a.js", "b.js", "c.css"]))

        assert batch.groups == [TaskGroup(("lint", "build")), TaskGroup(("build",))]

    def test_flattened_tasks_deduplicated(self, builder):
        batch = builder.build(builder.resolve_all(["a.js", "c.css", "d.md"]))
        assert batch.tasks == ["lint", "build", "docs"]

    def test_files_without_tasks_not_dispatched(self, builder):
        batch = builder.build(builder.resolve_all(["a.js", "logo.png"]))

        assert batch.files == ["a.js"]
        assert batch.dispatched == {"a.js"}

    def test_group_order_follows_first_file(self, builder):
        batch = builder.build(builder.resolve_all(["c.css", "a.js"]))
        assert batch.tasks == ["build", "lint"]

    def test_duplicate_path_counted_once(self, builder):
        batch = builder.build([("a.js", ["lint"]), ("a.js", ["build"])])
        assert batch.groups == [TaskGroup(("lint",))]
        assert batch.files == ["a.js"]

    def test_duplicate_names_within_group(self, builder):
        batch = builder.build([("a.js", ["lint", "lint", "build"])])
        assert batch.groups == [TaskGroup(("lint", "build"))]

    def test_empty(self, builder):
        batch = builder.build([])
        assert batch.groups == []
        assert batch.tasks == []
        assert batch.dispatched == set()
