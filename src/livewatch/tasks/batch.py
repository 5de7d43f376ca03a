"""Grouping resolved files into a deduplicated task batch."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from livewatch.tasks.resolver import TaskResolver


@dataclass(frozen=True)
class TaskGroup:
    """Distinct task-name sequence shared by one or more changed files."""

    task_names: tuple[str, ...]


@dataclass
class TaskBatch:
    """Output of one batching pass.

    Attributes:
        groups: Distinct task groups in first-seen order.
        tasks: Flattened task names, order preserved, duplicates removed.
        files: Files that joined any group, in input order.
        dispatched: Same files as a set, for replay exclusion.
    """

    groups: list[TaskGroup] = field(default_factory=list)
    tasks: list[str] = field(default_factory=list)
    files: list[str] = field(default_factory=list)
    dispatched: set[str] = field(default_factory=set)


class TaskBatchBuilder:
    """Builds a TaskBatch from a snapshot of changed files."""

    def __init__(self, resolver: TaskResolver) -> None:
        self._resolver = resolver

    def resolve_all(self, paths: Iterable[str]) -> list[tuple[str, list[str]]]:
        return [(path, self._resolver.resolve(path)) for path in paths]

    def build(self, entries: Iterable[tuple[str, list[str]]]) -> TaskBatch:
        groups: dict[tuple[str, ...], TaskGroup] = {}
        files: dict[str, None] = {}

        for path, names in entries:
            # Files without tasks only matter for live reload.
            if not names or path in files:
                continue
            files[path] = None
            key = tuple(dict.fromkeys(names))
            if key not in groups:
                groups[key] = TaskGroup(task_names=key)

        tasks: dict[str, None] = {}
        for group in groups.values():
            for name in group.task_names:
                tasks.setdefault(name, None)

        return TaskBatch(
            groups=list(groups.values()),
            tasks=list(tasks),
            files=list(files),
            dispatched=set(files),
        )
