"""Task resolution and batching."""

from livewatch.tasks.batch import TaskBatch, TaskBatchBuilder, TaskGroup
from livewatch.tasks.resolver import WILDCARD, TaskResolver, extension_of

__all__ = [
    "TaskBatch",
    "TaskBatchBuilder",
    "TaskGroup",
    "TaskResolver",
    "WILDCARD",
    "extension_of",
]
