"""
Services — External integration layer

Contains integrations with external systems:
- Executor: git subprocess binding
- Filesystem: working-tree disk access
- Batch: thread-pool resolution of many requests
"""

from .executor import CommandExecutor, GitExecutor
from .filesystem import FileSystem, LocalFileSystem
from .batch import resolve_one, resolve_many

__all__ = [
    # Executor
    "CommandExecutor", "GitExecutor",
    # Filesystem
    "FileSystem", "LocalFileSystem",
    # Batch
    "resolve_one", "resolve_many",
]
