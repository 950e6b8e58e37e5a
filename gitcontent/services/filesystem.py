"""
Filesystem — Disk access capability for the resolver

The resolver never touches the disk directly. It receives a FileSystem,
so tests can substitute an in-memory one.
"""

import os
from abc import ABC, abstractmethod


class FileSystem(ABC):
    """Existence check and raw read of working-tree files."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """True if anything is present at path."""

    @abstractmethod
    def read_text(self, path: str) -> str:
        """Full content of the file at path."""


class LocalFileSystem(FileSystem):
    """The real disk."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def read_text(self, path: str) -> str:
        with open(path, encoding=self.encoding, errors="replace", newline="") as f:
            return f.read()
