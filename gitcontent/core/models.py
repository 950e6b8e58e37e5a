"""
Models — Immutable values passed through content resolution

- ContentRequest: what the caller asks for (path, repo root, revision)
- Invocation: one git subprocess call, built fresh per request
- ContentResult: content or classified failure, for batch callers

Design principles:
- Frozen dataclasses, created per call and discarded after
- No caching, no cross-request memory
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Dict, Any, List

import xxhash

from .errors import ErrorKind, CommandFailure


@dataclass(frozen=True)
class ContentRequest:
    """A request for the content of one file."""
    file_path: str
    repo_root: str
    source_revision: Optional[str] = None  # None = current working/staged state

    @property
    def is_empty(self) -> bool:
        """Nothing to resolve."""
        return not self.file_path or not self.repo_root

    @property
    def relative_path(self) -> str:
        """Path relative to repo_root, without a leading separator."""
        stripped = self.file_path.replace(self.repo_root, "", 1)
        if stripped[:1] in ("/", "\\"):
            stripped = stripped[1:]
        return stripped

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file_path": self.file_path,
            "repo_root": self.repo_root,
            "source_revision": self.source_revision,
        }


@dataclass(frozen=True)
class Invocation:
    """One git subprocess call."""
    working_dir: str
    subcommand: str
    args: Tuple[str, ...] = field(default_factory=tuple)

    def argv(self, binary: str = "git") -> List[str]:
        """Full argument vector, never joined into a shell string."""
        return [binary, self.subcommand, *self.args]


@dataclass(frozen=True)
class ContentResult:
    """
    Outcome of resolving one request.

    Either content (possibly empty) or a classified failure.
    There are no partial results.
    """
    request: ContentRequest
    content: str = ""
    success: bool = True
    error: Optional[str] = None
    kind: Optional[ErrorKind] = None
    returncode: Optional[int] = None

    @property
    def failed(self) -> bool:
        return not self.success

    @property
    def digest(self) -> str:
        """xxh64 of the content. Equal content gives equal digests."""
        return xxhash.xxh64(self.content.encode("utf-8")).hexdigest()

    @classmethod
    def ok(cls, request: ContentRequest, content: str) -> "ContentResult":
        return cls(request=request, content=content)

    @classmethod
    def failure(cls, request: ContentRequest, error: CommandFailure) -> "ContentResult":
        """
        Factory for failed results; keeps git's message verbatim.

        A failure that left the resolver was not recoverable there, so it is
        a COMMAND_FAILURE even when its text matches a no-index marker.
        """
        return cls(
            request=request,
            content="",
            success=False,
            error=error.message,
            kind=ErrorKind.COMMAND_FAILURE,
            returncode=error.returncode,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for JSON output."""
        data = self.request.to_dict()
        data.update({
            "success": self.success,
            "content": self.content,
            "digest": self.digest if self.success else None,
            "error": self.error,
            "kind": self.kind.value if self.kind else None,
            "returncode": self.returncode,
        })
        return data
