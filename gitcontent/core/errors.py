"""
Errors — Failure taxonomy for content resolution

Two kinds of failure reach the resolver:
- NO_INDEX_YET: git has no index entry (or revision entry) for a path
  that exists on disk. Recoverable.
- COMMAND_FAILURE: anything else. Propagated verbatim to the caller.

Empty input is not a failure at all: it resolves to empty content.
"""

from enum import Enum
from typing import Optional, Sequence, Tuple


class ErrorKind(Enum):
    """Classification of a failed git invocation."""
    NO_INDEX_YET = "no_index_yet"
    COMMAND_FAILURE = "command_failure"


# git has no structured code for these conditions (every fatal exits 128),
# so classification falls back to matching its diagnostic text.
DEFAULT_NO_INDEX_MARKERS: Tuple[str, ...] = (
    "exists on disk, but not in",      # not in the index / not in '<rev>'
    "invalid object name 'HEAD'",      # unborn branch in a fresh repository
)

TIMEOUT_MARKER = "timed out"
CANCELLED_MARKER = "cancelled"


class CommandFailure(Exception):
    """
    A git invocation that did not succeed.

    Carries the raw diagnostic text (stderr, or stdout when stderr is empty)
    and the exit status. `returncode` is None when the process never ran
    to completion on its own (spawn error, timeout, cancellation).
    """

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        timed_out: bool = False,
        cancelled: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.returncode = returncode
        self.timed_out = timed_out
        self.cancelled = cancelled

    @classmethod
    def timeout(cls, argv: Sequence[str], seconds: float) -> 'CommandFailure':
        return cls(
            f"{TIMEOUT_MARKER} after {seconds:g}s: {' '.join(argv)}",
            timed_out=True,
        )

    @classmethod
    def cancellation(cls, argv: Sequence[str]) -> 'CommandFailure':
        return cls(f"{CANCELLED_MARKER}: {' '.join(argv)}", cancelled=True)

    def __repr__(self) -> str:
        return f"CommandFailure({self.message!r}, returncode={self.returncode!r})"


def classify_failure(
    error: CommandFailure,
    markers: Sequence[str] = DEFAULT_NO_INDEX_MARKERS,
) -> ErrorKind:
    """
    Classify a failed invocation.

    Only a process that ran and exited non-zero can mean "no index yet";
    timeouts, cancellations and spawn errors are always COMMAND_FAILURE.
    """
    if error.timed_out or error.cancelled or not error.returncode:
        return ErrorKind.COMMAND_FAILURE

    if any(marker and marker in error.message for marker in markers):
        return ErrorKind.NO_INDEX_YET

    return ErrorKind.COMMAND_FAILURE
