"""
Core — Data and resolution logic

- errors: failure taxonomy and classification
- models: ContentRequest, Invocation, ContentResult
- resolver: ContentResolver (disk / index / history policy)
"""

from .errors import CommandFailure, ErrorKind, classify_failure
from .models import ContentRequest, Invocation, ContentResult
from .resolver import ContentResolver

__all__ = [
    "CommandFailure", "ErrorKind", "classify_failure",
    "ContentRequest", "Invocation", "ContentResult",
    "ContentResolver",
]
