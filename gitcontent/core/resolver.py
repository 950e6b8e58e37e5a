"""
ContentResolver — Versioned file content from disk, index or history

Decides where a file's content comes from:

    file missing on disk  ->  git show <rev|HEAD>:<relative path>
    file present on disk  ->  git show <rev|:0>:<absolute path>
                                 no index yet, no rev  ->  read disk
                                 no index yet, rev     ->  ""

Every call is independent: no state survives between calls, and
failures other than "no index yet" reach the caller unchanged.
"""

import logging
import os
import threading
from typing import Optional, Sequence

from .errors import (
    CommandFailure, ErrorKind, classify_failure, DEFAULT_NO_INDEX_MARKERS,
)
from .models import ContentRequest, Invocation

logger = logging.getLogger(__name__)


DEFAULT_REVISION = "HEAD"   # branch tip, for files gone from disk
INDEX_STAGE = ":0"          # stage 0 of the index: what would be committed
SHOW = "show"

# git reads the path after "rev:" literally; only ./ and ../ are resolved.
INDEX_PATH_ABSOLUTE = "absolute"
INDEX_PATH_RELATIVE = "relative"
INDEX_PATH_STYLES = (INDEX_PATH_ABSOLUTE, INDEX_PATH_RELATIVE)


class ContentResolver:
    """Resolve file content for a ContentRequest. Collaborators are injected."""

    def __init__(
        self,
        executor,
        filesystem,
        default_revision: str = DEFAULT_REVISION,
        index_stage: str = INDEX_STAGE,
        no_index_markers: Sequence[str] = DEFAULT_NO_INDEX_MARKERS,
        index_path: str = INDEX_PATH_ABSOLUTE,
    ):
        """
        Args:
            executor: CommandExecutor running git
            filesystem: FileSystem for existence checks and the disk fallback
            default_revision: Revision for files absent from disk
            index_stage: Stage marker for files present on disk
            no_index_markers: Diagnostic substrings meaning "no index yet"
            index_path: "absolute" sends file_path as given from the file's
                directory; "relative" sends the repository-relative path
                from repo_root
        """
        if index_path not in INDEX_PATH_STYLES:
            raise ValueError(f"index_path must be one of {INDEX_PATH_STYLES}, got {index_path!r}")

        self.executor = executor
        self.filesystem = filesystem
        self.default_revision = default_revision
        self.index_stage = index_stage
        self.no_index_markers = tuple(no_index_markers)
        self.index_path = index_path

    def resolve(
        self,
        request: ContentRequest,
        cancel: Optional[threading.Event] = None,
    ) -> str:
        """
        Content of request.file_path.

        Returns:
            The content; "" when there is nothing to resolve or the
            requested revision has no entry for a file present on disk.

        Raises:
            CommandFailure: git failed for any reason other than a
                missing index entry (also when the file is gone from
                disk and history has nothing)
        """
        if request.is_empty:
            return ""

        if not self.filesystem.exists(request.file_path):
            return self._consult_history(request, cancel)

        return self._consult_index(request, cancel)

    def resolve_content(
        self,
        file_path: str,
        repo_root: str,
        source_revision: Optional[str] = None,
    ) -> str:
        """Shorthand for resolve(ContentRequest(...))."""
        return self.resolve(ContentRequest(file_path, repo_root, source_revision))

    def history_invocation(self, request: ContentRequest) -> Invocation:
        revision = request.source_revision or self.default_revision
        return Invocation(
            working_dir=os.path.dirname(request.file_path),
            subcommand=SHOW,
            args=(f"{revision}:{request.relative_path}",),
        )

    def index_invocation(self, request: ContentRequest) -> Invocation:
        stage = request.source_revision or self.index_stage
        if self.index_path == INDEX_PATH_RELATIVE:
            # git checks the path on disk relative to its cwd
            working_dir, path = request.repo_root, request.relative_path
        else:
            working_dir, path = os.path.dirname(request.file_path), request.file_path
        return Invocation(
            working_dir=working_dir,
            subcommand=SHOW,
            args=(f"{stage}:{path}",),
        )

    def _consult_history(self, request: ContentRequest, cancel) -> str:
        # Absent from disk means history is the only source; its failure
        # is the answer.
        invocation = self.history_invocation(request)
        logger.debug("%s not on disk, reading %s", request.file_path, invocation.args[0])
        return self.executor.run(invocation, cancel=cancel)

    def _consult_index(self, request: ContentRequest, cancel) -> str:
        invocation = self.index_invocation(request)
        logger.debug("%s on disk, reading %s", request.file_path, invocation.args[0])

        try:
            return self.executor.run(invocation, cancel=cancel)
        except CommandFailure as e:
            if classify_failure(e, self.no_index_markers) is not ErrorKind.NO_INDEX_YET:
                raise

        if request.source_revision:
            return ""

        logger.debug("no index entry for %s, reading disk", request.file_path)
        return self.filesystem.read_text(request.file_path)
