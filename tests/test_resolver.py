"""
Tests for ContentResolver — source selection and fallback policy

These tests validate:
- Empty input never reaches git
- Files absent from disk are read from history
- Files present on disk are read from the index, with the disk
  fallback only for "no index yet" and no explicit revision
- Other failures propagate unchanged

All tests use FakeExecutor / FakeFileSystem. No git required.
"""

import pytest

from gitcontent.core.errors import CommandFailure
from gitcontent.core.models import ContentRequest
from gitcontent.core.resolver import ContentResolver
from tests.factories import NOT_IN_INDEX, NOT_IN_REVISION, DOES_NOT_EXIST, UNBORN_HEAD


REPO = "/repo"
A = "/repo/a.txt"
B = "/repo/b.txt"


# ============================================================================
# EMPTY INPUT
# ============================================================================

class TestEmptyInput:
    """Nothing to resolve is not an error."""

    @pytest.mark.parametrize("file_path,repo_root", [
        ("", REPO),
        (A, ""),
        ("", ""),
    ])
    def test_returns_empty_without_invoking_git(self, resolver, fake_executor, fake_fs,
                                                file_path, repo_root):
        fake_fs.files[A] = "disk"

        assert resolver.resolve(ContentRequest(file_path, repo_root)) == ""
        assert fake_executor.call_count == 0
        assert fake_fs.reads == []

    def test_empty_with_revision(self, resolver, fake_executor):
        assert resolver.resolve(ContentRequest("", REPO, "HEAD")) == ""
        assert fake_executor.call_count == 0


# ============================================================================
# FILE ABSENT FROM DISK (history)
# ============================================================================

class TestDiskAbsent:
    """Absent from disk means history is queried, nothing else."""

    def test_queries_head_by_default(self, resolver, fake_executor, fake_fs):
        fake_executor.respond("HEAD:b.txt", "from history\n")

        content = resolver.resolve(ContentRequest(B, REPO))

        assert content == "from history\n"
        assert fake_executor.calls == [("/repo", "show", ("HEAD:b.txt",))]
        assert fake_fs.reads == []

    def test_queries_given_revision(self, resolver, fake_executor):
        fake_executor.respond("abc123:b.txt", "old\n")

        assert resolver.resolve(ContentRequest(B, REPO, "abc123")) == "old\n"
        assert fake_executor.specs == ["abc123:b.txt"]

    def test_relative_path_for_nested_file(self, resolver, fake_executor):
        fake_executor.respond("HEAD:src/pkg/mod.py", "x = 1\n")

        resolver.resolve(ContentRequest("/repo/src/pkg/mod.py", REPO))

        working_dir, _, args = fake_executor.calls[0]
        assert working_dir == "/repo/src/pkg"
        assert args == ("HEAD:src/pkg/mod.py",)

    def test_repo_root_with_trailing_separator(self, resolver, fake_executor):
        fake_executor.respond("HEAD:b.txt", "ok")

        assert resolver.resolve(ContentRequest(B, "/repo/")) == "ok"

    def test_windows_style_separator_is_stripped(self, resolver, fake_executor):
        fake_executor.respond("HEAD:b.txt", "ok")

        resolver.resolve(ContentRequest("C:\\repo\\b.txt", "C:\\repo"))

        assert fake_executor.specs == ["HEAD:b.txt"]

    def test_failure_propagates(self, resolver, fake_executor):
        """Absent everywhere surfaces git's error."""
        message = DOES_NOT_EXIST.format(path="b.txt", rev="HEAD")
        fake_executor.fail("HEAD:b.txt", message)

        with pytest.raises(CommandFailure) as exc_info:
            resolver.resolve(ContentRequest(B, REPO))

        assert exc_info.value.message == message
        assert exc_info.value.returncode == 128

    def test_no_index_marker_is_not_swallowed(self, resolver, fake_executor, fake_fs):
        """The no-index fallback only applies to files on disk."""
        fake_executor.fail("HEAD:b.txt", UNBORN_HEAD)

        with pytest.raises(CommandFailure):
            resolver.resolve(ContentRequest(B, REPO))
        assert fake_fs.reads == []

    def test_never_queries_index(self, resolver, fake_executor):
        fake_executor.respond("HEAD:b.txt", "")

        resolver.resolve(ContentRequest(B, REPO))

        assert not any(spec.startswith(":0:") for spec in fake_executor.specs)


# ============================================================================
# FILE PRESENT ON DISK (index)
# ============================================================================

class TestDiskPresent:
    """Present on disk means the index (or the given revision) is asked first."""

    def test_returns_staged_content_over_disk(self, resolver, fake_executor, fake_fs):
        """Staged bytes win even when disk differs."""
        fake_fs.files[A] = "disk version\n"
        fake_executor.respond(":0:/repo/a.txt", "staged version\n")

        assert resolver.resolve(ContentRequest(A, REPO)) == "staged version\n"
        assert fake_fs.reads == []

    def test_index_invocation_uses_absolute_path(self, resolver, fake_executor, fake_fs):
        fake_fs.files[A] = ""
        fake_executor.respond(":0:/repo/a.txt", "")

        resolver.resolve(ContentRequest(A, REPO))

        assert fake_executor.calls == [("/repo", "show", (":0:/repo/a.txt",))]

    def test_no_index_falls_back_to_disk(self, resolver, fake_executor, fake_fs):
        """Fresh repository, no revision: disk bytes returned."""
        fake_fs.files[A] = "raw disk bytes\n"
        fake_executor.fail(":0:/repo/a.txt", NOT_IN_INDEX.format(path=A))

        assert resolver.resolve(ContentRequest(A, REPO)) == "raw disk bytes\n"
        assert fake_fs.reads == [A]
        assert fake_executor.call_count == 1

    def test_no_index_with_revision_returns_empty(self, resolver, fake_executor, fake_fs):
        """Explicit revision: no fallback to disk."""
        fake_fs.files[A] = "raw disk bytes\n"
        fake_executor.fail("HEAD:/repo/a.txt", UNBORN_HEAD)

        assert resolver.resolve(ContentRequest(A, REPO, "HEAD")) == ""
        assert fake_fs.reads == []

    def test_path_not_in_revision_returns_empty(self, resolver, fake_executor, fake_fs):
        fake_fs.files[A] = "new file\n"
        fake_executor.fail("main:/repo/a.txt", NOT_IN_REVISION.format(path=A, rev="main"))

        assert resolver.resolve(ContentRequest(A, REPO, "main")) == ""

    def test_revision_replaces_stage_marker(self, resolver, fake_executor, fake_fs):
        fake_fs.files[A] = "disk"
        fake_executor.respond("HEAD~1:/repo/a.txt", "older")

        assert resolver.resolve(ContentRequest(A, REPO, "HEAD~1")) == "older"
        assert fake_executor.specs == ["HEAD~1:/repo/a.txt"]

    def test_other_failure_propagates_unchanged(self, resolver, fake_executor, fake_fs):
        fake_fs.files[A] = "disk"
        failure = CommandFailure("fatal: not a git repository\n", 128)
        fake_executor.responses[":0:/repo/a.txt"] = failure

        with pytest.raises(CommandFailure) as exc_info:
            resolver.resolve(ContentRequest(A, REPO))

        assert exc_info.value is failure
        assert fake_fs.reads == []

    def test_timeout_is_not_no_index(self, resolver, fake_executor, fake_fs):
        """A timed-out call never triggers the disk fallback."""
        fake_fs.files[A] = "disk"
        fake_executor.responses[":0:/repo/a.txt"] = CommandFailure.timeout(
            ["git", "show", ":0:/repo/a.txt"], 1.0)

        with pytest.raises(CommandFailure) as exc_info:
            resolver.resolve(ContentRequest(A, REPO))

        assert exc_info.value.timed_out is True
        assert fake_fs.reads == []


# ============================================================================
# CONFIGURATION OF THE POLICY
# ============================================================================

class TestResolverOptions:
    """Revision, stage marker and markers are injectable."""

    def test_custom_default_revision(self, fake_executor, fake_fs):
        resolver = ContentResolver(fake_executor, fake_fs, default_revision="main")
        fake_executor.respond("main:b.txt", "tip of main")

        assert resolver.resolve(ContentRequest(B, REPO)) == "tip of main"

    def test_custom_markers(self, fake_executor, fake_fs):
        resolver = ContentResolver(fake_executor, fake_fs, no_index_markers=["pas dans l'index"])
        fake_fs.files[A] = "disk"
        fake_executor.fail(":0:/repo/a.txt", "fatal: le chemin existe mais pas dans l'index")

        assert resolver.resolve(ContentRequest(A, REPO)) == "disk"

    def test_default_markers_replaced_not_extended(self, fake_executor, fake_fs):
        resolver = ContentResolver(fake_executor, fake_fs, no_index_markers=["something else"])
        fake_fs.files[A] = "disk"
        fake_executor.fail(":0:/repo/a.txt", NOT_IN_INDEX.format(path=A))

        with pytest.raises(CommandFailure):
            resolver.resolve(ContentRequest(A, REPO))

    def test_relative_index_path(self, fake_executor, fake_fs):
        resolver = ContentResolver(fake_executor, fake_fs, index_path="relative")
        fake_fs.files["/repo/src/a.txt"] = "disk"
        fake_executor.respond(":0:src/a.txt", "staged")

        assert resolver.resolve(ContentRequest("/repo/src/a.txt", REPO)) == "staged"
        assert fake_executor.calls == [("/repo", "show", (":0:src/a.txt",))]

    def test_relative_index_path_leaves_history_alone(self, fake_executor, fake_fs):
        resolver = ContentResolver(fake_executor, fake_fs, index_path="relative")
        fake_executor.respond("HEAD:src/b.txt", "old")

        resolver.resolve(ContentRequest("/repo/src/b.txt", REPO))

        assert fake_executor.calls == [("/repo/src", "show", ("HEAD:src/b.txt",))]

    def test_unknown_index_path(self, fake_executor, fake_fs):
        with pytest.raises(ValueError):
            ContentResolver(fake_executor, fake_fs, index_path="sideways")

    def test_resolve_content_shorthand(self, resolver, fake_executor):
        fake_executor.respond("v1:b.txt", "v1 content")

        assert resolver.resolve_content(B, REPO, "v1") == "v1 content"


# ============================================================================
# IDEMPOTENCE
# ============================================================================

class TestIdempotence:
    """Same request, unchanged repository, same content."""

    def test_repeated_resolution(self, resolver, fake_executor, fake_fs):
        fake_fs.files[A] = "disk"
        fake_executor.fail(":0:/repo/a.txt", NOT_IN_INDEX.format(path=A))
        request = ContentRequest(A, REPO)

        assert resolver.resolve(request) == resolver.resolve(request)

    def test_fresh_invocation_per_call(self, resolver, fake_executor):
        fake_executor.respond("HEAD:b.txt", "x")
        request = ContentRequest(B, REPO)

        resolver.resolve(request)
        resolver.resolve(request)

        assert fake_executor.call_count == 2
