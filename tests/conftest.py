"""
Shared pytest fixtures for the gitcontent test suite.

Fakes cover resolver policy without a git binary; the *_repo fixtures
build real repositories under tmp_path and skip when git is missing.

Usage in tests:
    def test_policy(resolver, fake_executor, fake_fs):
        fake_fs.files["/repo/a.txt"] = "disk"
        assert resolver.resolve(ContentRequest("/repo/a.txt", "/repo")) == ...

    def test_real(committed_repo):
        resolver = ConfigManager(committed_repo).build_resolver()
"""

import subprocess

import pytest

from gitcontent.config import ConfigManager
from gitcontent.core.resolver import ContentResolver
from tests.factories import (
    FakeExecutor, FakeFileSystem, git_is_available, init_repo, commit_all,
)


@pytest.fixture
def fake_executor():
    return FakeExecutor()


@pytest.fixture
def fake_fs():
    return FakeFileSystem()


@pytest.fixture
def resolver(fake_executor, fake_fs):
    """ContentResolver over the fakes, default policy."""
    return ContentResolver(fake_executor, fake_fs)


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path, monkeypatch):
    """Keep ~/.gitcontent and GITCONTENT_* out of every test."""
    user_file = tmp_path / "home" / ".gitcontent" / "config.yaml"
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_DIR", user_file.parent)
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_FILE", user_file)
    for key in ("GITCONTENT_GIT_BINARY", "GITCONTENT_TIMEOUT", "GITCONTENT_WORKERS",
                "GITCONTENT_PROJECT_PATH"):
        monkeypatch.delenv(key, raising=False)
    return user_file


@pytest.fixture
def fresh_repo(tmp_path):
    """Brand-new repository: no commits, nothing staged."""
    if not git_is_available():
        pytest.skip("Git is not available")
    try:
        return init_repo(tmp_path / "fresh_repo")
    except subprocess.CalledProcessError:
        pytest.skip("Could not create git repository")


@pytest.fixture
def committed_repo(tmp_path):
    """
    Repository with two commits.

    a.txt: "one\\n" in the first commit, "two\\n" in HEAD
    gone.txt: committed in HEAD, absent from disk
    """
    if not git_is_available():
        pytest.skip("Git is not available")
    try:
        repo = init_repo(tmp_path / "test_repo")
        (repo / "a.txt").write_text("one\n")
        commit_all(repo, "Initial commit")
        (repo / "a.txt").write_text("two\n")
        (repo / "gone.txt").write_text("removed later\n")
        commit_all(repo, "Second commit")
        (repo / "gone.txt").unlink()
        return repo
    except subprocess.CalledProcessError:
        pytest.skip("Could not create git repository")
