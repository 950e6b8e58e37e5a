"""
gitcontent — Versioned file content resolution

Given a file, its repository root and an optional revision, produce the
file's content from the working tree, the git index or the object
database, through the git binary.

Usage:
    from gitcontent import ConfigManager, ContentRequest

    resolver = ConfigManager().build_resolver()
    text = resolver.resolve(ContentRequest("/repo/a.txt", "/repo"))
    old = resolver.resolve(ContentRequest("/repo/a.txt", "/repo", "HEAD~1"))
"""

__version__ = "0.1.0"

# Core layer
from .core.errors import CommandFailure, ErrorKind, classify_failure, DEFAULT_NO_INDEX_MARKERS
from .core.models import ContentRequest, Invocation, ContentResult
from .core.resolver import ContentResolver, DEFAULT_REVISION, INDEX_STAGE

# Services layer
from .services.executor import CommandExecutor, GitExecutor
from .services.filesystem import FileSystem, LocalFileSystem
from .services.batch import resolve_one, resolve_many

# Config
from .config import Config, ConfigManager, get_config

__all__ = [
    # Core
    'CommandFailure', 'ErrorKind', 'classify_failure', 'DEFAULT_NO_INDEX_MARKERS',
    'ContentRequest', 'Invocation', 'ContentResult',
    'ContentResolver', 'DEFAULT_REVISION', 'INDEX_STAGE',
    # Services
    'CommandExecutor', 'GitExecutor',
    'FileSystem', 'LocalFileSystem',
    'resolve_one', 'resolve_many',
    # Config
    'Config', 'ConfigManager', 'get_config',
]
