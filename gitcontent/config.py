"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Project config (.gitcontent/config.yaml)
  2. User config (~/.gitcontent/config.yaml)
  3. Environment variables
  4. Defaults
"""

import logging
import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List

from .core.errors import DEFAULT_NO_INDEX_MARKERS
from .core.resolver import (
    ContentResolver, DEFAULT_REVISION, INDEX_STAGE, INDEX_PATH_ABSOLUTE, INDEX_PATH_STYLES,
)
from .services.executor import GitExecutor, DEFAULT_GIT_BINARY, DEFAULT_TIMEOUT
from .services.filesystem import LocalFileSystem
from .presentation.symbols import get_symbols

logger = logging.getLogger(__name__)


@dataclass
class GitConfig:
    """How git is invoked."""
    binary: str = DEFAULT_GIT_BINARY
    timeout: float = DEFAULT_TIMEOUT  # seconds

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if not self.binary:
            return "git.binary must not be empty"
        if self.timeout <= 0:
            return f"git.timeout must be > 0 (got {self.timeout})"
        return None


@dataclass
class ResolveConfig:
    """Content resolution policy."""
    default_revision: str = DEFAULT_REVISION
    index_stage: str = INDEX_STAGE
    no_index_markers: List[str] = field(default_factory=lambda: list(DEFAULT_NO_INDEX_MARKERS))
    index_path: str = INDEX_PATH_ABSOLUTE  # "absolute" | "relative"
    workers: int = 4

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if not self.default_revision:
            return "resolve.default_revision must not be empty"
        if not self.index_stage:
            return "resolve.index_stage must not be empty"
        if self.index_path not in INDEX_PATH_STYLES:
            return f"Unknown index_path '{self.index_path}'. Valid: {', '.join(INDEX_PATH_STYLES)}"
        if self.workers < 1:
            return f"resolve.workers must be >= 1 (got {self.workers})"
        return None


@dataclass
class DisplayConfig:
    """Display preferences."""
    symbols: str = "auto"  # "unicode" | "ascii" | "auto"
    format: str = "text"   # "text" | "json"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        valid_symbols = ("unicode", "ascii", "auto")
        if self.symbols not in valid_symbols:
            return f"Unknown symbols setting '{self.symbols}'. Valid: {', '.join(valid_symbols)}"

        valid_formats = ("text", "json")
        if self.format not in valid_formats:
            return f"Unknown format '{self.format}'. Valid: {', '.join(valid_formats)}"
        return None


@dataclass
class Config:
    """Application configuration."""
    git: GitConfig = field(default_factory=GitConfig)
    resolve: ResolveConfig = field(default_factory=ResolveConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    def validate(self) -> Optional[str]:
        return self.git.validate() or self.resolve.validate() or self.display.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "git": {
                "binary": self.git.binary,
                "timeout": self.git.timeout
            },
            "resolve": {
                "default_revision": self.resolve.default_revision,
                "index_stage": self.resolve.index_stage,
                "no_index_markers": list(self.resolve.no_index_markers),
                "index_path": self.resolve.index_path,
                "workers": self.resolve.workers
            },
            "display": {
                "symbols": self.display.symbols,
                "format": self.display.format
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        git_data = _section(data, "git")
        resolve_data = _section(data, "resolve")
        display_data = _section(data, "display")

        return cls(
            git=GitConfig(
                binary=str(git_data.get("binary", DEFAULT_GIT_BINARY)),
                timeout=float(git_data.get("timeout", DEFAULT_TIMEOUT))
            ),
            resolve=ResolveConfig(
                default_revision=str(resolve_data.get("default_revision", DEFAULT_REVISION)),
                index_stage=str(resolve_data.get("index_stage", INDEX_STAGE)),
                no_index_markers=_markers(resolve_data.get("no_index_markers", DEFAULT_NO_INDEX_MARKERS)),
                index_path=str(resolve_data.get("index_path", INDEX_PATH_ABSOLUTE)),
                workers=int(resolve_data.get("workers", 4))
            ),
            display=DisplayConfig(
                symbols=display_data.get("symbols", "auto"),
                format=display_data.get("format", "text")
            )
        )


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Project config (.gitcontent/config.yaml)
      2. User config (~/.gitcontent/config.yaml)
      3. Environment
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".gitcontent"
    USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"
    PROJECT_CONFIG_DIR = ".gitcontent"
    PROJECT_CONFIG_FILE = "config.yaml"

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.USER_CONFIG_FILE

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        # Start with defaults
        config_data: Dict[str, Any] = {}

        # Layer 1: Environment (lowest of the explicit sources)
        if os.environ.get("GITCONTENT_GIT_BINARY"):
            config_data.setdefault("git", {})["binary"] = os.environ["GITCONTENT_GIT_BINARY"]
        if os.environ.get("GITCONTENT_TIMEOUT"):
            config_data.setdefault("git", {})["timeout"] = _to_float(
                os.environ["GITCONTENT_TIMEOUT"], DEFAULT_TIMEOUT)
        if os.environ.get("GITCONTENT_WORKERS"):
            config_data.setdefault("resolve", {})["workers"] = _to_int(
                os.environ["GITCONTENT_WORKERS"], 4)

        # Layer 2: User config
        config_data = self._merge(config_data, self._read_yaml(self.user_config_path))

        # Layer 3: Project config (higher priority)
        config_data = self._merge(config_data, self._read_yaml(self.project_config_path))

        try:
            config = Config.from_dict(config_data)
        except (TypeError, ValueError):
            config = Config()  # Ignore malformed values

        # Invalid sections fall back to their defaults
        for name, default in (("git", GitConfig), ("resolve", ResolveConfig), ("display", DisplayConfig)):
            error = getattr(config, name).validate()
            if error:
                logger.warning("ignoring %s config: %s", name, error)
                setattr(config, name, default())

        self._config = config
        return self._config

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            return {}  # Ignore malformed config
        return data if isinstance(data, dict) else {}

    def save_project(self, config: Config):
        """Save configuration to project config file."""
        self.project_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.project_config_path, 'w') as f:
            yaml.safe_dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def save_user(self, config: Config):
        """Save configuration to user config file."""
        self.user_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.user_config_path, 'w') as f:
            yaml.safe_dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def set(self, key: str, value: str, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value.

        Args:
            key: Dot-separated key (e.g., "git.timeout")
            value: Value to set
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'git.timeout')"

        section, setting = parts

        if section == "git":
            if setting == "binary":
                config.git.binary = value
            elif setting == "timeout":
                try:
                    config.git.timeout = float(value)
                except ValueError:
                    return f"git.timeout must be a number (got '{value}')"
            else:
                return f"Unknown git setting: {setting}. Valid: binary, timeout"
            error = config.git.validate()

        elif section == "resolve":
            if setting == "default_revision":
                config.resolve.default_revision = value
            elif setting == "index_stage":
                config.resolve.index_stage = value
            elif setting == "no_index_markers":
                config.resolve.no_index_markers = [m.strip() for m in value.split(",") if m.strip()]
            elif setting == "index_path":
                config.resolve.index_path = value
            elif setting == "workers":
                try:
                    config.resolve.workers = int(value)
                except ValueError:
                    return f"resolve.workers must be an integer (got '{value}')"
            else:
                return ("Unknown resolve setting: "
                        f"{setting}. Valid: default_revision, index_stage, no_index_markers, index_path, workers")
            error = config.resolve.validate()

        elif section == "display":
            if setting == "symbols":
                config.display.symbols = value
            elif setting == "format":
                config.display.format = value
            else:
                return f"Unknown display setting: {setting}. Valid: symbols, format"
            error = config.display.validate()
        else:
            return f"Unknown section: {section}. Valid: git, resolve, display"

        if error:
            self._config = None  # Drop the rejected in-memory change
            return error

        if scope == "project":
            self.save_project(config)
        else:
            self.save_user(config)

        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value."""
        data = self.load().to_dict()

        parts = key.split(".")
        if len(parts) != 2:
            return None

        section, setting = parts
        value = data.get(section, {}).get(setting)
        if value is None:
            return None
        if isinstance(value, list):
            return ",".join(value)
        return str(value)

    def build_resolver(self) -> ContentResolver:
        """Wire a ContentResolver from the loaded configuration."""
        config = self.load()
        return ContentResolver(
            executor=GitExecutor(binary=config.git.binary, timeout=config.git.timeout),
            filesystem=LocalFileSystem(),
            default_revision=config.resolve.default_revision,
            index_stage=config.resolve.index_stage,
            no_index_markers=config.resolve.no_index_markers,
            index_path=config.resolve.index_path,
        )

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()
        symbols = get_symbols(config.display.symbols)

        status = symbols.check_pass if config.validate() is None else symbols.check_fail
        lines = [
            "Configuration:",
            "",
            "Git:",
            f"  Binary: {config.git.binary}",
            f"  Timeout: {config.git.timeout:g}s",
            "",
            "Resolve:",
            f"  Default revision: {config.resolve.default_revision}",
            f"  Index stage: {config.resolve.index_stage}",
            f"  No-index markers: {', '.join(config.resolve.no_index_markers) or '(none)'}",
            f"  Index path: {config.resolve.index_path}",
            f"  Workers: {config.resolve.workers}",
            "",
            "Display:",
            f"  Symbols: {config.display.symbols}",
            f"  Format: {config.display.format}",
            "",
            "Config files:",
            f"  User: {self.user_config_path}",
            f"  Project: {self.project_config_path}",
            "",
            f"{status} {config.validate() or 'Valid'}",
        ]

        return "\n".join(lines)


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = data.get(name)
    return value if isinstance(value, dict) else {}


def _markers(value) -> List[str]:
    if isinstance(value, str):
        return [m.strip() for m in value.split(",") if m.strip()]
    return [str(m) for m in value]


def _to_float(value: str, default: float) -> float:
    try:
        return float(value)
    except ValueError:
        return default


def _to_int(value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        return default


# Convenience function
def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()
