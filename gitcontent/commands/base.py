"""
BaseCommand — Shared foundation for all CLI commands

Commands receive the CLI instance and access its resources through properties.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..cli import ContentCLI


class BaseCommand:
    """Base class for CLI commands with access to shared resources."""

    def __init__(self, cli: 'ContentCLI'):
        self._cli = cli

    @property
    def project_dir(self):
        """Repository root the CLI was pointed at."""
        return self._cli.project_dir

    @property
    def config_manager(self):
        return self._cli.config_manager

    @property
    def config(self):
        """Application configuration."""
        return self._cli.config

    @property
    def symbols(self):
        """Symbol set for display (Unicode/ASCII)."""
        return self._cli.symbols

    @property
    def resolver(self):
        """ContentResolver wired from config."""
        return self._cli.resolver
