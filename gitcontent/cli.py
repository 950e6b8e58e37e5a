"""
CLI -- Command interface

    gitcontent show FILE... [--rev REV] [--json]
    gitcontent config [--set KEY=VALUE] [--user]
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .config import ConfigManager
from .presentation.symbols import get_symbols
from .commands.show_cmd import ShowCommand
from .commands.config_cmd import ConfigCommand
from . import __version__


class ContentCLI:
    """Holds the resources commands share: config, symbols, resolver."""

    def __init__(self, project_dir: Path):
        self.project_dir = Path(project_dir)
        self.config_manager = ConfigManager(self.project_dir)
        self.config = self.config_manager.load()
        self.symbols = get_symbols(self.config.display.symbols)
        self._resolver = None

        self._show_cmd = ShowCommand(self)
        self._config_cmd = ConfigCommand(self)

    @property
    def resolver(self):
        """Built on first use so `config` never needs git."""
        if self._resolver is None:
            self._resolver = self.config_manager.build_resolver()
        return self._resolver


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the gitcontent CLI.

    Returns:
        Process exit status
    """
    parser = argparse.ArgumentParser(
        description="gitcontent -- file content from the working tree, index or history",
    )

    parser.add_argument(
        '--project', '-p',
        default=os.environ.get("GITCONTENT_PROJECT_PATH", "."),
        help='Repository root (default: GITCONTENT_PROJECT_PATH or current)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log git invocations to stderr'
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'gitcontent {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    from .commands import register_all, dispatch
    register_all(subparsers)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.command:
        parser.print_help()
        return 0

    cli = ContentCLI(Path(args.project))

    try:
        return dispatch(args.command, cli, args) or 0
    except KeyError as e:
        print(f"Error: {e}")
        parser.print_help()
        return 2


if __name__ == '__main__':
    sys.exit(main())
