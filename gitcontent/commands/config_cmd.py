"""
ConfigCommand — View and set configuration
"""

from ..commands.base import BaseCommand


class ConfigCommand(BaseCommand):
    """Show or change settings in the project or user config file."""

    def show_config(self) -> int:
        print(self.config_manager.display())
        return 0

    def set_config(self, key: str, value: str, scope: str = "project") -> int:
        symbols = self.symbols
        error = self.config_manager.set(key, value, scope)
        if error:
            print(f"{symbols.check_fail} {error}")
            return 1

        print(f"{symbols.check_pass} Set {key} = {value} ({scope})")
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAME = 'config'


def register_parser(subparsers):
    """Register config command parser."""
    p = subparsers.add_parser('config', help='View or set configuration')
    p.add_argument('--set', metavar='KEY=VALUE',
                   help='Set config value (e.g., git.timeout=10)')
    p.add_argument('--user', action='store_true',
                   help='Apply to user config instead of project')
    return p


def handle(cli, args):
    """Handle config command dispatch."""
    if args.set:
        if '=' not in args.set:
            print("Error: Use format KEY=VALUE (e.g., git.timeout=10)")
            return 1
        key, value = args.set.split('=', 1)
        scope = "user" if args.user else "project"
        return cli._config_cmd.set_config(key, value, scope)

    return cli._config_cmd.show_config()
