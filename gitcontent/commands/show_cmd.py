"""
ShowCommand — Print versioned file content

    gitcontent show src/app.py                 # staged content, disk if no index
    gitcontent show src/app.py --rev HEAD~2    # content at a revision
    gitcontent show a.py b.py --json           # several files, JSON output
"""

import os
import sys
from typing import List, Optional

from ..commands.base import BaseCommand
from ..core.models import ContentRequest, ContentResult
from ..presentation.render import render_json, render_text, format_failure
from ..presentation.symbols import safe_print
from ..services.batch import resolve_many


class ShowCommand(BaseCommand):
    """Resolve files through the ContentResolver and print the result."""

    def build_requests(self, files: List[str], repo: Optional[str], rev: Optional[str]) -> List[ContentRequest]:
        repo_root = os.path.abspath(repo) if repo else os.path.abspath(str(self.project_dir))
        return [
            ContentRequest(
                file_path=os.path.abspath(os.path.join(repo_root, f)) if f else "",
                repo_root=repo_root,
                source_revision=rev or None,
            )
            for f in files
        ]

    def show(
        self,
        files: List[str],
        repo: Optional[str] = None,
        rev: Optional[str] = None,
        as_json: Optional[bool] = None,
        compact: bool = False,
    ) -> int:
        """
        Resolve and print.

        Returns:
            Exit status: 0 when every file resolved, 1 otherwise
        """
        requests = self.build_requests(files, repo, rev)
        results = resolve_many(self.resolver, requests, max_workers=self.config.resolve.workers)

        if as_json is None:
            as_json = self.config.display.format == "json"

        if as_json:
            safe_print(render_json(results, compact=compact))
        else:
            self._print_text(results)

        return 1 if any(r.failed for r in results) else 0

    def _print_text(self, results: List[ContentResult]):
        blocks = render_text(results, self.symbols)
        for i, block in enumerate(blocks):
            # content is verbatim; a newline only keeps the next header on its own line
            last = i == len(blocks) - 1
            safe_print(block, end="" if last or block.endswith("\n") else "\n")

        for result in results:
            if result.failed:
                safe_print(format_failure(result, self.symbols), file=sys.stderr)


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAME = 'show'


def register_parser(subparsers):
    """Register show command parser."""
    p = subparsers.add_parser('show', help='Print file content from disk, index or history')
    p.add_argument('files', nargs='+', help='Files to resolve (relative to the repository root)')
    p.add_argument('--repo', '-r', default=None,
                   help='Repository root (default: --project)')
    p.add_argument('--rev', default=None,
                   help='Source revision (default: staged content, HEAD for deleted files)')
    p.add_argument('--json', dest='as_json', action='store_true', default=None,
                   help='Output JSON (content, digest, errors)')
    p.add_argument('--compact', action='store_true',
                   help='Single-line JSON (with --json)')
    return p


def handle(cli, args):
    """Handle show command dispatch."""
    return cli._show_cmd.show(
        args.files,
        repo=args.repo,
        rev=args.rev,
        as_json=args.as_json,
        compact=args.compact,
    )
