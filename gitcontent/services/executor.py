"""
Executor — Runs git as a child process

The resolver only knows the narrow CommandExecutor interface:

    execute(working_dir, subcommand, args) -> stdout

GitExecutor is the subprocess binding. Arguments travel as a vector,
never through a shell, so file and branch names with special characters
are passed through untouched.

Each call spawns exactly one process and reaps it before returning,
on success, failure, timeout and cancellation alike. No retries.
"""

import logging
import subprocess
import threading
import time
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from ..core.errors import CommandFailure
from ..core.models import Invocation

logger = logging.getLogger(__name__)


DEFAULT_GIT_BINARY = "git"
DEFAULT_TIMEOUT = 30.0        # seconds
DEFAULT_POLL_INTERVAL = 0.05  # seconds between cancellation checks


class CommandExecutor(ABC):
    """Capability to run one version-control subcommand."""

    @abstractmethod
    def execute(
        self,
        working_dir: str,
        subcommand: str,
        args: Sequence[str],
        cancel: Optional[threading.Event] = None,
    ) -> str:
        """
        Run the subcommand and return its standard output.

        Raises:
            CommandFailure: non-zero exit, spawn error, timeout or cancellation
        """

    def run(self, invocation: Invocation, cancel: Optional[threading.Event] = None) -> str:
        """Execute a prepared Invocation."""
        return self.execute(
            invocation.working_dir,
            invocation.subcommand,
            list(invocation.args),
            cancel=cancel,
        )


class GitExecutor(CommandExecutor):
    """Subprocess binding for the git binary."""

    def __init__(
        self,
        binary: str = DEFAULT_GIT_BINARY,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        """
        Args:
            binary: git executable name or path
            timeout: Seconds before the process is killed. None = no limit.
            poll_interval: How often a cancel event is checked while waiting
        """
        self.binary = binary
        self.timeout = timeout
        self.poll_interval = poll_interval

    def execute(
        self,
        working_dir: str,
        subcommand: str,
        args: Sequence[str],
        cancel: Optional[threading.Event] = None,
    ) -> str:
        argv = Invocation(working_dir, subcommand, tuple(args)).argv(self.binary)

        if cancel is not None and cancel.is_set():
            raise CommandFailure.cancellation(argv)

        logger.debug("exec %s (cwd=%s)", argv, working_dir)

        try:
            proc = subprocess.Popen(
                argv,
                cwd=working_dir,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise CommandFailure(str(e)) from e

        try:
            stdout, stderr = self._communicate(proc, argv, cancel)
        finally:
            if proc.poll() is None:
                _kill(proc)

        out = stdout.decode("utf-8", errors="replace")
        if proc.returncode != 0:
            err = stderr.decode("utf-8", errors="replace")
            logger.debug("exit %d from %s", proc.returncode, argv)
            raise CommandFailure(err or out, proc.returncode)

        return out

    def _communicate(
        self,
        proc: subprocess.Popen,
        argv: List[str],
        cancel: Optional[threading.Event],
    ) -> Tuple[bytes, bytes]:
        """Wait for the process, honouring the timeout and the cancel event."""
        deadline = time.monotonic() + self.timeout if self.timeout else None

        while True:
            wait = self.poll_interval if cancel is not None else None
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    _kill(proc)
                    raise CommandFailure.timeout(argv, self.timeout)
                wait = remaining if wait is None else min(wait, remaining)

            try:
                return proc.communicate(timeout=wait)
            except subprocess.TimeoutExpired:
                if cancel is not None and cancel.is_set():
                    _kill(proc)
                    raise CommandFailure.cancellation(argv)


def _kill(proc: subprocess.Popen) -> None:
    """Kill and reap; drains the pipes so wait() cannot block."""
    proc.kill()
    proc.communicate()
