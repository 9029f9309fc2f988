"""Thin wrapper around subprocess for the gcloud, docker, gsutil and kubectl CLIs."""

import logging
import subprocess
from collections.abc import Sequence

from ..shared.schemas import CommandResult
from .errors import CommandNotFound, CommandTimeout

logger = logging.getLogger(__name__)


class CommandRunner:
    """Run external commands and capture their output."""

    def __init__(self, timeout: float | None = None):
        """
        Initialize the runner.

        Args:
            timeout: Optional per-command timeout in seconds. None waits for
                the command to finish, which is what long builds and cluster
                creation need.
        """
        self.timeout = timeout

    def run(self, args: Sequence[str]) -> CommandResult:
        """
        Run a command to completion.

        Args:
            args: Program and arguments (no shell interpolation)

        Returns:
            CommandResult with stdout, stderr and exit status

        Raises:
            CommandNotFound: If the program is not in PATH or cannot be executed
            CommandTimeout: If the command exceeds the configured timeout
        """
        args = tuple(str(arg) for arg in args)
        logger.debug(f"Running: {' '.join(args)}")

        try:
            completed = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except FileNotFoundError:
            raise CommandNotFound(f"{args[0]} not found in PATH")
        except subprocess.TimeoutExpired:
            raise CommandTimeout(f"{' '.join(args)} timed out after {self.timeout}s")
        except OSError as e:
            raise CommandNotFound(f"Cannot execute {args[0]}: {e}")

        result = CommandResult(
            args=args,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            exit_status=completed.returncode,
        )
        if not result.ok:
            logger.debug(f"{result.command_line} exited with {result.exit_status}: {result.stderr.strip()}")
        return result
