"""
Subprocess command runner.

Runs external commands synchronously, logging stdout at DEBUG and the
stderr of a failed command at ERROR. Non-zero exit raises CommandError.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence

from listkeeper.domain.errors import CommandError
from listkeeper.ports.commands import CommandOutput

logger = logging.getLogger(__name__)


class SubprocessRunner:
    def __init__(self, timeout_seconds: float | None = None) -> None:
        self._timeout = timeout_seconds

    def run(self, argv: Sequence[str], stdin: str | None = None) -> CommandOutput:
        argv = [str(a) for a in argv]
        logger.debug("Running %s", argv[0])
        try:
            proc = subprocess.run(
                argv,
                input=stdin,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise CommandError(argv, 127, f"{argv[0]}: command not found") from e
        except subprocess.TimeoutExpired as e:
            raise CommandError(argv, -1, f"timed out after {self._timeout}s") from e

        if proc.stdout:
            logger.debug(proc.stdout.rstrip())
        if proc.returncode != 0:
            if proc.stderr:
                logger.error(proc.stderr.rstrip())
            raise CommandError(argv, proc.returncode, proc.stderr)

        return CommandOutput(returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)
