"""
Error taxonomy for list reconciliation.

Transition handlers raise these; the reconciler converts them into a parked
status at the handler boundary. Only StatusWriteError is fatal to a run.
"""

from __future__ import annotations

from collections.abc import Sequence


class ListkeeperError(Exception):
    """Base class for all listkeeper failures."""


class CommandError(ListkeeperError):
    """An external command exited non-zero or could not be started."""

    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = self.stderr or f"exit status {returncode}"
        super().__init__(f"Command {self.argv[0]} failed: {detail}")


class TableIOError(ListkeeperError):
    """A managed file could not be read or written."""

    def __init__(self, path: object, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Unable to access {self.path}: {reason}")


class StoreError(ListkeeperError):
    """The entity store failed or returned a result of the wrong shape."""


class StatusWriteError(StoreError):
    """Persisting a transition outcome failed; aborts the whole run."""


class PublicationError(ListkeeperError):
    """A virtual host or DNS record could not be published or revoked."""


class InvalidTransitionError(ListkeeperError, ValueError):
    """A status change was requested that the state machine does not allow."""
