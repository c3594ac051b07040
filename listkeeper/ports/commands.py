from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class CommandOutput:
    returncode: int
    stdout: str = ""
    stderr: str = ""


class CommandRunnerPort(Protocol):
    def run(self, argv: Sequence[str], stdin: str | None = None) -> CommandOutput:
        """
        Run a command to completion.
        Raises CommandError if it exits non-zero or cannot be started.
        """
        ...
