"""
Postfix collaborator.

Collects "rebuild this lookup table" and "reload the MTA" signals raised
while lists are reconciled, and acts on them once in flush().
"""

from __future__ import annotations

import logging
from pathlib import Path

from listkeeper.ports.commands import CommandRunnerPort
from listkeeper.rules.models import PostfixRules

logger = logging.getLogger(__name__)


class PostfixServer:
    def __init__(self, runner: CommandRunnerPort, config: PostfixRules) -> None:
        self._runner = runner
        self._config = config
        self.postmap_queue: set[Path] = set()
        self.restart_requested = False

    def schedule_postmap(self, table: Path) -> None:
        self.postmap_queue.add(Path(table))

    def request_restart(self) -> None:
        self.restart_requested = True

    def flush(self) -> None:
        for table in sorted(self.postmap_queue):
            self._runner.run([*self._config.postmap_command, str(table)])
            logger.info("Rebuilt lookup table %s", table)
        self.postmap_queue.clear()

        if self.restart_requested:
            self._runner.run(self._config.reload_command)
            logger.info("Postfix reloaded")
            self.restart_requested = False
