from __future__ import annotations

import logging
from pathlib import Path

from listkeeper.ports.commands import CommandRunnerPort
from listkeeper.rules.models import ApacheRules

logger = logging.getLogger(__name__)


class ApacheServer:
    """Apache collaborator: site enable/disable and deferred reload."""

    def __init__(self, runner: CommandRunnerPort, config: ApacheRules) -> None:
        self._runner = runner
        self._config = config
        self.restart_requested = False

    @property
    def sites_dir(self) -> Path:
        return self._config.sites_dir

    def enable_site(self, site_file: str) -> None:
        self._runner.run([*self._config.enable_site_command, site_file])

    def disable_site(self, site_file: str) -> None:
        self._runner.run([*self._config.disable_site_command, site_file])

    def request_restart(self) -> None:
        self.restart_requested = True

    def flush(self) -> None:
        if self.restart_requested:
            self._runner.run(self._config.reload_command)
            logger.info("Apache reloaded")
            self.restart_requested = False
