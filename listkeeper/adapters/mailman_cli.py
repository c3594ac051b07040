"""
Mailman 2 command-line adapter.

Wraps newlist, config_list, change_pw, rmlist and list_lists. Argument
vectors are passed without a shell, so no escaping is needed.
"""

from __future__ import annotations

import logging

from listkeeper.ports.commands import CommandRunnerPort
from listkeeper.rules.models import MailmanRules

logger = logging.getLogger(__name__)


class MailmanCli:
    def __init__(self, runner: CommandRunnerPort, config: MailmanRules) -> None:
        self._runner = runner
        self._config = config

    def _bin(self, name: str) -> str:
        return str(self._config.bin_dir / name)

    def list_names(self) -> list[str]:
        """Names of all provisioned lists (list_lists -b)."""
        out = self._runner.run([self._bin("list_lists"), "-b"])
        return [line.strip() for line in out.stdout.splitlines() if line.strip()]

    def exists(self, list_name: str) -> bool:
        # list_lists -b prints lower-cased names
        return list_name.lower() in {n.lower() for n in self.list_names()}

    def create(
        self,
        list_name: str,
        hostname: str,
        domain_name: str,
        admin_email: str,
        admin_password: str,
    ) -> None:
        self._runner.run(
            [
                self._bin("newlist"),
                "-q",
                "-u",
                hostname,
                "-e",
                domain_name,
                list_name,
                admin_email,
                admin_password,
            ]
        )
        logger.info("Created mailing list %s@%s", list_name, domain_name)

    def configure(self, list_name: str, owner_email: str, hostname: str) -> None:
        """Push owner and host settings through config_list, reading from stdin."""
        settings = f"owner = [{owner_email!r}]\nhostname = [{hostname!r}]\n"
        self._runner.run(
            [self._bin("config_list"), "-i", "/dev/stdin", list_name],
            stdin=settings,
        )
        logger.debug("Updated settings of mailing list %s", list_name)

    def change_password(self, list_name: str, password: str) -> None:
        self._runner.run(
            [
                str(self._config.change_pw_bin_dir / "change_pw"),
                "-q",
                "-l",
                list_name,
                "-p",
                password,
            ]
        )
        logger.debug("Changed admin password of mailing list %s", list_name)

    def remove(self, list_name: str) -> None:
        # -a also removes the list archives
        self._runner.run([self._bin("rmlist"), "-a", list_name])
        logger.info("Removed mailing list %s", list_name)
