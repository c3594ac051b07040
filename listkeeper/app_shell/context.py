from __future__ import annotations

from dataclasses import dataclass, field

from listkeeper.adapters.apache import ApacheServer
from listkeeper.adapters.clock import SystemClock
from listkeeper.adapters.commands import SubprocessRunner
from listkeeper.adapters.fs.list_dirs import ListDirectories
from listkeeper.adapters.mailman_cli import MailmanCli
from listkeeper.adapters.net import IpClassifier
from listkeeper.adapters.postfix import PostfixServer
from listkeeper.adapters.sqlite.repos import (
    SQLiteDnsRecordRepo,
    SQLiteDomainRepo,
    SQLiteMailingListRepo,
)
from listkeeper.components.publication import PublicationManager
from listkeeper.components.reconciler import Reconciler
from listkeeper.components.transport import TransportTableEditor
from listkeeper.ports.commands import CommandRunnerPort
from listkeeper.rules.models import Rules


@dataclass
class ServiceContext:
    rules: Rules
    list_repo: SQLiteMailingListRepo
    domain_repo: SQLiteDomainRepo
    dns_repo: SQLiteDnsRecordRepo
    mta: PostfixServer
    httpd: ApacheServer
    reconciler: Reconciler
    runner: CommandRunnerPort = field(repr=False)

    @classmethod
    def create(cls, rules: Rules, runner: CommandRunnerPort | None = None) -> ServiceContext:
        runner = runner or SubprocessRunner(rules.mailman.command_timeout_seconds)
        db_path = str(rules.store.db_path)

        # Adapters
        list_repo = SQLiteMailingListRepo(db_path)
        domain_repo = SQLiteDomainRepo(db_path)
        dns_repo = SQLiteDnsRecordRepo(db_path)
        mta = PostfixServer(runner, rules.postfix)
        httpd = ApacheServer(runner, rules.apache)
        list_dirs = ListDirectories(rules.mailman.enabled_lists_dir, rules.mailman.disabled_lists_dir)

        # Components
        transport = TransportTableEditor(rules.postfix, rules.mailman, mta, SystemClock())
        publisher = PublicationManager(
            httpd,
            dns_repo,
            server=rules.server,
            system=rules.system,
            dns=rules.dns,
            ip_classifier=IpClassifier(),
        )
        reconciler = Reconciler(
            repo=list_repo,
            list_manager=MailmanCli(runner, rules.mailman),
            list_dirs=list_dirs,
            transport=transport,
            publisher=publisher,
        )

        return cls(
            rules=rules,
            list_repo=list_repo,
            domain_repo=domain_repo,
            dns_repo=dns_repo,
            mta=mta,
            httpd=httpd,
            reconciler=reconciler,
            runner=runner,
        )

    def flush_servers(self) -> None:
        """Apply deferred postmap and reload work collected during a run."""
        self.mta.flush()
        self.httpd.flush()
