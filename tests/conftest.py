import sqlite3
from pathlib import Path

import pytest

from listkeeper.adapters.sqlite.migrator import SQLiteMigrator
from listkeeper.app_shell.context import ServiceContext
from listkeeper.domain.entities import Domain, MailingList
from listkeeper.rules.models import Rules
from tests.fakes import FakeRunner


@pytest.fixture
def rules(tmp_path: Path) -> Rules:
    """Rules with every managed path under tmp_path."""
    work_dir = tmp_path / "postfix" / "working"
    work_dir.mkdir(parents=True)
    (work_dir / "transport").write_text("example.org\tsmtp:\n")
    (work_dir / "mailboxes").write_text("someone@example.org\texample.org/someone/\n")
    bin_dir = tmp_path / "mailman" / "bin"
    bin_dir.mkdir(parents=True)

    return Rules.model_validate(
        {
            "server": {"base_server_ip": "10.0.0.5", "base_server_public_ip": "203.0.113.7"},
            "system": {"user_prefix": "vu", "user_min_uid": 2000},
            "store": {"db_path": str(tmp_path / "listkeeper.db")},
            "mailman": {
                "bin_dir": str(bin_dir),
                "change_pw_bin_dir": str(bin_dir),
                "enabled_lists_dir": str(tmp_path / "mailman" / "lists"),
                "disabled_lists_dir": str(tmp_path / "mailman" / "disabled.lists"),
            },
            "postfix": {
                "work_dir": str(work_dir),
                "backup_dir": str(tmp_path / "postfix" / "backup"),
                "transport_hash": str(tmp_path / "etc" / "postfix" / "transport"),
                "virtual_mailbox_hash": str(tmp_path / "etc" / "postfix" / "mailboxes"),
            },
            "apache": {"sites_dir": str(tmp_path / "apache" / "sites-available")},
        }
    )


@pytest.fixture
def db_path(rules: Rules) -> str:
    path = str(rules.store.db_path)
    SQLiteMigrator(path).run_migrations()
    return path


@pytest.fixture
def runner(rules: Rules) -> FakeRunner:
    return FakeRunner(rules.mailman.enabled_lists_dir)


@pytest.fixture
def ctx(rules: Rules, db_path: str, runner: FakeRunner) -> ServiceContext:
    """Fully wired context: real sqlite/filesystem adapters, fake commands."""
    return ServiceContext.create(rules, runner=runner)


@pytest.fixture
def domain(ctx: ServiceContext) -> Domain:
    return ctx.domain_repo.save(Domain(name="example.com", admin_id=7))


@pytest.fixture
def make_list(ctx: ServiceContext, domain: Domain):
    def _make(name: str = "foo", status: str = "create-pending") -> MailingList:
        return ctx.list_repo.save(
            MailingList(
                admin_id=domain.admin_id,
                domain_id=domain.id,
                domain_name=domain.name,
                list_name=name,
                admin_email="owner@example.com",
                admin_password="s3cret",
                status=status,
            )
        )

    return _make


@pytest.fixture
def raw_conn(db_path: str):
    conn = sqlite3.connect(db_path)
    yield conn
    conn.close()
