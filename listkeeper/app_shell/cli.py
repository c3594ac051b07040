import argparse
import logging
import sys
from pathlib import Path

from listkeeper.adapters.sqlite.migrator import SQLiteMigrator
from listkeeper.app_shell.config import RequirementError, validate_requirements
from listkeeper.app_shell.context import ServiceContext
from listkeeper.components.reconciler import (
    RunReport,
    request_delete_all,
    request_disable_all,
    request_enable_all,
    request_resync_all,
    request_retry,
)
from listkeeper.domain.entities import Domain
from listkeeper.domain.errors import CommandError, StoreError
from listkeeper.rules.loader import load_rules, rules_path_from_env

logger = logging.getLogger("cli")

BULK_REQUESTS = {
    "resync-all": request_resync_all,
    "enable-all": request_enable_all,
    "disable-all": request_disable_all,
    "delete-all": request_delete_all,
}


def get_context(rules_path: Path) -> ServiceContext:
    rules = load_rules(rules_path)
    return ServiceContext.create(rules)


def reconcile(ctx: ServiceContext) -> RunReport:
    """Run one reconciliation pass and apply deferred server work."""
    report = ctx.reconciler.run()
    for recorded in report.outcomes:
        result = recorded.result
        if not result.success:
            print(f"{result.list_name}@{result.domain_name}: {result.status} failed: {result.error}")
    print(f"Processed {report.processed} list(s): {report.succeeded} ok, {report.parked} parked.")
    ctx.flush_servers()
    return report


def handle_migrate(ctx: ServiceContext, args: argparse.Namespace) -> int:
    applied = SQLiteMigrator(str(ctx.rules.store.db_path)).run_migrations()
    print(f"Applied {len(applied)} migration(s).")
    return 0


def handle_run(ctx: ServiceContext, args: argparse.Namespace) -> int:
    try:
        validate_requirements(ctx.rules)
    except RequirementError as e:
        logger.error("%s", e)
        return 1
    try:
        report = reconcile(ctx)
    except CommandError as e:
        # List statuses are already recorded at this point
        logger.error("Unable to apply server changes: %s", e)
        return 1
    return 0 if report.success else 1


def handle_bulk(ctx: ServiceContext, args: argparse.Namespace) -> int:
    count = BULK_REQUESTS[args.command](ctx.list_repo)
    print(f"Queued {count} list(s).")
    if args.no_run:
        return 0
    return handle_run(ctx, args)


def handle_retry(ctx: ServiceContext, args: argparse.Namespace) -> int:
    out = request_retry(args.list_id, repo=ctx.list_repo)
    if not out.success:
        for err in out.errors:
            logger.error("%s", err.message)
        return 1
    print(f"List {out.list_id} queued as {out.status}.")
    return 0


def handle_status(ctx: ServiceContext, args: argparse.Namespace) -> int:
    for mlist in ctx.list_repo.list_all(status=args.status):
        line = f"{mlist.id:>5}  {mlist.list_name}@{mlist.domain_name}  {mlist.status}"
        if mlist.last_error:
            line += f"  ({mlist.failed_status}: {mlist.last_error})"
        print(line)
    return 0


def handle_add_domain(ctx: ServiceContext, args: argparse.Namespace) -> int:
    if ctx.domain_repo.get_by_name(args.name):
        logger.error("Domain %s already exists.", args.name)
        return 1
    domain = ctx.domain_repo.save(Domain(name=args.name, admin_id=args.admin_id))
    print(f"Domain {domain.name} added with id {domain.id}.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Mailing list reconciliation")
    parser.add_argument("--rules", type=Path, default=None, help="Path to rules.yaml")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("migrate", help="Create or upgrade the database schema")
    subparsers.add_parser("run", help="Process all pending mailing lists")

    for name, help_text in (
        ("resync-all", "Re-apply side effects of every active list"),
        ("enable-all", "Enable every disabled list"),
        ("disable-all", "Disable every active list"),
        ("delete-all", "Delete every list"),
    ):
        bulk = subparsers.add_parser(name, help=help_text)
        bulk.add_argument("--no-run", action="store_true", help="Only queue, do not reconcile")

    retry_parser = subparsers.add_parser("retry", help="Re-queue a parked list")
    retry_parser.add_argument("list_id", type=int)

    status_parser = subparsers.add_parser("status", help="Show mailing lists")
    status_parser.add_argument("--status", default=None, help="Only lists in this status")

    domain_parser = subparsers.add_parser("add-domain", help="Register a hosted domain")
    domain_parser.add_argument("name")
    domain_parser.add_argument("--admin-id", type=int, required=True)

    return parser


HANDLERS = {
    "migrate": handle_migrate,
    "run": handle_run,
    "retry": handle_retry,
    "status": handle_status,
    "add-domain": handle_add_domain,
    **{name: handle_bulk for name in BULK_REQUESTS},
}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    rules_path = args.rules or rules_path_from_env()
    try:
        ctx = get_context(rules_path)
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1

    try:
        return HANDLERS[args.command](ctx, args)
    except StoreError as e:
        logger.error("Store failure: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
