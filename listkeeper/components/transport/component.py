"""
Transport table editor.

Maintains the list-manager routing entries in the MTA's two flat lookup
tables (transport and mailboxes). Each line is `<address>\t<target>`.

Key behaviors:
- Adding skips any line already present (exact line match)
- Removing deletes every exactly matching line; other lines are untouched
- The working copy is backed up before each rewrite
- After writing, the table is installed to its production path and the
  MTA is flagged to rebuild its compiled form and reload

Invariants:
- Each managed address appears at most once per table after an add
- Lines not produced by this editor are never modified
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable, Iterable
from pathlib import Path

from listkeeper.domain.entities import MailingList
from listkeeper.domain.errors import TableIOError
from listkeeper.rules.models import MailmanRules, PostfixRules

from .models import TableEdit, TableName, TableSpec
from .ports import ClockPort, MtaPort

logger = logging.getLogger(__name__)

TABLE_MODE = 0o644


# --- Pure Functions ---


def format_entry(address: str, target: str) -> str:
    return f"{address}\t{target}"


def add_entries(content: str, entries: Iterable[str]) -> tuple[str, int]:
    """
    Append entries not already present as whole lines.

    Returns:
        Tuple of (new_content, number_of_lines_added)
    """
    present = set(content.splitlines())
    missing = []
    for entry in entries:
        if entry not in present:
            missing.append(entry)
            present.add(entry)

    if not missing:
        return content, 0

    if content and not content.endswith("\n"):
        content += "\n"
    return content + "".join(f"{line}\n" for line in missing), len(missing)


def remove_entries(content: str, entries: Iterable[str]) -> tuple[str, int]:
    """
    Drop every line exactly matching one of the entries.

    Returns:
        Tuple of (new_content, number_of_lines_removed)
    """
    doomed = set(entries)
    kept = []
    removed = 0
    for line in content.splitlines(keepends=True):
        if line.rstrip("\n") in doomed:
            removed += 1
        else:
            kept.append(line)
    return "".join(kept), removed


# --- Editor ---


class TransportTableEditor:
    """Adds and removes a list's address variants in both lookup tables."""

    def __init__(
        self,
        postfix: PostfixRules,
        mailman: MailmanRules,
        mta: MtaPort,
        clock: ClockPort,
    ) -> None:
        self._postfix = postfix
        self._mta = mta
        self._clock = clock
        self.tables: tuple[TableSpec, ...] = (
            TableSpec("transport", mailman.delivery_target, postfix.transport_hash),
            TableSpec("mailboxes", mailman.discard_target, postfix.virtual_mailbox_hash),
        )

    def working_path(self, table: TableName) -> Path:
        return self._postfix.work_dir / table

    def entries_for(self, mlist: MailingList, spec: TableSpec) -> list[str]:
        return [format_entry(address, spec.target) for address in mlist.addresses()]

    def add_list(self, mlist: MailingList) -> list[TableEdit]:
        edits = []
        for spec in self.tables:
            entries = self.entries_for(mlist, spec)
            added = self._edit(spec, lambda content, e=entries: add_entries(content, e))
            edits.append(TableEdit(spec.name, added=added))
        return edits

    def remove_list(self, mlist: MailingList) -> list[TableEdit]:
        edits = []
        for spec in self.tables:
            entries = self.entries_for(mlist, spec)
            removed = self._edit(spec, lambda content, e=entries: remove_entries(content, e))
            edits.append(TableEdit(spec.name, removed=removed))
        return edits

    def _edit(self, spec: TableSpec, change: Callable[[str], tuple[str, int]]) -> int:
        path = self.working_path(spec.name)
        self._backup(path, spec.name)

        try:
            content = path.read_text()
        except OSError as e:
            raise TableIOError(path, e.strerror or str(e)) from e

        new_content, count = change(content)

        try:
            path.write_text(new_content)
            os.chmod(path, TABLE_MODE)
            spec.production_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(path, spec.production_path)
            os.chmod(spec.production_path, TABLE_MODE)
        except OSError as e:
            raise TableIOError(path, e.strerror or str(e)) from e

        self._mta.schedule_postmap(spec.production_path)
        self._mta.request_restart()
        logger.debug("Edited %s table: %d line(s) changed", spec.name, count)
        return count

    def _backup(self, path: Path, name: str) -> None:
        if not path.is_file():
            return
        stamp = int(self._clock.now().timestamp())
        target = self._postfix.backup_dir / f"{name}.{stamp}"
        try:
            self._postfix.backup_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(path, target)
        except OSError as e:
            raise TableIOError(target, e.strerror or str(e)) from e
