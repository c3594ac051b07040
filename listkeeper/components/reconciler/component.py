"""
Reconciler - converges pending mailing-list statuses into external effects.

Reads every list whose status is pending, runs the transition handler for
that status, and writes the outcome back: a settled status, a removed row,
or a parked error.

Key behaviors:
- One bulk read per run; lists are processed in the order returned
- Each list is handled fully before the next one starts
- A failing transition is recorded on that list and the run carries on
- Failing to record an outcome aborts the run
- Handlers are safe to re-run: existence checks guard list creation and
  deletion, table edits skip present lines, publication overwrites

Invariants:
- Settled statuses: create/update/enable -> ok, disable -> disabled,
  delete -> row removed
- A parked list has status "error", a last_error message and the pending
  status that failed; it is not picked up again until re-requested
- Steps already applied are not rolled back when a later step fails
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from listkeeper.domain.entities import MailingList, PendingStatus
from listkeeper.domain.errors import ListkeeperError, StatusWriteError, StoreError
from listkeeper.domain.state import UNKNOWN_ERROR, park, settled_status

from .models import RecordedOutcome, RunReport, TransitionResult
from .ports import (
    ListDirectoryPort,
    ListManagerPort,
    MailingListRepoPort,
    PublisherPort,
    TransportEditorPort,
)

logger = logging.getLogger(__name__)


class Reconciler:
    def __init__(
        self,
        repo: MailingListRepoPort,
        list_manager: ListManagerPort,
        list_dirs: ListDirectoryPort,
        transport: TransportEditorPort,
        publisher: PublisherPort,
    ) -> None:
        self._repo = repo
        self._lists = list_manager
        self._dirs = list_dirs
        self._transport = transport
        self._publisher = publisher
        self._handlers: dict[PendingStatus, Callable[[MailingList], None]] = {
            "create-pending": self.create_list,
            "update-pending": self.update_list,
            "enable-pending": self.enable_list,
            "disable-pending": self.disable_list,
            "delete-pending": self.delete_list,
        }

    # --- Loop ---

    def run(self) -> RunReport:
        """
        Process every pending list once.

        Returns:
            RunReport; success is False only if the store could not be read
            or an outcome could not be written.
        """
        try:
            pending = self._repo.list_pending()
        except StoreError as e:
            logger.exception("Unable to read pending mailing lists")
            return RunReport(success=False, aborted=True, error=str(e))

        if not pending:
            return RunReport(success=True)

        outcomes: list[RecordedOutcome] = []
        for mlist in pending:
            result = self.apply(mlist)
            try:
                outcomes.append(self.record(mlist, result))
            except StatusWriteError as e:
                logger.exception(
                    "Unable to record outcome for list %s@%s; aborting run",
                    mlist.list_name,
                    mlist.domain_name,
                )
                return RunReport(
                    success=False, outcomes=tuple(outcomes), aborted=True, error=str(e)
                )

        report = RunReport(success=True, outcomes=tuple(outcomes))
        logger.info(
            "Reconciled %d mailing list(s): %d succeeded, %d parked",
            report.processed,
            report.succeeded,
            report.parked,
        )
        return report

    def apply(self, mlist: MailingList) -> TransitionResult:
        """
        Run the handler for the list's status.

        Handler failures are returned as a failed result. Raises ValueError
        only if the list is not in a pending status.
        """
        status = mlist.status
        handler = self._handlers.get(status)  # type: ignore[call-overload]
        if handler is None:
            raise ValueError(f"List {mlist.list_name} is not pending (status {status})")

        try:
            handler(mlist)
        except ListkeeperError as e:
            logger.warning("%s of %s@%s failed: %s", status, mlist.list_name, mlist.domain_name, e)
            return self._result(mlist, success=False, error=str(e) or UNKNOWN_ERROR)
        except Exception as e:
            logger.exception("Unexpected error during %s of %s", status, mlist.list_name)
            return self._result(mlist, success=False, error=str(e) or UNKNOWN_ERROR)

        return self._result(mlist, success=True)

    def record(self, mlist: MailingList, result: TransitionResult) -> RecordedOutcome:
        """
        Persist a transition outcome as a single write.
        Raises StatusWriteError if the store rejects it.
        """
        assert mlist.id is not None
        try:
            if not result.success:
                self._repo.save(park(mlist, result.error))
                return RecordedOutcome(result, "parked")

            settled = settled_status(result.status)
            if settled is None:
                self._repo.delete(mlist.id)
                logger.info("Mailing list %s@%s deleted", mlist.list_name, mlist.domain_name)
                return RecordedOutcome(result, "deleted")

            self._repo.save(
                mlist.model_copy(update={"status": settled, "last_error": None, "failed_status": None})
            )
            logger.info("Mailing list %s@%s is now %s", mlist.list_name, mlist.domain_name, settled)
            return RecordedOutcome(result, "ok" if settled == "ok" else "disabled")
        except StoreError as e:
            raise StatusWriteError(str(e)) from e

    def _result(self, mlist: MailingList, success: bool, error: str | None = None) -> TransitionResult:
        return TransitionResult(
            list_id=mlist.id,
            list_name=mlist.list_name,
            domain_name=mlist.domain_name,
            status=mlist.status,  # type: ignore[arg-type]
            success=success,
            error=error,
        )

    # --- Transition handlers ---

    def create_list(self, mlist: MailingList) -> None:
        if not self._lists.exists(mlist.list_name):
            self._lists.create(
                list_name=mlist.list_name,
                hostname=self._publisher.hostname(mlist),
                domain_name=mlist.domain_name,
                admin_email=mlist.admin_email,
                admin_password=mlist.admin_password,
            )
        self._transport.add_list(mlist)
        self._publisher.publish(mlist)

    def update_list(self, mlist: MailingList) -> None:
        self._lists.configure(mlist.list_name, owner_email=mlist.admin_email, hostname=mlist.domain_name)
        self._lists.change_password(mlist.list_name, mlist.admin_password)

    def enable_list(self, mlist: MailingList) -> None:
        if not self._dirs.is_disabled(mlist.list_name):
            return
        self._dirs.move_to_enabled(mlist.list_name)
        self._publisher.publish(mlist)

    def disable_list(self, mlist: MailingList) -> None:
        if self._dirs.is_enabled(mlist.list_name):
            self._dirs.move_to_disabled(mlist.list_name)
        # Public reachability is always revoked
        self._publisher.revoke(mlist)

    def delete_list(self, mlist: MailingList) -> None:
        # A disabled list is invisible to the list manager until moved back
        if self._dirs.is_disabled(mlist.list_name):
            self._dirs.move_to_enabled(mlist.list_name)
        if self._lists.exists(mlist.list_name):
            self._lists.remove(mlist.list_name)
        self._transport.remove_list(mlist)
        self._publisher.revoke(mlist)
