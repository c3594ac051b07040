"""
Mailing-list status state machine.

Pending statuses are work queued for the reconciler. Settled statuses
(ok, disabled) are stable until an actor requests a new transition.
A failed transition parks the list in "error", remembering which pending
status failed so it can be retried.
"""

from __future__ import annotations

from listkeeper.domain.entities import (
    PENDING_STATUSES,
    ListStatus,
    MailingList,
    PendingStatus,
)
from listkeeper.domain.errors import InvalidTransitionError

# Status an actor may request, keyed by the statuses it may be requested from.
REQUESTABLE: dict[PendingStatus, tuple[ListStatus, ...]] = {
    "create-pending": ("ok",),  # resync of an existing list
    "update-pending": ("ok",),
    "enable-pending": ("disabled",),
    "disable-pending": ("ok",),
    "delete-pending": ("ok", "disabled", "error"),
}

_SETTLED: dict[PendingStatus, ListStatus | None] = {
    "create-pending": "ok",
    "update-pending": "ok",
    "enable-pending": "ok",
    "disable-pending": "disabled",
    "delete-pending": None,
}

UNKNOWN_ERROR = "Unknown error"


def settled_status(pending: PendingStatus) -> ListStatus | None:
    """
    Status a list takes after its pending transition succeeds.

    None means the row is removed from the store.
    """
    return _SETTLED[pending]


def can_request(current: ListStatus, new: PendingStatus) -> bool:
    if current == new:
        return True
    return current in REQUESTABLE.get(new, ())


def request_transition(mlist: MailingList, new: PendingStatus) -> MailingList:
    """
    Return a NEW MailingList queued for the given pending status.
    Raises InvalidTransitionError if the request is not allowed.
    """
    if new not in PENDING_STATUSES:
        raise InvalidTransitionError(f"{new!r} is not a pending status")
    if not can_request(mlist.status, new):
        raise InvalidTransitionError(f"Cannot request {new} for a list in status {mlist.status}")
    return mlist.model_copy(update={"status": new, "last_error": None, "failed_status": None})


def park(mlist: MailingList, error: str | None) -> MailingList:
    """Park a list whose pending transition failed."""
    if not mlist.is_pending:
        raise InvalidTransitionError(f"Cannot park a list in status {mlist.status}")
    return mlist.model_copy(
        update={
            "status": "error",
            "last_error": error or UNKNOWN_ERROR,
            "failed_status": mlist.status,
        }
    )


def retry(mlist: MailingList) -> MailingList:
    """Re-queue a parked list for the transition that failed."""
    if mlist.status != "error" or mlist.failed_status is None:
        raise InvalidTransitionError(f"List {mlist.list_name} is not parked")
    return mlist.model_copy(
        update={"status": mlist.failed_status, "last_error": None, "failed_status": None}
    )
