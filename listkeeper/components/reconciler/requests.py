"""
Actor-side requests: queue work for the reconciler.

These only change stored statuses; nothing external happens until the
next run.
"""

from __future__ import annotations

import logging

from listkeeper.domain.entities import MailingList, PendingStatus
from listkeeper.domain.errors import InvalidTransitionError
from listkeeper.domain.naming import validate_list_name
from listkeeper.domain.state import request_transition, retry

from .models import (
    CreateListInput,
    RequestError,
    RequestOutput,
    UpdateListInput,
)
from .ports import DomainRepoPort, MailingListRepoPort

logger = logging.getLogger(__name__)


def _failure(code: str, message: str, field: str | None = None) -> RequestOutput:
    return RequestOutput(errors=[RequestError(code, message, field)], success=False)


def request_create(
    inp: CreateListInput,
    *,
    repo: MailingListRepoPort,
    domains: DomainRepoPort,
) -> RequestOutput:
    """Store a new list in create-pending."""
    problems = validate_list_name(inp.list_name)
    if problems:
        return RequestOutput(
            errors=[RequestError("INVALID_LIST_NAME", p, "list_name") for p in problems],
            success=False,
        )
    if "@" not in inp.admin_email:
        return _failure("INVALID_EMAIL", "Invalid administrator email", "admin_email")
    if not inp.admin_password:
        return _failure("EMPTY_PASSWORD", "Administrator password is required", "admin_password")

    domain = domains.get_by_name(inp.domain_name)
    if domain is None or domain.id is None:
        return _failure("UNKNOWN_DOMAIN", f"Domain {inp.domain_name} not found", "domain_name")

    if repo.get_by_name(domain.id, inp.list_name) is not None:
        return _failure(
            "LIST_EXISTS", f"List {inp.list_name}@{inp.domain_name} already exists", "list_name"
        )

    saved = repo.save(
        MailingList(
            admin_id=domain.admin_id,
            domain_id=domain.id,
            domain_name=domain.name,
            list_name=inp.list_name,
            admin_email=inp.admin_email,
            admin_password=inp.admin_password,
            status="create-pending",
        )
    )
    logger.info("Queued creation of %s@%s", inp.list_name, inp.domain_name)
    return RequestOutput(list_id=saved.id, status=saved.status)


def request_update(inp: UpdateListInput, *, repo: MailingListRepoPort) -> RequestOutput:
    """Change administrator email and/or password and queue an update."""
    mlist = repo.get_by_id(inp.list_id)
    if mlist is None:
        return _failure("NOT_FOUND", f"Mailing list {inp.list_id} not found")
    if inp.admin_email is not None and "@" not in inp.admin_email:
        return _failure("INVALID_EMAIL", "Invalid administrator email", "admin_email")

    changes = {}
    if inp.admin_email is not None:
        changes["admin_email"] = inp.admin_email
    if inp.admin_password:
        changes["admin_password"] = inp.admin_password

    try:
        queued = request_transition(mlist.model_copy(update=changes), "update-pending")
    except InvalidTransitionError as e:
        return _failure("INVALID_TRANSITION", str(e))

    repo.save(queued)
    return RequestOutput(list_id=queued.id, status=queued.status)


def request_status(list_id: int, new: PendingStatus, *, repo: MailingListRepoPort) -> RequestOutput:
    """Queue enable, disable, delete or resync of one list."""
    mlist = repo.get_by_id(list_id)
    if mlist is None:
        return _failure("NOT_FOUND", f"Mailing list {list_id} not found")
    try:
        queued = request_transition(mlist, new)
    except InvalidTransitionError as e:
        return _failure("INVALID_TRANSITION", str(e))
    repo.save(queued)
    return RequestOutput(list_id=queued.id, status=queued.status)


def request_retry(list_id: int, *, repo: MailingListRepoPort) -> RequestOutput:
    """Re-queue a parked list for the transition that failed."""
    mlist = repo.get_by_id(list_id)
    if mlist is None:
        return _failure("NOT_FOUND", f"Mailing list {list_id} not found")
    try:
        queued = retry(mlist)
    except InvalidTransitionError as e:
        return _failure("NOT_PARKED", str(e))
    repo.save(queued)
    return RequestOutput(list_id=queued.id, status=queued.status)


# --- Bulk requests ---


def request_resync_all(repo: MailingListRepoPort) -> int:
    """Re-apply every settled list's side effects (ok -> create-pending)."""
    return repo.bulk_set_status("create-pending", where="ok")


def request_enable_all(repo: MailingListRepoPort) -> int:
    return repo.bulk_set_status("enable-pending", where="disabled")


def request_disable_all(repo: MailingListRepoPort) -> int:
    return repo.bulk_set_status("disable-pending", where="ok")


def request_delete_all(repo: MailingListRepoPort) -> int:
    return repo.bulk_set_status("delete-pending")
