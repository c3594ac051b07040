"""
Mailing list admin routes.

Requests only queue work (pending statuses); POST /api/runs applies it.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from listkeeper.api.deps import get_context
from listkeeper.app_shell.context import ServiceContext
from listkeeper.components.reconciler import (
    CreateListInput,
    RequestOutput,
    UpdateListInput,
    request_create,
    request_retry,
    request_status,
    request_update,
)
from listkeeper.domain.entities import ListStatus, MailingList

router = APIRouter()

_ERROR_STATUS = {
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "LIST_EXISTS": status.HTTP_409_CONFLICT,
    "INVALID_TRANSITION": status.HTTP_409_CONFLICT,
    "NOT_PARKED": status.HTTP_409_CONFLICT,
}


# --- Request/Response Models ---


class CreateListRequest(BaseModel):
    domain_name: str
    list_name: str
    admin_email: str
    admin_password: str = Field(..., min_length=1)


class UpdateListRequest(BaseModel):
    admin_email: str | None = None
    admin_password: str | None = None


class ListResponse(BaseModel):
    """Mailing list; the administrator password is never returned."""

    id: int
    domain_name: str
    list_name: str
    admin_email: str
    status: ListStatus
    last_error: str | None = None
    failed_status: str | None = None


class QueuedResponse(BaseModel):
    id: int
    status: str


# --- Helpers ---


def list_to_response(mlist: MailingList) -> ListResponse:
    assert mlist.id is not None
    return ListResponse(
        id=mlist.id,
        domain_name=mlist.domain_name,
        list_name=mlist.list_name,
        admin_email=mlist.admin_email,
        status=mlist.status,
        last_error=mlist.last_error,
        failed_status=mlist.failed_status,
    )


def _queued_or_raise(out: RequestOutput) -> QueuedResponse:
    if not out.success:
        code = out.errors[0].code if out.errors else "BAD_REQUEST"
        raise HTTPException(
            status_code=_ERROR_STATUS.get(code, status.HTTP_400_BAD_REQUEST),
            detail=[{"code": e.code, "message": e.message, "field": e.field} for e in out.errors],
        )
    assert out.list_id is not None and out.status is not None
    return QueuedResponse(id=out.list_id, status=out.status)


# --- Routes ---


@router.get("", response_model=list[ListResponse])
def list_lists(
    status_filter: ListStatus | None = Query(None, alias="status"),
    ctx: ServiceContext = Depends(get_context),
) -> list[ListResponse]:
    return [list_to_response(m) for m in ctx.list_repo.list_all(status=status_filter)]


@router.get("/{list_id}", response_model=ListResponse)
def get_list(list_id: int, ctx: ServiceContext = Depends(get_context)) -> ListResponse:
    mlist = ctx.list_repo.get_by_id(list_id)
    if mlist is None:
        raise HTTPException(status_code=404, detail="Mailing list not found")
    return list_to_response(mlist)


@router.post("", response_model=QueuedResponse, status_code=status.HTTP_202_ACCEPTED)
def create_list(req: CreateListRequest, ctx: ServiceContext = Depends(get_context)) -> QueuedResponse:
    out = request_create(
        CreateListInput(
            domain_name=req.domain_name,
            list_name=req.list_name,
            admin_email=req.admin_email,
            admin_password=req.admin_password,
        ),
        repo=ctx.list_repo,
        domains=ctx.domain_repo,
    )
    return _queued_or_raise(out)


@router.patch("/{list_id}", response_model=QueuedResponse, status_code=status.HTTP_202_ACCEPTED)
def update_list(
    list_id: int, req: UpdateListRequest, ctx: ServiceContext = Depends(get_context)
) -> QueuedResponse:
    out = request_update(
        UpdateListInput(list_id=list_id, admin_email=req.admin_email, admin_password=req.admin_password),
        repo=ctx.list_repo,
    )
    return _queued_or_raise(out)


@router.post("/{list_id}/enable", response_model=QueuedResponse, status_code=status.HTTP_202_ACCEPTED)
def enable_list(list_id: int, ctx: ServiceContext = Depends(get_context)) -> QueuedResponse:
    return _queued_or_raise(request_status(list_id, "enable-pending", repo=ctx.list_repo))


@router.post("/{list_id}/disable", response_model=QueuedResponse, status_code=status.HTTP_202_ACCEPTED)
def disable_list(list_id: int, ctx: ServiceContext = Depends(get_context)) -> QueuedResponse:
    return _queued_or_raise(request_status(list_id, "disable-pending", repo=ctx.list_repo))


@router.post("/{list_id}/resync", response_model=QueuedResponse, status_code=status.HTTP_202_ACCEPTED)
def resync_list(list_id: int, ctx: ServiceContext = Depends(get_context)) -> QueuedResponse:
    return _queued_or_raise(request_status(list_id, "create-pending", repo=ctx.list_repo))


@router.post("/{list_id}/retry", response_model=QueuedResponse, status_code=status.HTTP_202_ACCEPTED)
def retry_list(list_id: int, ctx: ServiceContext = Depends(get_context)) -> QueuedResponse:
    return _queued_or_raise(request_retry(list_id, repo=ctx.list_repo))


@router.delete("/{list_id}", response_model=QueuedResponse, status_code=status.HTTP_202_ACCEPTED)
def delete_list(list_id: int, ctx: ServiceContext = Depends(get_context)) -> QueuedResponse:
    return _queued_or_raise(request_status(list_id, "delete-pending", repo=ctx.list_repo))
