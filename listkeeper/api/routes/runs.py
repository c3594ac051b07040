from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from listkeeper.api.deps import get_context
from listkeeper.app_shell.context import ServiceContext
from listkeeper.components.reconciler import RunReport
from listkeeper.domain.errors import CommandError

router = APIRouter()


class OutcomeResponse(BaseModel):
    list_id: int | None
    list_name: str
    domain_name: str
    status: str
    outcome: str
    error: str | None = None


class RunResponse(BaseModel):
    success: bool
    processed: int
    succeeded: int
    parked: int
    outcomes: list[OutcomeResponse]
    error: str | None = None


def report_to_response(report: RunReport) -> RunResponse:
    return RunResponse(
        success=report.success,
        processed=report.processed,
        succeeded=report.succeeded,
        parked=report.parked,
        outcomes=[
            OutcomeResponse(
                list_id=o.result.list_id,
                list_name=o.result.list_name,
                domain_name=o.result.domain_name,
                status=o.result.status,
                outcome=o.outcome,
                error=o.result.error,
            )
            for o in report.outcomes
        ],
        error=report.error,
    )


@router.post("", response_model=RunResponse)
def trigger_run(ctx: ServiceContext = Depends(get_context)) -> RunResponse:
    """Process every pending list now, then apply deferred server reloads."""
    report = ctx.reconciler.run()
    try:
        ctx.flush_servers()
    except CommandError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    if not report.success:
        raise HTTPException(status_code=500, detail=report_to_response(report).model_dump())
    return report_to_response(report)
