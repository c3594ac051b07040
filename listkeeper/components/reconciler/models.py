"""
Reconciler component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from listkeeper.domain.entities import PendingStatus

Outcome = Literal["ok", "disabled", "deleted", "parked"]


@dataclass(frozen=True)
class TransitionResult:
    """Result of one list's transition attempt."""

    list_id: int | None
    list_name: str
    domain_name: str
    status: PendingStatus
    success: bool
    error: str | None = None


@dataclass(frozen=True)
class RecordedOutcome:
    """A transition result together with what was written to the store."""

    result: TransitionResult
    outcome: Outcome


@dataclass(frozen=True)
class RunReport:
    """
    Result of one reconciliation pass.

    `success` describes the loop itself; individual list failures are
    parked and reported in `outcomes` without failing the run.
    """

    success: bool
    outcomes: tuple[RecordedOutcome, ...] = ()
    aborted: bool = False
    error: str | None = None

    @property
    def processed(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.result.success)

    @property
    def parked(self) -> int:
        return sum(1 for o in self.outcomes if o.outcome == "parked")


# --- Actor requests ---


@dataclass(frozen=True)
class CreateListInput:
    domain_name: str
    list_name: str
    admin_email: str
    admin_password: str


@dataclass(frozen=True)
class UpdateListInput:
    list_id: int
    admin_email: str | None = None
    admin_password: str | None = None


@dataclass(frozen=True)
class RequestError:
    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class RequestOutput:
    list_id: int | None = None
    status: str | None = None
    errors: list[RequestError] = field(default_factory=list)
    success: bool = True
