"""
Reconciler component - mailing-list status reconciliation.
"""

from .component import Reconciler
from .models import (
    CreateListInput,
    Outcome,
    RecordedOutcome,
    RequestError,
    RequestOutput,
    RunReport,
    TransitionResult,
    UpdateListInput,
)
from .ports import (
    DomainRepoPort,
    ListDirectoryPort,
    ListManagerPort,
    MailingListRepoPort,
    PublisherPort,
    TransportEditorPort,
)
from .requests import (
    request_create,
    request_delete_all,
    request_disable_all,
    request_enable_all,
    request_resync_all,
    request_retry,
    request_status,
    request_update,
)

__all__ = [
    # Loop
    "Reconciler",
    # Requests
    "request_create",
    "request_delete_all",
    "request_disable_all",
    "request_enable_all",
    "request_resync_all",
    "request_retry",
    "request_status",
    "request_update",
    # Models
    "CreateListInput",
    "Outcome",
    "RecordedOutcome",
    "RequestError",
    "RequestOutput",
    "RunReport",
    "TransitionResult",
    "UpdateListInput",
    # Ports
    "DomainRepoPort",
    "ListDirectoryPort",
    "ListManagerPort",
    "MailingListRepoPort",
    "PublisherPort",
    "TransportEditorPort",
]
