from typing import Literal

from pydantic import BaseModel, Field

# --- Enums / Literals ---
ListStatus = Literal[
    "create-pending",
    "update-pending",
    "enable-pending",
    "disable-pending",
    "delete-pending",
    "ok",
    "disabled",
    "error",
]
PendingStatus = Literal[
    "create-pending",
    "update-pending",
    "enable-pending",
    "disable-pending",
    "delete-pending",
]
DomainStatus = Literal["ok", "change-pending", "disabled"]

PENDING_STATUSES: tuple[PendingStatus, ...] = (
    "create-pending",
    "update-pending",
    "enable-pending",
    "disable-pending",
    "delete-pending",
)

# Address variants routed to the list manager for every list.
ADDRESS_SUFFIXES: tuple[str, ...] = (
    "",
    "-admin",
    "-bounces",
    "-confirm",
    "-join",
    "-leave",
    "-owner",
    "-request",
    "-subscribe",
    "-unsubscribe",
)

# --- Domains ---

class Domain(BaseModel):
    id: int | None = None
    name: str
    admin_id: int
    status: DomainStatus = "ok"

# --- Mailing lists ---

class MailingList(BaseModel):
    id: int | None = None
    admin_id: int
    domain_id: int
    domain_name: str = ""  # joined from domains on read
    list_name: str
    admin_email: str
    admin_password: str = Field(repr=False)
    status: ListStatus = "create-pending"
    last_error: str | None = None
    failed_status: PendingStatus | None = None

    @property
    def is_pending(self) -> bool:
        return self.status in PENDING_STATUSES

    def hostname(self, prefix: str = "lists") -> str:
        """Public hostname of the list-info site."""
        return f"{prefix}.{self.domain_name}"

    def addresses(self) -> list[str]:
        return [f"{self.list_name}{suffix}@{self.domain_name}" for suffix in ADDRESS_SUFFIXES]

# --- DNS ---

class DnsRecord(BaseModel):
    id: int | None = None
    domain_id: int
    alias_id: int = 0
    name: str
    record_class: str = "IN"
    record_type: str = "A"
    text: str
    owner: str | None = None
