from typing import Protocol

from listkeeper.domain.entities import DnsRecord, Domain, ListStatus, MailingList


class DomainRepoPort(Protocol):
    def get_by_id(self, domain_id: int) -> Domain | None:
        ...

    def get_by_name(self, name: str) -> Domain | None:
        ...

    def save(self, domain: Domain) -> Domain:
        ...


class MailingListRepoPort(Protocol):
    def list_pending(self) -> list[MailingList]:
        """All lists whose status is a pending status, in one read."""
        ...

    def list_all(self, status: ListStatus | None = None) -> list[MailingList]:
        ...

    def get_by_id(self, list_id: int) -> MailingList | None:
        ...

    def get_by_name(self, domain_id: int, list_name: str) -> MailingList | None:
        ...

    def save(self, mlist: MailingList) -> MailingList:
        """Insert or update a list (status, error fields and admin fields)."""
        ...

    def delete(self, list_id: int) -> None:
        ...

    def bulk_set_status(self, new: ListStatus, where: ListStatus | None = None) -> int:
        """Set status on every list (optionally only those in status `where`)."""
        ...


class DnsRecordRepoPort(Protocol):
    def list_for_domain(self, domain_id: int, owner: str | None = None) -> list[DnsRecord]:
        ...

    def add(self, record: DnsRecord) -> DnsRecord:
        ...

    def remove_owned(self, domain_id: int, owner: str) -> int:
        """
        Delete records of the domain owned by `owner` and flag the domain for
        DNS zone regeneration, atomically. Returns the number of records removed.
        """
        ...
