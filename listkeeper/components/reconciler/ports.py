"""
Reconciler component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from listkeeper.domain.entities import MailingList
from listkeeper.ports.repo import DomainRepoPort, MailingListRepoPort

__all__ = [
    "DomainRepoPort",
    "ListDirectoryPort",
    "ListManagerPort",
    "MailingListRepoPort",
    "PublisherPort",
    "TransportEditorPort",
]


class ListManagerPort(Protocol):
    """External list manager (create/configure/destroy lists)."""

    def exists(self, list_name: str) -> bool:
        ...

    def create(
        self,
        list_name: str,
        hostname: str,
        domain_name: str,
        admin_email: str,
        admin_password: str,
    ) -> None:
        ...

    def configure(self, list_name: str, owner_email: str, hostname: str) -> None:
        ...

    def change_password(self, list_name: str, password: str) -> None:
        ...

    def remove(self, list_name: str) -> None:
        ...


class ListDirectoryPort(Protocol):
    """On-disk list directories; location encodes enabled/disabled."""

    def is_enabled(self, list_name: str) -> bool:
        ...

    def is_disabled(self, list_name: str) -> bool:
        ...

    def move_to_disabled(self, list_name: str) -> None:
        ...

    def move_to_enabled(self, list_name: str) -> None:
        ...


class TransportEditorPort(Protocol):
    def add_list(self, mlist: MailingList) -> object:
        ...

    def remove_list(self, mlist: MailingList) -> object:
        ...


class PublisherPort(Protocol):
    def hostname(self, mlist: MailingList) -> str:
        ...

    def publish(self, mlist: MailingList) -> None:
        """Write the virtual host and the DNS record."""
        ...

    def revoke(self, mlist: MailingList) -> None:
        """Remove the virtual host and the DNS record."""
        ...
