from pathlib import Path
from typing import Protocol


class MtaPort(Protocol):
    """Mail transfer agent collaborator."""

    def schedule_postmap(self, table: Path) -> None:
        """Flag a lookup table as needing its compiled form rebuilt."""
        ...

    def request_restart(self) -> None:
        ...

    def flush(self) -> None:
        """Run pending postmap/restart work."""
        ...


class HttpdPort(Protocol):
    """Web server collaborator."""

    @property
    def sites_dir(self) -> Path:
        ...

    def enable_site(self, site_file: str) -> None:
        ...

    def disable_site(self, site_file: str) -> None:
        ...

    def request_restart(self) -> None:
        ...

    def flush(self) -> None:
        ...


class IpClassifierPort(Protocol):
    def address_type(self, ip: str) -> str:
        """Return 'PUBLIC', 'PRIVATE', 'LOOPBACK', ... for an address."""
        ...
