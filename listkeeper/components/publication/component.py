"""
Publication manager - list-info web site and DNS record for a list.

Key behaviors:
- The site definition is rendered from a fixed template, written to the
  web server's sites directory, enabled, and a reload is requested
- Removing a site that does not exist is a no-op
- Adding a DNS record first removes every record this subsystem owns for
  the domain, so repeated adds never duplicate
- DNS removal and the "zone needs regeneration" flag are one transaction

Invariants:
- Only records tagged with the configured owner are ever deleted
- The public address is preferred when the configured base address is not
  classified as public
"""

from __future__ import annotations

import logging
import os

from listkeeper.domain.entities import DnsRecord, MailingList
from listkeeper.domain.errors import PublicationError
from listkeeper.rules.models import DnsRules, ServerRules, SystemRules

from .models import VHOST_TEMPLATE, DnsOutcome, VhostOutcome, VhostParams
from .ports import DnsRecordRepoPort, HttpdPort, IpClassifierPort

logger = logging.getLogger(__name__)

SITE_MODE = 0o644


# --- Pure Functions ---


def render_vhost(params: VhostParams) -> str:
    return VHOST_TEMPLATE.format(
        server_ip=params.server_ip,
        domain_name=params.domain_name,
        hostname=params.hostname,
        user=params.user,
    )


def system_user(prefix: str, min_uid: int, admin_id: int) -> str:
    """Name of the hosting account's system user."""
    return f"{prefix}{min_uid + admin_id}"


def site_file_name(hostname: str) -> str:
    return f"{hostname}.conf"


# --- Manager ---


class PublicationManager:
    def __init__(
        self,
        httpd: HttpdPort,
        dns_repo: DnsRecordRepoPort,
        server: ServerRules,
        system: SystemRules,
        dns: DnsRules,
        ip_classifier: IpClassifierPort | None = None,
    ) -> None:
        self._httpd = httpd
        self._dns_repo = dns_repo
        self._server = server
        self._system = system
        self._dns = dns
        self._ip_classifier = ip_classifier

    def hostname(self, mlist: MailingList) -> str:
        return mlist.hostname(self._dns.hostname_prefix)

    # --- Virtual host ---

    def add_vhost(self, mlist: MailingList) -> VhostOutcome:
        hostname = self.hostname(mlist)
        site_file = site_file_name(hostname)
        path = self._httpd.sites_dir / site_file

        content = render_vhost(
            VhostParams(
                server_ip=str(self._server.base_server_ip),
                domain_name=mlist.domain_name,
                hostname=hostname,
                user=system_user(
                    self._system.user_prefix, self._system.user_min_uid, mlist.admin_id
                ),
            )
        )

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
            os.chmod(path, SITE_MODE)
        except OSError as e:
            raise PublicationError(f"Unable to write site definition {path}: {e}") from e

        self._httpd.enable_site(site_file)
        self._httpd.request_restart()
        logger.debug("Published site %s", site_file)
        return VhostOutcome(site_file=site_file, path=path, written=True)

    def remove_vhost(self, mlist: MailingList) -> VhostOutcome:
        site_file = site_file_name(self.hostname(mlist))
        path = self._httpd.sites_dir / site_file

        if not path.is_file():
            return VhostOutcome(site_file=site_file, path=path)

        self._httpd.disable_site(site_file)
        try:
            path.unlink()
        except OSError as e:
            raise PublicationError(f"Unable to delete site definition {path}: {e}") from e

        self._httpd.request_restart()
        logger.debug("Revoked site %s", site_file)
        return VhostOutcome(site_file=site_file, path=path, removed=True)

    # --- DNS ---

    def record_address(self) -> str:
        """Address advertised for list hosts."""
        ip = str(self._server.base_server_ip)
        public_ip = self._server.base_server_public_ip
        if self._ip_classifier is None or public_ip is None:
            return ip
        if self._ip_classifier.address_type(ip) != "PUBLIC":
            return str(public_ip)
        return ip

    def add_dns_record(self, mlist: MailingList) -> DnsOutcome:
        self.remove_dns_record(mlist)

        name = f"{self.hostname(mlist)}."
        address = self.record_address()
        self._dns_repo.add(
            DnsRecord(
                domain_id=mlist.domain_id,
                alias_id=0,
                name=name,
                record_class="IN",
                record_type="A",
                text=address,
                owner=self._dns.owner,
            )
        )
        logger.debug("Added DNS record %s A %s", name, address)
        return DnsOutcome(name=name, address=address)

    def remove_dns_record(self, mlist: MailingList) -> DnsOutcome:
        removed = self._dns_repo.remove_owned(mlist.domain_id, self._dns.owner)
        return DnsOutcome(name=f"{self.hostname(mlist)}.", removed=removed)

    # --- Both ---

    def publish(self, mlist: MailingList) -> None:
        self.add_vhost(mlist)
        self.add_dns_record(mlist)

    def revoke(self, mlist: MailingList) -> None:
        self.remove_vhost(mlist)
        self.remove_dns_record(mlist)
