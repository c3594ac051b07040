"""
Publication component models.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

# Apache site definition for a list-info host. Placeholders are filled by
# str.format, so literal braces must not appear in the template.
VHOST_TEMPLATE = """<VirtualHost {server_ip}:80>
    ServerAdmin webmaster@{domain_name}
    ServerName {hostname}

    RedirectMatch /[/]*$ http://{hostname}/listinfo

    <IfModule mod_cband.c>
        CBandUser {user}
    </IfModule>

    Include /etc/mailman/apache.conf
    ScriptAlias / /usr/lib/cgi-bin/mailman/

    # Lists are created and destroyed by the hosting panel only
    Redirect /mailman/create /mailman/admin
    Redirect /mailman/rmlist /mailman/admin
    Redirect /mailman/edithtml /mailman/admin
    Redirect /create /admin
    Redirect /rmlist /admin
    Redirect /edithtml /admin
    Redirect /cgi-bin/mailman/create /cgi-bin/mailman/admin
    Redirect /cgi-bin/mailman/rmlist /cgi-bin/mailman/admin
    Redirect /cgi-bin/mailman/edithtml /cgi-bin/mailman/admin
</VirtualHost>
"""


@dataclass(frozen=True)
class VhostParams:
    """Values substituted into the site definition."""

    server_ip: str
    domain_name: str
    hostname: str
    user: str


@dataclass(frozen=True)
class VhostOutcome:
    site_file: str
    path: Path
    written: bool = False
    removed: bool = False


@dataclass(frozen=True)
class DnsOutcome:
    name: str
    address: str | None = None
    removed: int = 0
