"""
Publication component - list-info virtual hosts and DNS records.
"""

from .component import (
    PublicationManager,
    render_vhost,
    site_file_name,
    system_user,
)
from .models import VHOST_TEMPLATE, DnsOutcome, VhostOutcome, VhostParams
from .ports import DnsRecordRepoPort, HttpdPort, IpClassifierPort

__all__ = [
    "PublicationManager",
    "render_vhost",
    "site_file_name",
    "system_user",
    "VHOST_TEMPLATE",
    "DnsOutcome",
    "VhostOutcome",
    "VhostParams",
    "DnsRecordRepoPort",
    "HttpdPort",
    "IpClassifierPort",
]
