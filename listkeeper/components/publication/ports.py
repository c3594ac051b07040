"""
Publication component port definitions.
"""

from __future__ import annotations

from listkeeper.ports.repo import DnsRecordRepoPort
from listkeeper.ports.servers import HttpdPort, IpClassifierPort

__all__ = ["DnsRecordRepoPort", "HttpdPort", "IpClassifierPort"]
