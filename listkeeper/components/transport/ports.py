"""
Transport component port definitions.
"""

from __future__ import annotations

from listkeeper.ports.clock import ClockPort
from listkeeper.ports.servers import MtaPort

__all__ = ["ClockPort", "MtaPort"]
