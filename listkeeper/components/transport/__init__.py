"""
Transport component - MTA lookup table editing for mailing lists.
"""

from .component import (
    TransportTableEditor,
    add_entries,
    format_entry,
    remove_entries,
)
from .models import TableEdit, TableName, TableSpec
from .ports import ClockPort, MtaPort

__all__ = [
    # Editor
    "TransportTableEditor",
    # Pure functions
    "add_entries",
    "format_entry",
    "remove_entries",
    # Models
    "TableEdit",
    "TableName",
    "TableSpec",
    # Ports
    "ClockPort",
    "MtaPort",
]
