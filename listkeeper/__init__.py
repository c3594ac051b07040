"""Mailing-list provisioning and reconciliation for hosted domains."""

__version__ = "0.3.0"
