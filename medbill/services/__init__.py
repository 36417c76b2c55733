"""Service layer for the medbill application."""

from .bill_scan_service import BillScanService

__all__ = ["BillScanService"]
