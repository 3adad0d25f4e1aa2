"""Bulk-import row validation and normalization for the asset-management spreadsheets."""

__version__ = "0.1.0"
