"""Zenpire Inventory - business-data snapshot transfer engine."""

__version__ = "0.1.0"
