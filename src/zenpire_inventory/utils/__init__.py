"""Utilities package for zenpire-inventory."""
