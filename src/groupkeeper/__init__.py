"""Accounts and groups service with role-gated bearer authentication."""

__version__ = "0.1.0"
