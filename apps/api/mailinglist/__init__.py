"""Mailing list API: email entries with opt-out, upsert and pagination."""

__version__ = "0.1.0"
