"""Utilities for webstatus_backend."""
