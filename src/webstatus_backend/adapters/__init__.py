"""Framework adapters for webstatus_backend."""
