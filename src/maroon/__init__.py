"""maroon: local cache and AWS file sync for short-lived role credentials."""

__version__ = "0.1.0"
