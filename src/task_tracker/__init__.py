"""
Task Tracker backend package.

Users and their todos behind a FastAPI transport, a small set of use cases,
and pluggable storage backends (in-memory or SQLite).
"""

__version__ = "0.1.0"
