"""
Persistence module.

Record store (single countdown document, last write wins) and append-only
audit store, both backed by SQLite.
"""
