"""
KV Engine - Embedded log-structured key-value store

A single-file, Bitcask-style storage engine: every write is appended to a
log on disk, an in-memory index maps each key to its latest record, and the
index is rebuilt by replaying the log on startup.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"
