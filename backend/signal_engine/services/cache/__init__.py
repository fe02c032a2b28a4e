"""
Cache Services

Dedup state for delivered signals.
"""

from signal_engine.services.cache.dedup_store import DedupStore, InMemoryDedupStore

__all__ = ["DedupStore", "InMemoryDedupStore"]
