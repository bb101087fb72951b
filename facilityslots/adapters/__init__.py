"""
Adapters layer - Repository implementations.
"""

from .memory_store import SAMPLE_DATA_FILE, InMemoryStore

__all__ = ["InMemoryStore", "SAMPLE_DATA_FILE"]
