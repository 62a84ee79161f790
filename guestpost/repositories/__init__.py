"""
Persistence adapters.

A key-value store (memory, JSON file or SQL) sits at the bottom; the JSON
accessor encodes documents on top of it, and the market repository exposes
the typed collections. Services depend on the repository, never on a store.
"""
