"""
Core utilities shared across the marketplace.

This package hosts configuration (env vars, storage paths), logging setup,
password helpers and identifier generation. Services and routers should
depend on these primitives instead of reading os.environ directly.
"""
