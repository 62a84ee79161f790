"""Domain types and pure rules (order workflow, catalog queries, statistics)."""
