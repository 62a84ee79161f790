"""
High-level use cases for the marketplace.

Each service orchestrates the market repository to implement one area of
business rules (identity, catalog, orders, administration). Routers call
these services instead of touching the stored collections directly.
"""
