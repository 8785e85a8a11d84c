"""Route Modules: one file per surface (raw keys, documents, health).

Invariants:
    - Document routes are registered before raw key routes
"""
