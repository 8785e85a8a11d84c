"""Core Layer: pure request parsing, domain constants and the error taxonomy.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - No IO, no async
"""
