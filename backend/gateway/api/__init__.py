"""API Layer: route table, dependency wiring and response normalization.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Routes hold no translation logic, they delegate to CommandTranslator
"""
