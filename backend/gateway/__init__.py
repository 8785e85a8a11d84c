"""ReJSON HTTP Gateway: REST translation layer over Redis and RedisJSON.

Invariants:
    - Package root contains no executable code (no import side effects)
"""
