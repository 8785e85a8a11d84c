"""Infrastructure Layer: Redis clients and logging setup.

Invariants:
    - Every redis exception leaving this layer is mapped to a GatewayError
"""
