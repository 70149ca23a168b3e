"""
Cache package for the Movies Service.

Provides a Redis-backed cache holding single-movie snapshots and listing
snapshots under a fixed TTL, and the deterministic keys they live under.
"""
