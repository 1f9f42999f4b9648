"""Application layer: ports, DTOs and the cache key engine services."""
