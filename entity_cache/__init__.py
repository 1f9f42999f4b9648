"""entity-cache: read-through entity caching with template-driven invalidation."""

__version__ = "1.0.0"
