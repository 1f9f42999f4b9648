"""Core constants: cache key structure and template grammar literals.

Single source of truth for key composition (DRY). Used by the prefix
resolver, the template engine and the cache stores.
"""

# Delimiter between prefix and key segments (e.g. users.42.data)
CACHE_KEY_SEP = "."

# Suffix stripped from repository type names before deriving a prefix
REPOSITORY_SUFFIX = "Repository"

# Marker that opens a relation placeholder body: {{rel:organizations.id}}
RELATION_MARKER = "rel:"

# Fallback TTL (minutes) when the configured default is unusable
DEFAULT_TTL_MINUTES = 60

# Related entities fetched per batch when expanding relation placeholders
DEFAULT_RELATION_BATCH_SIZE = 10

# Separator used when slugifying values for keys
SLUG_SEPARATOR = "-"
