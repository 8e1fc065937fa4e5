"""
Redis constants.
Key layout shared by the cache key builders.
"""

# =============================================================================
# Key Layout
# =============================================================================

# Every cache key is "<domain>:<operation>:<discriminator>"
KEY_SEPARATOR = ":"

OPERATION_BY_ID = "id"
OPERATION_PAGINATED = "paginated"
OPERATION_USER = "user"

# SCAN batch size used by pattern deletion
SCAN_BATCH_SIZE = 500
