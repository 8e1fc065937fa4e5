"""
Common utilities shared across routers.
"""

from .dependencies import get_cache, parse_with_param
from .pagination import get_paginated_request

__all__ = [
    "get_cache",
    "parse_with_param",
    "get_paginated_request",
]
