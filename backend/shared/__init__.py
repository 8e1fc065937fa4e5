"""
Shared module for common utilities used by the REST API.

STRUCTURE:
- shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging
  - constants.py: Limits, cache domains, enums

- shared.infrastructure: Database, Redis and caching
  - db.py: SQLAlchemy sessions, safe_commit()
  - redis/: Connection pool
  - cache/: Cache keys, Redis cache client, invalidation helpers
  - correlation.py: Request correlation IDs

- shared.query: List query layer
  - relations.py: Relation include parsing, eager-load options
  - filters.py: Filter/sort normalization against field allow-lists
  - sql.py: SQLAlchemy clause rendering
  - pagination.py: PaginatedRequest / PaginatedResponse

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - validators.py: Locale, slug and search-term validation
  - schemas.py: Shared Pydantic schemas

IMPORT EXAMPLES:
    from shared.infrastructure.db import get_db, safe_commit
    from shared.config.settings import settings
    from shared.query.pagination import PaginatedRequest
    from shared.utils.exceptions import NotFoundError, ValidationError
"""
