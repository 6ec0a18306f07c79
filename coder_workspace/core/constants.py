"""Core constants: cache key prefixes and shared Coder API literals.

Single source of truth for cache key structure and the limits used by the
lookup and deletion cascades.
"""

# Cache key prefixes for the per-session context binding
CACHE_PREFIX_BINDING = "coder-workspace"
CACHE_KEY_LAST_URL = "last-url"
CACHE_KEY_LAST_META = "last-meta"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Workspace search page sizes
SEARCH_LIMIT = 10
LISTING_LIMIT = 100

# Coder workspace names are DNS labels
WORKSPACE_NAME_MAX_LENGTH = 63

# Soft decommission: the TTL applied when every hard-delete route is refused
SOFT_DELETE_TTL_MS = 60_000

# Readiness polling never sleeps less than this between polls
MIN_POLL_INTERVAL_MS = 100

# Default lookup-only alternate for legacy {repo}.{branchShort} workspaces
DEFAULT_ALTERNATE_NAME_TEMPLATES = ("{repo}.{branchShort}",)

# Used as the secondary candidate when the branch is unknown
BRANCHLESS_NAME_TEMPLATE = "{repo}-{change}"

# Rich parameters only meaningful when the template clones the repository
CLONE_RICH_PARAM_NAMES = frozenset(
    {"GERRIT_GIT_HTTP_URL", "GERRIT_GIT_SSH_URL", "GERRIT_CHANGE_REF"}
)
