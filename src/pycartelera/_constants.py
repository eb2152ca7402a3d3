"""Internal constants shared across the library."""

BASE_URL = "https://movie.azurewebsites.net/api/cartelera"
USER_AGENT = "pycartelera/1"

#: Query parameter carrying the record id on get/update/delete.
ID_PARAM = "imdbID"

# ------------------------------------------------------------------
# Overlay table keys
# ------------------------------------------------------------------

OVERRIDES_KEY = "cartelera_overrides"
ADDS_KEY = "cartelera_adds"
DELETES_KEY = "cartelera_deletes"

# ------------------------------------------------------------------
# Status codes that make a remote write eligible for local fallback
# ------------------------------------------------------------------

CREATE_BLOCKED_STATUSES: frozenset[int] = frozenset({403, 405})
UPDATE_BLOCKED_STATUSES: frozenset[int] = frozenset(range(400, 600))
DELETE_BLOCKED_STATUSES: frozenset[int] = frozenset({403, 405})

# Longest body excerpt carried in log lines and error messages.
BODY_EXCERPT = 200
