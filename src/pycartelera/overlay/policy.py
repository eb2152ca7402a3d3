"""Write failure classification.

Decides, from typed error fields only, whether a failed remote write may
be redirected into the local overlay.
"""

from __future__ import annotations

from pycartelera._constants import (
    CREATE_BLOCKED_STATUSES,
    DELETE_BLOCKED_STATUSES,
    UPDATE_BLOCKED_STATUSES,
)
from pycartelera.exceptions import CarteleraTransportError
from pycartelera.models.results import WriteOperation


def blocked_statuses(operation: WriteOperation) -> frozenset[int]:
    statuses: dict[WriteOperation, frozenset[int]] = {
        WriteOperation.CREATE: CREATE_BLOCKED_STATUSES,
        WriteOperation.UPDATE: UPDATE_BLOCKED_STATUSES,
        WriteOperation.DELETE: DELETE_BLOCKED_STATUSES,
    }
    return statuses[operation]


def is_blocked_write(operation: WriteOperation, error: BaseException) -> bool:
    """Return ``True`` when *error* should fall back to a local mutation.

    Policy:
    - network-level failure (no HTTP status at all): always blocked.
    - HTTP status in the operation's blocked set: blocked.
    - anything else, including non-transport exceptions: not blocked.
    """
    if not isinstance(error, CarteleraTransportError):
        return False
    if error.network_failure:
        return True
    return error.status_code in blocked_statuses(operation)


def describe_block(error: CarteleraTransportError) -> str:
    """Short human-readable reason for a blocked write."""
    if error.network_failure:
        return "remote API unreachable (network/CORS)"
    return f"remote API answered HTTP {error.status_code}"
