"""Write operation results returned by the fallback router."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pycartelera.exceptions import BlockedWriteError


class WriteOutcome(StrEnum):
    REMOTE_SUCCESS = "remote-success"
    LOCAL_FALLBACK = "local-fallback"


class WriteOperation(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class WriteResult(BaseModel):
    """Outcome of a create/update/delete.

    ``message`` is meant for direct display and must be shown verbatim: a
    local fallback is still a success for the caller, and only the message
    tells the two apart.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    outcome: WriteOutcome
    operation: WriteOperation
    movie_id: str
    message: str
    remote: dict[str, Any] | bool | None = None
    """Payload returned by the remote on success (``True`` when it sent no JSON)."""
    error: BlockedWriteError | None = Field(default=None, exclude=True)
    """The absorbed failure on ``local-fallback``."""

    @property
    def landed_locally(self) -> bool:
        return self.outcome == WriteOutcome.LOCAL_FALLBACK
