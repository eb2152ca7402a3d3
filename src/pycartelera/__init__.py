"""pycartelera - Async Python client for a movie catalog API with a local overlay."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pycartelera")
except PackageNotFoundError:
    __version__ = "0+local"
from pycartelera.admin import OverlayAdmin
from pycartelera.client import CarteleraClient
from pycartelera.config import CarteleraConfig
from pycartelera.exceptions import (
    BlockedWriteError,
    CarteleraConfigError,
    CarteleraError,
    CarteleraHttpError,
    CarteleraNotFoundError,
    CarteleraRequestError,
    CarteleraResponseError,
    CarteleraTransportError,
    CarteleraValidationError,
)
from pycartelera.fallback import FallbackRouter
from pycartelera.identity import normalize_id
from pycartelera.models import Movie, WriteOutcome, WriteResult
from pycartelera.overlay.backend import JsonFileBackend, MemoryBackend, StorageBackend
from pycartelera.overlay.reconcile import ListFilter, compose_detail, compose_list
from pycartelera.overlay.store import OverlayStore

__all__ = [
    "__version__",
    "BlockedWriteError",
    "CarteleraClient",
    "CarteleraConfig",
    "CarteleraConfigError",
    "CarteleraError",
    "CarteleraHttpError",
    "CarteleraNotFoundError",
    "CarteleraRequestError",
    "CarteleraResponseError",
    "CarteleraTransportError",
    "CarteleraValidationError",
    "FallbackRouter",
    "JsonFileBackend",
    "ListFilter",
    "MemoryBackend",
    "Movie",
    "OverlayAdmin",
    "OverlayStore",
    "StorageBackend",
    "WriteOutcome",
    "WriteResult",
    "compose_detail",
    "compose_list",
    "normalize_id",
]
