"""Client configuration for pycartelera."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from pycartelera._constants import BASE_URL, ID_PARAM, USER_AGENT
from pycartelera.exceptions import CarteleraConfigError
from pycartelera.overlay.backend import JsonFileBackend, MemoryBackend, StorageBackend


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class CarteleraConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Catalog endpoint. All operations hit this single URL and differ by
        HTTP method and query parameters.
    storage_dir : str or None
        Directory holding the overlay tables. ``None`` keeps the overlay in
        memory for the lifetime of the process.
    id_param : str
        Query parameter name used for the record id on get/update/delete.
    user_agent : str
        User-Agent header sent with every request.
    refilter_remote : bool
        Also apply the title/ubication filter to remote records when
        composing a list. Off by default: the remote is trusted to have
        filtered its own records.
    """

    base_url: str = BASE_URL
    storage_dir: str | None = None
    id_param: str = ID_PARAM
    user_agent: str = USER_AGENT
    refilter_remote: bool = False

    def __post_init__(self) -> None:
        if not self.base_url.startswith(("http://", "https://")):
            raise CarteleraConfigError(f"base_url must be an http(s) URL, got {self.base_url!r}")
        if not self.id_param.strip():
            raise CarteleraConfigError("id_param must be non-empty")

    def storage_backend(self) -> StorageBackend:
        """Build the persistence backend this configuration describes."""
        if self.storage_dir is None:
            return MemoryBackend()
        return JsonFileBackend(Path(self.storage_dir).expanduser())

    @classmethod
    def from_env(cls, **overrides: Any) -> CarteleraConfig:
        """Create configuration from ``CARTELERA_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "CARTELERA_BASE_URL": "base_url",
            "CARTELERA_STORAGE_DIR": "storage_dir",
            "CARTELERA_ID_PARAM": "id_param",
            "CARTELERA_USER_AGENT": "user_agent",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        if "refilter_remote" not in overrides:
            config_kwargs["refilter_remote"] = _env_bool(env.get("CARTELERA_REFILTER_REMOTE"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
