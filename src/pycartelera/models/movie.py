"""Movie view model.

Catalog records have no fixed schema. :class:`Movie` resolves the handful
of fields callers care about from their known aliases once, at the
boundary, and keeps the untouched record in ``raw``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from pycartelera.identity import ID_FIELDS

TITLE_FIELDS: tuple[str, ...] = ("Title", "title", "Nombre")
UBICATION_FIELDS: tuple[str, ...] = ("Ubication", "ubication", "ubicacion")
DESCRIPTION_FIELDS: tuple[str, ...] = ("description", "Descripcion", "Descripción", "sinopsis")
POSTER_FIELDS: tuple[str, ...] = ("Poster", "poster", "image", "posterUrl", "img")


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(_as_text(item) for item in value)
    return str(value).strip()


class Movie(BaseModel):
    """Typed view of a catalog record."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    imdb_id: str = Field(default="", validation_alias=AliasChoices(*ID_FIELDS, "imdb_id"))
    title: str = Field(default="", validation_alias=AliasChoices(*TITLE_FIELDS))
    year: str = Field(default="", validation_alias=AliasChoices("Year", "year"))
    type: str = Field(default="", validation_alias=AliasChoices("Type", "type"))
    ubication: str = Field(default="", validation_alias=AliasChoices(*UBICATION_FIELDS))
    description: str = Field(default="", validation_alias=AliasChoices(*DESCRIPTION_FIELDS))
    poster: str = Field(default="", validation_alias=AliasChoices(*POSTER_FIELDS))
    raw: dict[str, Any] = Field(default_factory=dict)
    """Original record, unchanged."""

    @model_validator(mode="before")
    @classmethod
    def _drop_blank_values(cls, values: Any) -> Any:
        """Drop ``None``/blank values so the next alias in line is used, and stash the record."""
        if not isinstance(values, Mapping):
            return values
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            cleaned[key] = value
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned

    @field_validator("imdb_id", "title", "year", "type", "ubication", "description", "poster", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _as_text(value)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Movie:
        return cls.model_validate(dict(record))

    @property
    def poster_url(self) -> str | None:
        """The poster, when it is an absolute http(s) URL."""
        if self.poster.startswith(("http://", "https://")):
            return self.poster
        return None

    def to_form(self) -> dict[str, str]:
        """Canonical edit-form fields, keyed the way the catalog API names them."""
        return {
            "imdbID": self.imdb_id,
            "Title": self.title,
            "Year": self.year,
            "Type": self.type,
            "Ubication": self.ubication,
            "Poster": self.poster_url or "",
            "description": self.description,
        }
