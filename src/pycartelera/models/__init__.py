"""Data models for catalog records and write results."""

from pycartelera.models.movie import Movie
from pycartelera.models.results import WriteOutcome, WriteResult

__all__ = [
    "Movie",
    "WriteOutcome",
    "WriteResult",
]
