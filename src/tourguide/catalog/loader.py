"""
Attraction catalog loader.

The catalog is loaded once at startup, either from a JSON file (`catalog.path`),
from the packaged `attractions.json`, or from the GPS provider. It is validated
into typed Pydantic models and then shared read-only by every user and worker.
"""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Iterator, Sequence

from pydantic import TypeAdapter

from tourguide.core.env import resolve_project_path
from tourguide.domain.models import Attraction
from tourguide.providers.base import GpsProvider

logger = logging.getLogger(__name__)

_ATTRACTIONS_ADAPTER = TypeAdapter(list[Attraction])


def load_attractions(path: str | Path) -> list[Attraction]:
    """Load and validate an attraction catalog JSON file."""
    resolved = resolve_project_path(path)
    payload = json.loads(resolved.read_text(encoding="utf-8"))
    return _ATTRACTIONS_ADAPTER.validate_python(payload)


def load_packaged_attractions() -> list[Attraction]:
    """Load the catalog bundled with the package."""
    text = resources.files("tourguide.catalog").joinpath("attractions.json").read_text(encoding="utf-8")
    return _ATTRACTIONS_ADAPTER.validate_python(json.loads(text))


class AttractionCatalog:
    """Immutable, ordered view over the attraction catalog."""

    def __init__(self, attractions: Sequence[Attraction]):
        self._attractions = tuple(attractions)

    @classmethod
    def from_provider(cls, gps: GpsProvider) -> "AttractionCatalog":
        attractions = gps.get_attractions()
        logger.info("Loaded %s attractions from the GPS provider", len(attractions))
        return cls(attractions)

    @classmethod
    def from_file(cls, path: str | Path) -> "AttractionCatalog":
        attractions = load_attractions(path)
        logger.info("Loaded %s attractions from %s", len(attractions), path)
        return cls(attractions)

    @property
    def attractions(self) -> tuple[Attraction, ...]:
        return self._attractions

    def __iter__(self) -> Iterator[Attraction]:
        return iter(self._attractions)

    def __len__(self) -> int:
        return len(self._attractions)
