"""Extractor interfaces and DTOs for structure extraction."""

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, TypeVar

from dse.source import SourceText

EntityT = TypeVar("EntityT")


@dataclass(frozen=True)
class ExtractionError:
    """Represent a file that could not be scanned."""

    file_path: str
    message: str


class Extractor(Protocol[EntityT]):
    """Structure extractor contract shared by all entity kinds."""

    def extract(self, file_path: Path) -> list[EntityT]:
        """Read a file and return its entities; empty if it cannot be read."""

    def extract_source(self, source: SourceText) -> list[EntityT]:
        """Return the entities of already loaded source text."""
