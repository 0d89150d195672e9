"""Shared parser types.

Every front end returns a ParseResult holding the ManifestData it
compiled plus any non-fatal diagnostics.
"""

import json
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, TypeAdapter, ValidationError

from contract_lang.errors import ArchetypeError
from contract_lang.manifest.data import ManifestData

ARCHETYPES_FILE = "archetypes.json"

_archetypes_adapter = TypeAdapter(list[dict[str, Any]])


class Diagnostic(BaseModel):
    """A non-fatal problem found while extracting contract data."""

    source: str
    message: str

    def __str__(self) -> str:
        return f"{self.source}: {self.message}"


class ParseResult(BaseModel):
    data: ManifestData
    warnings: list[Diagnostic] = []
    pages: dict[str, str] = {}  # rendered HTML per document, markup front end only


class Parser(Protocol):
    def parse(self) -> ParseResult: ...


def load_archetypes(root: Path) -> list[dict[str, Any]]:
    """Load the optional archetypes sidecar in root; absence is not an error."""
    path = root / ARCHETYPES_FILE
    if not path.is_file():
        return []

    try:
        return _archetypes_adapter.validate_python(json.loads(path.read_text(encoding="utf-8")))
    except json.JSONDecodeError as e:
        raise ArchetypeError(str(path), f"not valid JSON ({e})") from e
    except ValidationError as e:
        raise ArchetypeError(str(path), f"unexpected structure ({e.error_count()} errors)") from e
