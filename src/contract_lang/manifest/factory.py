"""Load compiled manifests from JSON documents."""

from pathlib import Path

from contract_lang.manifest.contract import Manifest
from contract_lang.manifest.data import ManifestData


def load(file_path: Path) -> ManifestData:
    """Validate a compiled manifest JSON file into ManifestData."""
    text = file_path.read_text(encoding="utf-8")
    return ManifestData.model_validate_json(text)


def draft(file_path: Path) -> Manifest:
    """Load a compiled manifest JSON file and build its Manifest."""
    return Manifest(load(file_path))


def dump(data: ManifestData) -> dict:
    """Plain-data form of a manifest, as written by `compile`."""
    return data.model_dump(mode="json", by_alias=True)
