"""
Artifact Storage Service
app/services/artifact_storage.py

Reads and writes the JSON artifacts produced by the career build.
Storage structure (defaults, see app/config.py):
    build/
        01_extracted.json          - Careers straight from the handbook
        02_enriched.json           - Careers after lookups and fallbacks
        careers_merged.json        - Debug copy of the full dataset
    data/processed/
        validation-report.json     - Advisory validation report
        careers-full.json          - Full classified dataset
    data/game/
        careers-game.json          - Game view
        metadata.json              - Cluster/tier/education/growth index
    public/
        careers.min.json           - Public view (only after the publish check)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel

from app.exceptions import MissingInputError

ModelT = TypeVar("ModelT", bound=BaseModel)


class ArtifactStorage:
    """Service for storing and retrieving pipeline artifacts on the local filesystem."""

    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = Path(base_dir) if base_dir else Path(".")

    def resolve(self, path: str) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.base_dir / path

    def save_models(self, path: str, models: Iterable[BaseModel], by_alias: bool = True) -> str:
        """Save a list of models as a JSON array. Returns the written path."""
        data = [m.model_dump(mode="json", by_alias=by_alias) for m in models]
        return self.save_json(path, data)

    def load_models(self, path: str, model: Type[ModelT]) -> List[ModelT]:
        """Load a JSON array into models; a missing file is a MissingInputError."""
        data = self.load_json(path)
        if not isinstance(data, list):
            raise ValueError(f"Expected a JSON array in {self.resolve(path)}")
        return [model.model_validate(item) for item in data]

    def save_json(self, path: str, data: Any) -> str:
        """Save data to a JSON file, creating parent directories."""
        target = self.resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        self._save_json(target, data)
        return str(target)

    def load_json(self, path: str) -> Any:
        target = self.resolve(path)
        if not target.exists():
            raise MissingInputError(str(target), "run the previous pipeline step first")
        return self._load_json(target)

    def _save_json(self, path: Path, data: Any) -> None:
        """Save data to a JSON file."""
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, default=str, ensure_ascii=False)

    def _load_json(self, path: Path) -> Any:
        """Load data from a JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
