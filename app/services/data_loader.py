"""
Career Data Service
app/services/data_loader.py

Loads the game dataset (data/game/careers-game.json) and its index
(data/game/metadata.json) once and serves read-only views of it.

Concurrent callers of load() share one in-flight read. A failed read is
forgotten so the next call tries again. Custom careers supplied by a
player are kept apart from the canonical set and only joined on read.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from app.config import settings
from app.exceptions import DataNotLoadedError
from app.models.career import GameCareer, GameCareerMetadata
from app.pipelines.classifier import (
    build_search_text,
    detect_cluster,
    get_education_metadata,
    get_salary_tier,
    parse_education_level,
)
from app.services.artifact_storage import ArtifactStorage

logger = logging.getLogger(__name__)


class CareerDataService:
    """Service holding the loaded career set for the query layer and matchup generator."""

    def __init__(
        self,
        careers_path: Optional[str] = None,
        metadata_path: Optional[str] = None,
        storage: Optional[ArtifactStorage] = None,
    ):
        self.careers_path = careers_path or settings.GAME_DATASET_PATH
        self.metadata_path = metadata_path or settings.GAME_METADATA_PATH
        self.storage = storage or ArtifactStorage()

        self._careers: Optional[Tuple[GameCareer, ...]] = None
        self._metadata: Dict[str, Any] = {}
        self._by_id: Dict[int, GameCareer] = {}
        self._custom: List[GameCareer] = []

        self._lock = asyncio.Lock()
        self._pending: Optional[asyncio.Task] = None
        self.load_count = 0

    @property
    def is_loaded(self) -> bool:
        return self._careers is not None

    async def load(self) -> Tuple[GameCareer, ...]:
        """Load the dataset once; concurrent callers await the same read."""
        if self._careers is not None:
            return self._careers

        async with self._lock:
            if self._careers is not None:
                return self._careers
            if self._pending is None:
                self._pending = asyncio.create_task(self._perform_load())
            task = self._pending

        try:
            return await task
        except Exception:
            async with self._lock:
                if self._pending is task:
                    self._pending = None
            raise

    async def _perform_load(self) -> Tuple[GameCareer, ...]:
        raw_careers = await asyncio.to_thread(self.storage.load_json, self.careers_path)
        metadata = await asyncio.to_thread(self.storage.load_json, self.metadata_path)

        careers = tuple(GameCareer.model_validate(item) for item in raw_careers)
        self._metadata = metadata or {}
        self._by_id = {c.id: c for c in careers}
        self._careers = careers
        self.load_count += 1

        logger.info(f"✅ Loaded {len(careers)} careers with metadata")
        return careers

    async def reload(self) -> Tuple[GameCareer, ...]:
        async with self._lock:
            self._careers = None
            self._metadata = {}
            self._by_id = {}
            self._pending = None
        return await self.load()

    def _require_loaded(self) -> Tuple[GameCareer, ...]:
        if self._careers is None:
            raise DataNotLoadedError("Data not loaded. Call load() first.")
        return self._careers

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_careers(self, include_custom: bool = True) -> List[GameCareer]:
        careers = list(self._require_loaded())
        if include_custom:
            careers.extend(self._custom)
        return careers

    def get_metadata(self) -> Dict[str, Any]:
        self._require_loaded()
        return copy.deepcopy(self._metadata)

    def get_by_id(self, career_id: int) -> Optional[GameCareer]:
        self._require_loaded()
        career = self._by_id.get(career_id)
        if career is None:
            career = next((c for c in self._custom if c.id == career_id), None)
        return career

    def get_by_ids(self, ids: Iterable[int]) -> List[GameCareer]:
        """Careers for the given ids, in dataset order. Unknown ids are ignored."""
        wanted = set(ids)
        return [c for c in self.get_careers() if c.id in wanted]

    def get_by_soc(self, soc: str) -> List[GameCareer]:
        return [c for c in self.get_careers() if c.soc == soc]

    def get_by_cluster(self, cluster: str) -> List[GameCareer]:
        return self._from_index("clusters", cluster, lambda m: m.cluster == cluster)

    def get_by_tier(self, tier: str) -> List[GameCareer]:
        return self._from_index("salary_tiers", tier, lambda m: m.salary_tier == tier)

    def get_by_education(self, education: Union[int, str]) -> List[GameCareer]:
        """Accepts a level number (0-6) or its name ("bachelor")."""
        key = get_education_metadata(education)["name"] if isinstance(education, int) else education
        return self._from_index(
            "education_levels", key,
            lambda m: get_education_metadata(m.education_level)["name"] == key,
        )

    def _from_index(
        self, grouping: str, key: str, custom_match: Callable[[GameCareerMetadata], bool]
    ) -> List[GameCareer]:
        """Canonical careers listed in the build index, then matching custom careers."""
        self._require_loaded()
        group = self._metadata.get(grouping, {}).get(key) or {}
        wanted = set(group.get("careers", []))
        canonical = [c for c in self._careers if c.id in wanted]
        return canonical + [c for c in self._custom if c.metadata is not None and custom_match(c.metadata)]

    # ------------------------------------------------------------------
    # Custom careers
    # ------------------------------------------------------------------

    def add_custom_careers(self, records: Sequence[Union[GameCareer, Dict[str, Any]]]) -> List[GameCareer]:
        """
        Join player-supplied careers to every read without touching the canonical set.
        Records whose id is already taken are skipped.
        """
        self._require_loaded()
        added = []
        taken = set(self._by_id) | {c.id for c in self._custom}

        for record in records:
            career = record if isinstance(record, GameCareer) else GameCareer.model_validate(record)
            if career.id in taken:
                logger.warning(f"⚠️ Skipping custom career {career.id} ({career.title}): id already in use")
                continue
            if career.metadata is None:
                career = career.model_copy(update={"metadata": derive_game_metadata(career)})
            self._custom.append(career)
            taken.add(career.id)
            added.append(career)
        return added

    def get_custom_careers(self) -> List[GameCareer]:
        return list(self._custom)

    def clear_custom_careers(self) -> None:
        self._custom = []


def derive_game_metadata(career: GameCareer) -> GameCareerMetadata:
    return GameCareerMetadata(
        salary_tier=get_salary_tier(career.salary),
        cluster=detect_cluster(career.title, career.description),
        education_level=parse_education_level(career.education),
        search_text=build_search_text(career),
    )
