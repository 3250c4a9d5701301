import asyncio
from pathlib import Path

import pytest

from app.models.career import Career, GameCareer, GameCareerMetadata
from app.pipelines.classifier import get_salary_tier, parse_education_level
from app.pipelines.runner import run_career_pipeline
from app.services.artifact_storage import ArtifactStorage
from app.services.data_loader import CareerDataService

ROOT = Path(__file__).resolve().parent.parent
SOURCE_DIR = ROOT / "data" / "source"
SAMPLE_XML = SOURCE_DIR / "bls-ooh-sample.xml"
WAGE_TABLE = SOURCE_DIR / "oes_wages.csv"
OUTLOOK_TABLE = SOURCE_DIR / "ep_outlook.csv"
SKILLS_TABLE = SOURCE_DIR / "onet_skills.json"


def make_career(**overrides) -> Career:
    """An enriched career that passes every publish check unless overridden."""
    data = {
        "id": 1,
        "soc": "29-1141",
        "title": "Registered Nurses",
        "title_short": "Registered Nurse",
        "description": "Registered nurses provide and coordinate patient care in hospitals.",
        "salary": 81220,
        "education": "Bachelor's degree",
        "demand": "High – 6% (2024–34)",
        "growth_rate": 6,
        "growth_category": "High",
        "work_environment": "Hospitals and clinics",
        "skills": ["Patient care", "Communication", "Critical thinking"],
        "skills_source": "onet",
        "source": "BLS OOH 29-1141",
    }
    data.update(overrides)
    return Career(**data)


def make_game_career(
    id: int,
    salary: int,
    soc: str = None,
    cluster: str = "other",
    education: str = "Bachelor's degree",
    growth_rate=3,
    title: str = None,
) -> GameCareer:
    return GameCareer(
        id=id,
        soc=soc or f"11-{1000 + id:04d}",
        title=title or f"Career {id}",
        title_short=title or f"Career {id}",
        description=f"Description of career number {id}.",
        salary=salary,
        education=education,
        growth_rate=growth_rate,
        metadata=GameCareerMetadata(
            salary_tier=get_salary_tier(salary),
            cluster=cluster,
            education_level=parse_education_level(education),
            search_text=(title or f"career {id}").lower(),
        ),
    )


class StaticDataService(CareerDataService):
    """Data service preloaded with in-memory careers and no index."""

    def __init__(self, careers):
        super().__init__()
        self._careers = tuple(careers)
        self._by_id = {c.id: c for c in careers}
        self._metadata = {}


@pytest.fixture
def sample_pool():
    return [
        make_game_career(1, 30000, cluster="service", education="No formal educational credential", growth_rate=-10,
                         title="Cashiers"),
        make_game_career(2, 56520, cluster="service", education="High school diploma or equivalent", growth_rate=15,
                         title="Chefs and Head Cooks"),
        make_game_career(3, 81220, cluster="healthcare", growth_rate=6, title="Registered Nurses"),
        make_game_career(4, 95000, cluster="healthcare", education="Master's degree", growth_rate=40,
                         title="Nurse Practitioners"),
        make_game_career(5, 124200, cluster="technology", growth_rate=25, title="Software Developers"),
        make_game_career(6, 135740, cluster="legal", education="Doctoral or professional degree", growth_rate=None,
                         title="Lawyers"),
    ]


@pytest.fixture
def built_dataset(tmp_path):
    """Run the full pipeline on the sample handbook into tmp_path."""
    storage = ArtifactStorage(tmp_path)
    state = run_career_pipeline(
        handbook_path=str(SAMPLE_XML),
        wage_table_path=str(WAGE_TABLE),
        outlook_table_path=str(OUTLOOK_TABLE),
        skills_table_path=str(SKILLS_TABLE),
        storage=storage,
    )
    return storage, state


@pytest.fixture
def loaded_service(built_dataset):
    storage, _ = built_dataset
    service = CareerDataService(storage=storage)
    asyncio.run(service.load())
    return service
