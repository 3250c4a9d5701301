import asyncio

import pytest

from app.exceptions import DataNotLoadedError, MissingInputError
from app.services.artifact_storage import ArtifactStorage
from app.services.data_loader import CareerDataService

from conftest import make_game_career


def test_reads_before_load_raise(tmp_path):
    service = CareerDataService(storage=ArtifactStorage(tmp_path))
    assert service.is_loaded is False
    with pytest.raises(DataNotLoadedError):
        service.get_careers()


def test_load_reads_game_dataset(loaded_service):
    careers = loaded_service.get_careers()

    assert loaded_service.is_loaded
    assert len(careers) == 10
    assert careers[0].title == "Registered Nurses"
    assert loaded_service.get_by_id(2).title == "Software Developers"
    assert loaded_service.get_by_id(999) is None


def test_concurrent_loads_share_one_read(built_dataset):
    storage, _ = built_dataset
    service = CareerDataService(storage=storage)

    async def load_many():
        return await asyncio.gather(*(service.load() for _ in range(5)))

    results = asyncio.run(load_many())

    assert service.load_count == 1
    assert all(r is results[0] for r in results)


def test_loaded_data_is_cached(loaded_service):
    asyncio.run(loaded_service.load())
    assert loaded_service.load_count == 1


def test_failed_load_can_be_retried(tmp_path, built_dataset):
    storage, _ = built_dataset
    service = CareerDataService(storage=ArtifactStorage(tmp_path / "empty"))

    with pytest.raises(MissingInputError):
        asyncio.run(service.load())
    assert service.is_loaded is False

    service.storage = storage
    asyncio.run(service.load())
    assert service.is_loaded
    assert service.load_count == 1


def test_reload_reads_again(loaded_service):
    asyncio.run(loaded_service.reload())
    assert loaded_service.load_count == 2
    assert len(loaded_service.get_careers()) == 10


def test_index_lookups(loaded_service):
    metadata = loaded_service.get_metadata()

    healthcare = loaded_service.get_by_cluster("healthcare")
    assert [c.id for c in healthcare] == metadata["clusters"]["healthcare"]["careers"]
    assert all(c.metadata.cluster == "healthcare" for c in healthcare)

    assert all(c.salary >= 100000 for c in loaded_service.get_by_tier("high"))
    assert loaded_service.get_by_cluster("nonexistent") == []

    bachelor = loaded_service.get_by_education("bachelor")
    assert bachelor == loaded_service.get_by_education(4)
    assert "Software Developers" in [c.title for c in bachelor]


def test_get_by_ids_keeps_dataset_order(loaded_service):
    assert [c.id for c in loaded_service.get_by_ids([5, 1, 3, 42])] == [1, 3, 5]


def test_get_by_soc_returns_duplicates(loaded_service):
    assert len(loaded_service.get_by_soc("29-1141")) == 2


def test_metadata_copy_is_independent(loaded_service):
    loaded_service.get_metadata()["clusters"].clear()
    assert loaded_service.get_metadata()["clusters"]


def test_custom_careers_are_unioned_not_merged(loaded_service):
    added = loaded_service.add_custom_careers([
        {"id": 500, "soc": "29-2061", "title": "Licensed Practical Nurses",
         "description": "Provide basic medical care to each patient.", "salary": 59730,
         "education": "Postsecondary nondegree award"},
        make_game_career(1, 40000, title="Clashing id"),
    ])

    assert [c.id for c in added] == [500]
    assert added[0].metadata.cluster == "healthcare"
    assert added[0].metadata.education_level == 2
    assert len(loaded_service.get_careers()) == 11
    assert len(loaded_service.get_careers(include_custom=False)) == 10
    assert loaded_service.get_by_id(500).title == "Licensed Practical Nurses"

    loaded_service.clear_custom_careers()
    assert len(loaded_service.get_careers()) == 10


def test_index_lookups_include_custom_careers(loaded_service):
    canonical = [c.id for c in loaded_service.get_by_cluster("healthcare")]
    custom = loaded_service.add_custom_careers([
        {"id": 501, "soc": "29-2061", "title": "Licensed Practical Nurses",
         "description": "Provide basic medical care to each patient.", "salary": 59730,
         "education": "Postsecondary nondegree award"},
    ])[0]

    assert [c.id for c in loaded_service.get_by_cluster("healthcare")] == canonical + [501]
    assert 501 in [c.id for c in loaded_service.get_by_tier(custom.metadata.salary_tier)]
    assert 501 in [c.id for c in loaded_service.get_by_education(custom.metadata.education_level)]
    assert 501 not in [c.id for c in loaded_service.get_by_cluster("technology")]

    loaded_service.clear_custom_careers()
    assert [c.id for c in loaded_service.get_by_cluster("healthcare")] == canonical
