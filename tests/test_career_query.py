import random

import pytest
from pydantic import ValidationError

from app.models.matchup import CareerFilter
from app.services.career_query import (
    CareerQueryService,
    bottom_careers,
    filter_careers,
    get_by_salary_range,
    random_careers,
    search_careers,
    similar_careers,
    sort_careers,
    top_careers,
)

from conftest import StaticDataService, make_game_career


def ids(careers):
    return [c.id for c in careers]


# ---------------------------------------------------------------------------
# Filter
# ---------------------------------------------------------------------------

def test_filter_is_a_conjunction(sample_pool):
    result = filter_careers(sample_pool, {"cluster": "healthcare", "salary_min": 50000, "salary_max": 100000})
    assert ids(result) == [3, 4]

    result = filter_careers(sample_pool, CareerFilter(cluster="healthcare", salary_max=90000))
    assert ids(result) == [3]


def test_filter_salary_bounds_are_inclusive(sample_pool):
    assert ids(filter_careers(sample_pool, {"salary_min": 56520, "salary_max": 81220})) == [2, 3]


def test_filter_without_criteria_returns_everything(sample_pool):
    assert ids(filter_careers(sample_pool)) == [1, 2, 3, 4, 5, 6]
    assert ids(filter_careers(sample_pool, {})) == [1, 2, 3, 4, 5, 6]


def test_filter_growth_excludes_unknown_growth(sample_pool):
    assert ids(filter_careers(sample_pool, {"growth_min": -100})) == [1, 2, 3, 4, 5]
    assert ids(filter_careers(sample_pool, {"minGrowth": 10})) == [2, 4, 5]


def test_filter_education_tier_and_level(sample_pool):
    assert ids(filter_careers(sample_pool, {"education": "MASTER"})) == [4]
    assert ids(filter_careers(sample_pool, {"tier": "high"})) == [5, 6]
    assert ids(filter_careers(sample_pool, {"education_level": 1})) == [1, 2]


def test_filter_no_match_is_empty(sample_pool):
    assert filter_careers(sample_pool, {"cluster": "agriculture"}) == []


def test_filter_rejects_inverted_salary_range():
    with pytest.raises(ValidationError):
        CareerFilter(salary_min=100000, salary_max=50000)


@pytest.mark.parametrize("criteria", [
    {"growth_min": 150},
    {"education_level": 7},
    {"tier": "legendary"},
    {"salary_min": -1},
    {"unknown": "field"},
])
def test_filter_rejects_invalid_criteria(criteria):
    with pytest.raises(ValidationError):
        CareerFilter.model_validate(criteria)


# ---------------------------------------------------------------------------
# Search and sort
# ---------------------------------------------------------------------------

def test_search_is_case_insensitive_substring(sample_pool):
    assert ids(search_careers(sample_pool, "NURSE")) == [3, 4]
    assert ids(search_careers(sample_pool, "doctoral")) == [6]


def test_search_case_sensitive(sample_pool):
    assert ids(search_careers(sample_pool, "Nurse", fields=["title"], case_sensitive=True)) == [3, 4]
    assert search_careers(sample_pool, "NURSE", fields=["title"], case_sensitive=True) == []


def test_search_respects_limit_and_blank_query(sample_pool):
    assert len(search_careers(sample_pool, "career", limit=2)) == 2
    assert search_careers(sample_pool, "") == []
    assert search_careers(sample_pool, "   ") == []


def test_search_limit_zero_returns_nothing(sample_pool):
    assert search_careers(sample_pool, "a", limit=0) == []
    assert ids(search_careers(sample_pool, "a", limit=1)) == [1]


def test_sort_puts_missing_values_last(sample_pool):
    asc = sort_careers(sample_pool, "growth_rate", "asc")
    desc = sort_careers(sample_pool, "growth_rate", "desc")

    assert ids(asc) == [1, 3, 2, 5, 4, 6]
    assert ids(desc) == [4, 5, 2, 3, 1, 6]


def test_sort_by_dotted_field_is_stable(sample_pool):
    result = sort_careers(sample_pool, "metadata.cluster")
    assert ids(result) == [3, 4, 6, 1, 2, 5]


def test_sort_rejects_bad_order(sample_pool):
    with pytest.raises(ValueError):
        sort_careers(sample_pool, "salary", "sideways")


def test_sort_rejects_unorderable_field(sample_pool):
    with pytest.raises(ValueError):
        sort_careers(sample_pool, "metadata")


def test_sort_strings_ignore_case():
    pool = [
        make_game_career(1, 40000, title="bakers"),
        make_game_career(2, 50000, title="Chefs"),
        make_game_career(3, 60000, title="Actors"),
    ]
    assert ids(sort_careers(pool, "title")) == [3, 1, 2]
    assert ids(sort_careers(pool, "title", "desc")) == [2, 1, 3]


def test_top_and_bottom(sample_pool):
    assert ids(top_careers(sample_pool, 2)) == [6, 5]
    assert ids(bottom_careers(sample_pool, 2)) == [1, 2]
    assert ids(top_careers(sample_pool, 5, criteria={"cluster": "healthcare"})) == [4, 3]


def test_salary_range(sample_pool):
    assert ids(get_by_salary_range(sample_pool, 80000, 130000)) == [3, 4, 5]


def test_random_careers_are_distinct_and_seeded(sample_pool):
    first = random_careers(sample_pool, 3, rng=random.Random(7))
    second = random_careers(sample_pool, 3, rng=random.Random(7))

    assert ids(first) == ids(second)
    assert len(set(ids(first))) == 3
    assert len(random_careers(sample_pool, 50)) == 6


# ---------------------------------------------------------------------------
# Similarity
# ---------------------------------------------------------------------------

def test_similar_excludes_self_and_ranks_by_score(sample_pool):
    nurse = sample_pool[2]
    result = similar_careers(sample_pool, nurse, 3)

    assert nurse.id not in ids(result)
    # Nurse practitioner: same cluster (10) + same tier (5) + <20k apart (3)
    assert result[0].id == 4


def test_similar_ties_keep_dataset_order():
    pool = [make_game_career(i, 50000 + i * 100, cluster="trades") for i in range(1, 6)]
    assert ids(similar_careers(pool, pool[0], 4)) == [2, 3, 4, 5]


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

def test_query_service_includes_custom_careers(sample_pool):
    data = StaticDataService(sample_pool)
    data.add_custom_careers([make_game_career(100, 88000, cluster="healthcare", title="School Nurse")])
    query = CareerQueryService(data, rng=random.Random(1))

    assert ids(query.by_cluster("healthcare")) == [3, 4, 100]
    assert 100 in ids(query.search("school nurse"))
    assert ids(query.similar(999)) == []
    assert ids(query.top(1)) == [6]
