import random

import pytest

from app.exceptions import InsufficientPoolError, MatchupUnsatisfiableError
from app.models.matchup import CareerFilter, MatchupRules
from app.services.career_query import CareerQueryService
from app.services.matchup_generator import (
    FILTER_PRESETS,
    MatchupGenerator,
    get_filter_preset,
    get_recommended_config,
    validate_config,
)

from conftest import StaticDataService, make_game_career


def make_generator(careers, rules=None, seed=42):
    query = CareerQueryService(StaticDataService(careers), rng=random.Random(seed))
    return MatchupGenerator(query, rules=rules)


@pytest.fixture
def wide_pool():
    salaries = [28000, 34000, 41000, 47000, 52000, 58000, 63000, 71000, 79000, 88000, 97000, 115000]
    return [make_game_career(i + 1, s) for i, s in enumerate(salaries)]


# ---------------------------------------------------------------------------
# Balance
# ---------------------------------------------------------------------------

def test_default_rules():
    rules = MatchupRules()
    assert rules.min_salary_diff == 5000
    assert rules.max_salary_ratio == 3.0
    assert rules.avoid_same_subfield is True
    assert rules.max_attempts == 100


def test_is_balanced_rules():
    generator = make_generator([])
    a = make_game_career(1, 50000, soc="11-1011")

    assert generator.is_balanced(a, make_game_career(2, 60000, soc="11-2021"))
    # Gap too small
    assert not generator.is_balanced(a, make_game_career(2, 53000, soc="11-2021"))
    # Ratio too large
    assert not generator.is_balanced(a, make_game_career(2, 160000, soc="11-2021"))
    # Same SOC
    assert not generator.is_balanced(a, make_game_career(2, 60000, soc="11-1011"))
    # Same career
    assert not generator.is_balanced(a, a)
    # Zero salary never balances
    assert not generator.is_balanced(make_game_career(3, 0), a)


def test_same_soc_allowed_when_rule_disabled():
    generator = make_generator([], rules=MatchupRules(avoid_same_subfield=False))
    a = make_game_career(1, 50000, soc="11-1011")
    assert generator.is_balanced(a, make_game_career(2, 60000, soc="11-1011"))


def test_generated_matchups_are_balanced(wide_pool):
    generator = make_generator(wide_pool)
    for _ in range(25):
        m = generator.generate()
        assert m.salary_diff >= 5000
        high, low = max(m.career_a.salary, m.career_b.salary), min(m.career_a.salary, m.career_b.salary)
        assert high / low <= 3
        assert m.career_a.soc != m.career_b.soc
        assert 1 <= m.attempts <= 100


def test_pool_of_two_returns_that_pair_first_try():
    pool = [make_game_career(1, 40000, soc="11-1011"), make_game_career(2, 45000, soc="13-2011")]
    m = make_generator(pool).generate()

    assert {m.career_a.id, m.career_b.id} == {1, 2}
    assert m.attempts == 1
    assert m.higher_paid.id == 2


def test_pool_of_one_raises_before_drawing():
    class ExplodingRandom(random.Random):
        def sample(self, *args, **kwargs):
            raise AssertionError("should not draw")

    query = CareerQueryService(StaticDataService([make_game_career(1, 40000)]), rng=ExplodingRandom())
    with pytest.raises(InsufficientPoolError) as exc_info:
        MatchupGenerator(query).generate()
    assert exc_info.value.pool_size == 1


def test_unbalanceable_pool_exhausts_attempts():
    pool = [make_game_career(1, 40000), make_game_career(2, 41000)]
    generator = make_generator(pool, rules=MatchupRules(max_attempts=7))

    with pytest.raises(MatchupUnsatisfiableError) as exc_info:
        generator.generate()
    assert exc_info.value.attempts == 7


def test_criteria_narrow_the_pool(sample_pool):
    generator = make_generator(sample_pool)

    m = generator.generate_from_cluster("healthcare")
    assert {m.career_a.id, m.career_b.id} == {3, 4}

    m = generator.generate_high_growth(20)
    assert {m.career_a.id, m.career_b.id} == {4, 5}

    with pytest.raises(InsufficientPoolError):
        generator.generate_from_cluster("agriculture")


def test_generate_from_tier_and_range(sample_pool):
    generator = make_generator(sample_pool)

    m = generator.generate_from_tier("high")
    assert {m.career_a.id, m.career_b.id} == {5, 6}

    m = generator.generate_from_salary_range(80000, 130000)
    assert {m.career_a.id, m.career_b.id} <= {3, 4, 5}

    m = generator.generate_by_education("bachelor")
    assert {m.career_a.id, m.career_b.id} == {3, 5}


# ---------------------------------------------------------------------------
# Batches
# ---------------------------------------------------------------------------

def test_generate_multiple_never_reuses_a_career(wide_pool):
    matchups = make_generator(wide_pool).generate_multiple(4)

    used = [c.id for m in matchups for c in (m.career_a, m.career_b)]
    assert len(matchups) == 4
    assert len(used) == len(set(used))


def test_generate_multiple_returns_fewer_when_pool_runs_dry(wide_pool):
    matchups = make_generator(wide_pool).generate_multiple(20)
    assert 1 <= len(matchups) <= 6


def test_generate_multiple_small_pool_raises():
    with pytest.raises(InsufficientPoolError):
        make_generator([make_game_career(1, 40000)]).generate_multiple(3)


# ---------------------------------------------------------------------------
# Config helpers
# ---------------------------------------------------------------------------

def test_validate_config():
    assert validate_config({}) == {"valid": True, "errors": []}
    assert validate_config({"salaryMin": 90000, "salaryMax": 50000})["errors"] == [
        "salaryMin cannot be greater than salaryMax"
    ]
    assert validate_config({"minGrowth": 120})["valid"] is False
    assert validate_config({"growth_min": -100})["valid"] is True


def test_recommended_configs():
    assert get_recommended_config("easy") == {"tier": "entry"}
    assert get_recommended_config("medium") == {}
    assert get_recommended_config("hard") == {"salary_min": 50000, "salary_max": 150000}
    assert get_recommended_config("impossible") == {}
    CareerFilter(**get_recommended_config("hard"))


def test_filter_presets_build_valid_filters():
    assert set(FILTER_PRESETS) == {
        "healthcare", "technology", "engineering", "education", "business",
        "trades", "highSalary", "entryLevel", "fastGrowth",
    }
    assert get_filter_preset("highSalary").salary_min == 100000
    assert get_filter_preset("entryLevel").salary_max == 40000
    assert get_filter_preset("fastGrowth").growth_min == 10
    assert FILTER_PRESETS["trades"]["label"] == "Skilled Trades"
