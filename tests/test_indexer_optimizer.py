import pytest

from app.exceptions import CareerGameError, PublishValidationError
from app.pipelines.classifier import classify_career
from app.pipelines.indexer import build_index
from app.pipelines.optimizer import (
    public_skills,
    step7_publish,
    to_game_career,
    to_public_career,
    truncate_text,
)
from app.pipelines.pipeline_state import CareerPipelineState
from app.pipelines.validator import check_publishable

from conftest import make_career


@pytest.fixture
def classified():
    return [
        classify_career(make_career(id=1, salary=81220)),
        classify_career(make_career(id=2, soc="29-1171", title="Nurse Practitioners", salary=120680,
                                    education="Master's degree", growth_rate=40, growth_category="Very High")),
        classify_career(make_career(id=3, soc="41-2011", title="Cashiers", salary=29720,
                                    description="Process customer transactions and accept payments.",
                                    education="No formal educational credential",
                                    growth_rate=-10, growth_category="Declining")),
    ]


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------

def test_index_groups_and_totals(classified):
    index = build_index(classified)

    assert index["total_careers"] == 3
    assert index["clusters"]["healthcare"]["careers"] == [1, 2]
    assert index["clusters"]["healthcare"]["metadata"]["label"] == "Healthcare"
    assert index["growth_categories"]["Declining"] == {"careers": [3], "count": 1}


def test_index_tiers_are_preseeded_with_averages(classified):
    tiers = build_index(classified)["salary_tiers"]

    assert set(tiers) == {"entry", "mid", "upper-mid", "high"}
    assert tiers["entry"]["careers"] == [3]
    assert tiers["entry"]["avg_salary"] == 29720
    assert tiers["mid"]["count"] == 0
    assert tiers["mid"]["avg_salary"] == 0
    assert tiers["high"]["metadata"]["min"] == 100000


def test_index_education_levels_are_preseeded(classified):
    levels = build_index(classified)["education_levels"]

    assert len(levels) == 7
    assert levels["bachelor"]["careers"] == [1]
    assert levels["master"]["careers"] == [2]
    assert levels["high_school"]["careers"] == [3]
    assert levels["doctoral"]["count"] == 0
    assert levels["unknown"]["level"] == 0


def test_index_is_deterministic(classified):
    assert build_index(classified) == build_index(classified)


def test_index_requires_classified_careers():
    with pytest.raises(CareerGameError):
        build_index([make_career()])


# ---------------------------------------------------------------------------
# Truncation and views
# ---------------------------------------------------------------------------

def test_truncate_short_text_unchanged():
    assert truncate_text("Short text", 150) == "Short text"
    assert truncate_text("", 10) == ""
    assert truncate_text(None, 10) == ""


def test_truncate_cuts_at_word_boundary():
    text = ("Registered nurses provide and coordinate patient care " * 6).strip()
    assert len(text) > 300

    truncated = truncate_text(text, 150)
    body = truncated[:-3]
    assert truncated.endswith("...")
    assert len(body) <= 150
    assert text.startswith(body)
    # The cut lands on a word boundary
    assert text[len(body)] == " "


def test_truncate_without_space_is_hard_cut():
    assert truncate_text("x" * 20, 10) == "x" * 10 + "..."


def test_truncate_never_leaves_a_stub():
    # Only space is right at the start; a word cut would keep "A"
    truncated = truncate_text("A " + "x" * 200, 150)
    assert truncated == ("A " + "x" * 148) + "..."


def test_game_view_drops_heavy_fields():
    career = make_career(description="word " * 100, what_they_do="long text", how_to_become_one="long text")
    game = to_game_career(career)

    assert len(game.description) <= 250 + 3
    assert game.metadata.cluster == classify_career(career).metadata.cluster
    assert "what_they_do" not in game.model_dump()
    assert "skills" not in game.model_dump()


def test_public_view_is_camel_case():
    public = to_public_career(make_career(work_environment="Hospitals " * 30))
    data = public.model_dump(by_alias=True)

    assert "workEnvironment" in data
    assert len(public.work_environment) <= 150 + 3
    assert 3 <= len(public.skills) <= 5


def test_public_skills_prefers_keywords():
    career = classify_career(make_career())
    assert public_skills(career) == career.metadata.keywords[:5]


def test_public_skills_falls_back_to_career_skills():
    career = make_career(description="Care plan.", title="RN")
    classified = classify_career(career)
    assert len(classified.metadata.keywords) < 3
    assert public_skills(classified) == career.skills


# ---------------------------------------------------------------------------
# Publishing
# ---------------------------------------------------------------------------

def test_published_description_keeps_minimum_length():
    career = make_career(description="A " + "x" * 200)
    state = step7_publish(CareerPipelineState(careers=[career]))

    assert state.summary["published"] is True
    assert len(state.public_careers[0].description) >= 10


def test_publish_check_applies_to_public_view():
    public = to_public_career(make_career()).model_copy(update={"description": "A..."})

    with pytest.raises(PublishValidationError) as exc_info:
        check_publishable([public])
    assert exc_info.value.failures[0]["errors"] == ["Description missing or too short"]


def test_failed_publish_leaves_no_public_careers():
    state = CareerPipelineState(careers=[make_career(skills=["Only one"])])

    with pytest.raises(PublishValidationError):
        step7_publish(state)
    assert state.public_careers == []
    assert state.summary["published"] is False
