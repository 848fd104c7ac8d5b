"""Tests for the QuizFlow state machine."""

from typing import List

import pytest

from guitarsleuth.core.quiz import QuizError, QuizFlow, association_categories
from guitarsleuth.models.catalog import IdentifyingFeature, ModelFeatureAssociation
from guitarsleuth.models.quiz import (
    UNSURE_OPTION_ID,
    QuizCategory,
    QuizOption,
    QuizState,
)


@pytest.fixture
def features() -> List[IdentifyingFeature]:
    return [
        IdentifyingFeature(id="tuner-sealed", category="tuner", name="Sealed"),
        IdentifyingFeature(id="tuner-open", category="tuner", name="Open gear"),
        IdentifyingFeature(id="shape-dread", category="body_shape", name="Dreadnought"),
        IdentifyingFeature(id="shape-folk", category="body_shape", name="Folk"),
    ]


@pytest.fixture
def associations() -> List[ModelFeatureAssociation]:
    return [
        ModelFeatureAssociation(model_id="m-5014", feature_id="tuner-open", is_required=True),
        ModelFeatureAssociation(model_id="m-5014", feature_id="shape-dread"),
        ModelFeatureAssociation(model_id="m-5024", feature_id="tuner-sealed"),
        ModelFeatureAssociation(model_id="m-5024", feature_id="shape-folk", is_required=True),
    ]


@pytest.fixture
def categories() -> List[QuizCategory]:
    return [
        QuizCategory(id="tuner", title="What tuners?", label="Tuners"),
        QuizCategory(id="truss_rod", title="Where is the truss rod?"),
        QuizCategory(
            id="body_shape",
            title="What body shape?",
            options=[
                QuizOption(id="dread", label="Dreadnought", feature_id="shape-dread"),
                QuizOption(id="folk", label="Folk", feature_id="shape-folk"),
            ],
            allow_unsure=False,
        ),
    ]


@pytest.fixture
def flow(categories, associations, features) -> QuizFlow:
    return QuizFlow(categories, associations, features)


def test_association_categories_resolves_through_features(associations, features) -> None:
    assert association_categories(associations, features) == {"tuner", "body_shape"}
    assert association_categories(associations) == set()


def test_categories_without_data_are_skipped(flow) -> None:
    assert [c.id for c in flow.categories] == ["tuner", "body_shape"]
    assert flow.total_steps == 2
    assert flow.state is QuizState.UNANSWERED
    assert flow.progress == 0.0


def test_options_built_from_features(flow) -> None:
    options = flow.options_for(flow.current_category)
    assert [o.id for o in options] == ["tuner-open", "tuner-sealed", UNSURE_OPTION_ID]
    assert options[0].feature_id == "tuner-open"
    assert options[-1].feature_id is None


def test_fixed_options_without_unsure(flow, categories) -> None:
    options = flow.options_for(categories[2])
    assert [o.id for o in options] == ["dread", "folk"]


def test_advance_requires_an_answer(flow) -> None:
    with pytest.raises(QuizError):
        flow.advance()


def test_select_rejects_unknown_option(flow) -> None:
    with pytest.raises(QuizError):
        flow.select("tuner-gold")


def test_full_walk_through(flow) -> None:
    assert flow.select("tuner-open") is QuizState.ANSWERED
    assert flow.advance() is QuizState.UNANSWERED
    assert flow.progress == 0.5
    flow.select("dread")
    assert flow.advance() is QuizState.COMPLETE
    assert flow.is_complete
    assert flow.progress == 1.0
    with pytest.raises(QuizError):
        flow.current_category

    results = flow.results()
    assert results[0].model_id == "m-5014"
    assert results[0].match_percentage == 100
    assert flow.submission_notes() == "Tuners: Open gear; What body shape?: Dreadnought"


def test_results_update_after_each_answer(flow) -> None:
    assert flow.results() == []
    flow.select("tuner-sealed")
    assert [r.model_id for r in flow.results()] == ["m-5024"]


def test_back_keeps_answers(flow) -> None:
    flow.select("tuner-open")
    flow.advance()
    assert flow.back() is QuizState.ANSWERED
    assert flow.step == 0
    assert flow.answer_for("tuner").id == "tuner-open"
    # Back on the first step stays put.
    flow.back()
    assert flow.step == 0


def test_reset_clears_everything(flow) -> None:
    flow.select("tuner-open")
    flow.advance()
    flow.select("folk")
    assert flow.reset() is QuizState.UNANSWERED
    assert flow.step == 0
    assert flow.answers == {}
    assert flow.observations() == []


def test_unsure_is_not_evidence(flow) -> None:
    flow.select(UNSURE_OPTION_ID)
    flow.advance()
    flow.select("folk")
    observed = flow.observations()
    assert [(o.category, o.feature_id) for o in observed] == [("body_shape", "shape-folk")]
    assert "Tuners: I'm not sure" in flow.submission_notes()


def test_empty_catalog_is_complete_immediately(categories) -> None:
    flow = QuizFlow(categories, [], [])
    assert flow.total_steps == 0
    assert flow.state is QuizState.COMPLETE
    assert flow.progress == 1.0
