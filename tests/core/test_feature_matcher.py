"""Tests for guitarsleuth.core.feature_matcher."""

from typing import List

import pytest

from guitarsleuth.core.feature_matcher import (
    group_by_model,
    match_features,
    rank_key,
    score_model,
)
from guitarsleuth.models.catalog import FeatureObservation, ModelFeatureAssociation


def _assoc(model_id: str, feature_id: str, required: bool = False) -> ModelFeatureAssociation:
    return ModelFeatureAssociation(
        model_id=model_id, feature_id=feature_id, is_required=required
    )


@pytest.fixture
def associations() -> List[ModelFeatureAssociation]:
    return [
        # 5014: two required, one optional
        _assoc("m-5014", "tuner-open", required=True),
        _assoc("m-5014", "shape-dread", required=True),
        _assoc("m-5014", "bridge-rosewood"),
        # 5024: one required, three optional
        _assoc("m-5024", "tuner-sealed", required=True),
        _assoc("m-5024", "shape-dread"),
        _assoc("m-5024", "bridge-rosewood"),
        _assoc("m-5024", "label-oval"),
        # AD60: optional only
        _assoc("m-ad60", "label-square"),
        _assoc("m-ad60", "bridge-ebony"),
    ]


def test_nothing_selected_returns_empty(associations) -> None:
    assert match_features([], associations) == []


def test_empty_associations_returns_empty() -> None:
    assert match_features(["tuner-open"], []) == []


def test_models_without_matches_are_excluded(associations) -> None:
    results = match_features(["label-square"], associations)
    assert [r.model_id for r in results] == ["m-ad60"]
    assert results[0].match_percentage == 50


def test_model_with_all_required_ranks_first(associations) -> None:
    # m-5024 matches three features but misses its required tuner.
    selected = ["tuner-open", "shape-dread", "bridge-rosewood", "label-oval"]
    results = match_features(selected, associations)
    assert [r.model_id for r in results] == ["m-5014", "m-5024"]
    first, second = results
    assert first.all_required_present
    assert first.match_percentage == 100
    assert first.matched_feature_ids == ["tuner-open", "shape-dread", "bridge-rosewood"]
    assert not second.all_required_present
    assert second.required_missing == 1
    assert second.matched_optional == 3


def test_required_missing_outranks_feature_count(associations) -> None:
    selected = ["tuner-sealed", "shape-dread", "bridge-rosewood", "label-oval"]
    results = match_features(selected, associations)
    assert results[0].model_id == "m-5024"
    assert results[0].required_missing == 0
    assert results[1].model_id == "m-5014"
    assert results[1].required_missing == 1


def test_observations_are_accepted(associations) -> None:
    observations = [
        FeatureObservation(category="tuner", feature_id="tuner-open"),
        FeatureObservation(category="body_shape", feature_id="shape-dread"),
    ]
    results = match_features(observations, associations)
    assert results[0].model_id == "m-5014"
    assert results[0].matched_required == 2


def test_ties_keep_catalog_order() -> None:
    associations = [_assoc("b", "x"), _assoc("a", "x")]
    results = match_features(["x"], associations)
    assert [r.model_id for r in results] == ["b", "a"]


def test_percentage_rounds_half_up() -> None:
    # 1 of 8 = 12.5% -> 13
    associations = [_assoc("m", f"f{i}") for i in range(8)]
    result = score_model("m", associations, {"f0"})
    assert result.match_percentage == 13
    # 2 of 3 = 66.7% -> 67
    result = score_model("m", associations[:3], {"f0", "f1"})
    assert result.match_percentage == 67


def test_score_model_counts(associations) -> None:
    grouped = group_by_model(associations)
    result = score_model("m-5024", grouped["m-5024"], {"tuner-sealed", "label-oval"})
    assert result.matched_required == 1
    assert result.total_required == 1
    assert result.matched_optional == 1
    assert result.matched_features == 2
    assert result.total_features == 4
    assert result.match_percentage == 50


def test_results_are_sorted_by_rank_key(associations) -> None:
    selected = ["shape-dread", "bridge-rosewood", "bridge-ebony"]
    results = match_features(selected, associations)
    keys = [rank_key(r) for r in results]
    assert keys == sorted(keys)
