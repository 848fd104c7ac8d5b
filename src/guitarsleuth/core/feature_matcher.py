"""Feature-based model matcher.

Scores every catalog model against the features a user observed on their
guitar and returns the candidates best match first.

Ranking keys, in order:
1. fewest required features missing
2. most required features matched
3. most features matched overall
4. highest match percentage

Because missing required features are compared first, a model that has all of
its required features always ranks above one that lacks any, however many
optional features the latter matches.
"""

import logging
from collections.abc import Iterable
from typing import Dict, List, Set, Union

from guitarsleuth.models.catalog import FeatureObservation, ModelFeatureAssociation
from guitarsleuth.models.lookup import MatchResult

# Logger for this module
logger = logging.getLogger(__name__)


def _round_half_up(numerator: int, denominator: int) -> int:
    return (200 * numerator + denominator) // (2 * denominator)


def selected_feature_ids(
    observations: Iterable[Union[FeatureObservation, str]],
) -> Set[str]:
    """Collect feature ids from observations or bare id strings."""
    ids: Set[str] = set()
    for obs in observations:
        ids.add(obs if isinstance(obs, str) else obs.feature_id)
    return ids


def group_by_model(
    associations: Iterable[ModelFeatureAssociation],
) -> Dict[str, List[ModelFeatureAssociation]]:
    """Group associations by model id, keeping first-seen model order."""
    grouped: Dict[str, List[ModelFeatureAssociation]] = {}
    for assoc in associations:
        grouped.setdefault(assoc.model_id, []).append(assoc)
    return grouped


def score_model(
    model_id: str,
    associations: List[ModelFeatureAssociation],
    selected: Set[str],
) -> MatchResult:
    """Score a single model's associations against the selected features."""
    required = [a for a in associations if a.is_required]
    optional = [a for a in associations if not a.is_required]
    matched_required = [a.feature_id for a in required if a.feature_id in selected]
    matched_optional = [a.feature_id for a in optional if a.feature_id in selected]
    matched = len(matched_required) + len(matched_optional)
    total = len(associations)
    return MatchResult(
        model_id=model_id,
        matched_required=len(matched_required),
        total_required=len(required),
        matched_optional=len(matched_optional),
        matched_features=matched,
        total_features=total,
        required_missing=len(required) - len(matched_required),
        match_percentage=_round_half_up(matched, total) if total else 0,
        matched_feature_ids=matched_required + matched_optional,
    )


def rank_key(result: MatchResult) -> tuple[int, int, int, int]:
    """Sort key implementing the ranking order described above."""
    return (
        result.required_missing,
        -result.matched_required,
        -result.matched_features,
        -result.match_percentage,
    )


def match_features(
    observations: Iterable[Union[FeatureObservation, str]],
    associations: Iterable[ModelFeatureAssociation],
) -> List[MatchResult]:
    """Rank models by how well they match the observed features.

    Args:
        observations: Selected features, one per category. Bare feature id
            strings are accepted as well.
        associations: The model/feature association catalog.

    Returns:
        MatchResults for every model with at least one matched feature, best
        first. Empty when nothing matches or either input is empty.
    """
    selected = selected_feature_ids(observations)
    if not selected:
        return []

    results = [
        score_model(model_id, model_assocs, selected)
        for model_id, model_assocs in group_by_model(associations).items()
    ]
    candidates = [r for r in results if r.matched_features > 0]
    candidates.sort(key=rank_key)
    logger.debug(
        "Matched %d of %d model(s) against %d feature(s)",
        len(candidates),
        len(results),
        len(selected),
    )
    return candidates
