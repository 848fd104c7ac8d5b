"""Step-by-step identification quiz.

QuizFlow walks a user through an ordered list of feature categories, records
one answer per category and re-ranks candidate models with the feature matcher
after every change.

States:
- UNANSWERED: the current category has no answer yet.
- ANSWERED: the current category has an answer; ``advance`` is allowed.
- COMPLETE: every category present in the association data was passed.

``back`` moves to the previous step and keeps all answers; ``reset`` clears
everything. The category list is configuration, so the same flow serves any
taxonomy.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from guitarsleuth.core.feature_matcher import match_features
from guitarsleuth.models.catalog import (
    FeatureObservation,
    IdentifyingFeature,
    ModelFeatureAssociation,
)
from guitarsleuth.models.lookup import MatchResult
from guitarsleuth.models.quiz import (
    UNSURE_OPTION_ID,
    QuizCategory,
    QuizOption,
    QuizState,
)

# Logger for this module
logger = logging.getLogger(__name__)


class QuizError(ValueError):
    """Raised for a transition that is not allowed in the current state."""


def association_categories(
    associations: Iterable[ModelFeatureAssociation],
    features: Iterable[IdentifyingFeature] = (),
) -> set[str]:
    """Return the feature categories referenced by the association data.

    Associations without an embedded category are resolved through
    *features*.
    """
    feature_categories = {f.id: f.category for f in features}
    categories: set[str] = set()
    for assoc in associations:
        category = assoc.category or feature_categories.get(assoc.feature_id)
        if category:
            categories.add(category)
    return categories


class QuizFlow:
    """Per-session quiz state: the current step and the answers so far."""

    def __init__(
        self,
        categories: Sequence[QuizCategory],
        associations: Sequence[ModelFeatureAssociation],
        features: Sequence[IdentifyingFeature] = (),
    ) -> None:
        """Initialize a quiz.

        Args:
            categories: Configured categories, in the order they are asked.
            associations: Model/feature associations used for matching.
            features: Catalog features, used to build answers for categories
                without fixed options and to resolve association categories.
        """
        present = association_categories(associations, features)
        self.categories: List[QuizCategory] = [
            c for c in categories if c.id in present
        ]
        self.associations = list(associations)
        self.features = list(features)
        self.step = 0
        self.answers: Dict[str, QuizOption] = {}
        skipped = [c.id for c in categories if c.id not in present]
        if skipped:
            logger.debug("Quiz categories without catalog data skipped: %s", skipped)

    @property
    def total_steps(self) -> int:
        return len(self.categories)

    @property
    def is_complete(self) -> bool:
        return self.step == self.total_steps

    @property
    def state(self) -> QuizState:
        if self.is_complete:
            return QuizState.COMPLETE
        if self.current_category.id in self.answers:
            return QuizState.ANSWERED
        return QuizState.UNANSWERED

    @property
    def current_category(self) -> QuizCategory:
        if self.is_complete:
            raise QuizError("The quiz is complete")
        return self.categories[self.step]

    @property
    def progress(self) -> float:
        """Fraction of steps passed, from 0.0 to 1.0."""
        if not self.total_steps:
            return 1.0
        return self.step / self.total_steps

    def options_for(self, category: QuizCategory) -> List[QuizOption]:
        """Return the answers offered for *category*."""
        options = list(category.options)
        if not options:
            options = [
                QuizOption(
                    id=f.id,
                    label=f.name,
                    description=f.description or "",
                    feature_id=f.id,
                )
                for f in sorted(self.features, key=lambda f: f.name)
                if f.category == category.id
            ]
        if category.allow_unsure and all(o.id != UNSURE_OPTION_ID for o in options):
            options.append(QuizOption(id=UNSURE_OPTION_ID, label="I'm not sure"))
        return options

    def select(self, option_id: str) -> QuizState:
        """Answer the current step.

        Raises:
            QuizError: If the quiz is complete or the option is not offered.
        """
        category = self.current_category
        for option in self.options_for(category):
            if option.id == option_id:
                self.answers[category.id] = option
                return self.state
        raise QuizError(f"Unknown option {option_id!r} for category {category.id!r}")

    def advance(self) -> QuizState:
        """Move to the next step.

        Raises:
            QuizError: If the current step has no answer yet.
        """
        if self.state is not QuizState.ANSWERED:
            raise QuizError("Answer the current question before moving on")
        self.step += 1
        return self.state

    def back(self) -> QuizState:
        """Move to the previous step, keeping every answer."""
        if self.step > 0:
            self.step -= 1
        return self.state

    def reset(self) -> QuizState:
        """Clear all answers and return to the first step."""
        self.step = 0
        self.answers.clear()
        return self.state

    def answer_for(self, category_id: str) -> Optional[QuizOption]:
        return self.answers.get(category_id)

    def observations(self) -> List[FeatureObservation]:
        """Answers that point at a catalog feature, in category order."""
        observed: List[FeatureObservation] = []
        for category in self.categories:
            option = self.answers.get(category.id)
            if option is None or not option.feature_id:
                continue
            observed.append(
                FeatureObservation(category=category.id, feature_id=option.feature_id)
            )
        return observed

    def results(self) -> List[MatchResult]:
        """Rank models against the current answers."""
        return match_features(self.observations(), self.associations)

    def submission_notes(self) -> str:
        """Render the answers as free text for a guitar submission."""
        parts = [
            f"{c.label or c.title}: {self.answers[c.id].label}"
            for c in self.categories
            if c.id in self.answers
        ]
        return "; ".join(parts)
