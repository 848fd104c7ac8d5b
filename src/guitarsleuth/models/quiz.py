"""Configuration models for the identification quiz."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

UNSURE_OPTION_ID = "unsure"


class QuizOption(BaseModel):
    """One answer to a quiz question.

    ``feature_id`` links the answer to a catalog feature; answers without one
    (such as "I'm not sure") are recorded but do not count as evidence.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    description: str = ""
    feature_id: Optional[str] = None


class QuizCategory(BaseModel):
    """A feature category asked about in one quiz step."""

    model_config = ConfigDict(frozen=True)

    id: str
    """Feature category id, as used by the catalog (e.g. ``tuner``)."""

    title: str
    """Question shown to the user."""

    label: str = ""
    """Short name used when summarising answers; defaults to the title."""

    description: str = ""

    options: List[QuizOption] = Field(default_factory=list)
    """Fixed answers. When empty, answers are built from the catalog features
    in this category."""

    allow_unsure: bool = True


class QuizState(str, Enum):
    """Where the quiz currently is."""

    UNANSWERED = "unanswered"
    ANSWERED = "answered"
    COMPLETE = "complete"
