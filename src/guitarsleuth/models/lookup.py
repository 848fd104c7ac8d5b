"""Result models for serial lookups and feature matching."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from guitarsleuth.models.catalog import ApprovedGuitarRecord, PatternRecord
from guitarsleuth.models.core import NeckBlockResult, ParseResult


class MatchedModel(BaseModel):
    """A model linked to one of the matching serial patterns."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    series: Optional[str] = None
    country: Optional[str] = None


class AggregateResult(ParseResult):
    """A ParseResult enriched with catalog evidence and a neck-block reading.

    The year, range, confidence and country fields hold the aggregated values;
    the raw classifier output is kept in ``serial_parse``.
    """

    serial_parse: ParseResult
    """Classifier output before any catalog or neck-block evidence."""

    models: List[MatchedModel] = Field(default_factory=list)
    patterns: List[PatternRecord] = Field(default_factory=list)
    similar_guitars: List[ApprovedGuitarRecord] = Field(default_factory=list)

    neck_block: Optional[NeckBlockResult] = None
    """Neck-block reading, when a stamp was supplied."""

    neck_block_years_in_production: List[int] = Field(default_factory=list)
    """Ambiguous neck-block candidates inside a matched model's production
    window. Informational only; the ambiguity itself is left unresolved."""

    exact_match: bool = False
    """True when an approved guitar has exactly this serial."""

    @property
    def is_ambiguous(self) -> bool:
        """Whether the caller still has to choose between candidate years."""
        return self.neck_block is not None and self.neck_block.kind == "ambiguous"


class MatchResult(BaseModel):
    """How well one model matches the selected features."""

    model_config = ConfigDict(frozen=True)

    model_id: str
    matched_required: int
    total_required: int
    matched_optional: int
    matched_features: int
    total_features: int
    required_missing: int
    match_percentage: int = Field(ge=0, le=100)
    matched_feature_ids: List[str] = Field(default_factory=list)

    @property
    def all_required_present(self) -> bool:
        return self.required_missing == 0
