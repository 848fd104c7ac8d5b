"""Domain models for the guitarsleuth application."""

from guitarsleuth.models.catalog import (
    ApprovedGuitarRecord,
    Catalog,
    CatalogModel,
    FeatureObservation,
    IdentifyingFeature,
    ModelFeatureAssociation,
    PatternRecord,
)
from guitarsleuth.models.core import (
    AmbiguousNeckBlock,
    ConfidenceTier,
    DecodedNeckBlock,
    NeckBlockEra,
    NeckBlockResult,
    ParseResult,
    SerialFormat,
    UndecodedNeckBlock,
)
from guitarsleuth.models.lookup import AggregateResult, MatchedModel, MatchResult

__all__ = [
    "AggregateResult",
    "AmbiguousNeckBlock",
    "ApprovedGuitarRecord",
    "Catalog",
    "CatalogModel",
    "ConfidenceTier",
    "DecodedNeckBlock",
    "FeatureObservation",
    "IdentifyingFeature",
    "MatchResult",
    "MatchedModel",
    "ModelFeatureAssociation",
    "NeckBlockEra",
    "NeckBlockResult",
    "ParseResult",
    "PatternRecord",
    "SerialFormat",
    "UndecodedNeckBlock",
]
