"""Catalog records supplied by the persistence layer.

These models mirror the rows a catalog store hands to the engines: guitar
models, serial prefix patterns, approved community submissions, identifying
features and the model/feature association table. The engines only read them.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CatalogModel(BaseModel):
    """A guitar model in the catalog."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    series: Optional[str] = None
    country: Optional[str] = None
    production_start_year: Optional[int] = None
    production_end_year: Optional[int] = None
    body_shape: Optional[str] = None

    def in_production(self, year: int) -> bool:
        """Check whether *year* falls inside the production window.

        An open bound on either side is treated as unbounded.
        """
        start, end = self.production_start_year, self.production_end_year
        if start is None and end is None:
            return False
        if start is not None and year < start:
            return False
        if end is not None and year > end:
            return False
        return True


class PatternRecord(BaseModel):
    """A known serial prefix and the years it was used."""

    model_config = ConfigDict(frozen=True)

    id: str
    prefix: Optional[str] = None
    year_range_start: int
    year_range_end: int
    serial_range_start: Optional[str] = None
    serial_range_end: Optional[str] = None
    model: Optional[CatalogModel] = None
    confidence_notes: Optional[str] = None

    @model_validator(mode="after")
    def validate_year_range(self) -> "PatternRecord":
        """Ensure the year range is ordered.

        Raises:
            ValueError: If the range ends before it starts.
        """
        if self.year_range_end < self.year_range_start:
            raise ValueError(
                f"year_range_end ({self.year_range_end}) must be >= "
                f"year_range_start ({self.year_range_start})"
            )
        return self


class ApprovedGuitarRecord(BaseModel):
    """A reviewed community submission with a known serial."""

    model_config = ConfigDict(frozen=True)

    id: str
    serial_number: str
    estimated_year: Optional[int] = None
    model_name: Optional[str] = None


class IdentifyingFeature(BaseModel):
    """A physical feature that helps tell models apart."""

    model_config = ConfigDict(frozen=True)

    id: str
    category: str
    name: str
    value: Optional[str] = None
    description: Optional[str] = None
    era_start: Optional[int] = None
    era_end: Optional[int] = None


class ModelFeatureAssociation(BaseModel):
    """Links a model to a feature, flagging features the model must have."""

    model_config = ConfigDict(frozen=True)

    model_id: str
    feature_id: str
    is_required: bool = False
    category: Optional[str] = None
    """Category of the linked feature, when the store joined it in."""


class FeatureObservation(BaseModel):
    """The feature a user selected for one taxonomy category."""

    model_config = ConfigDict(frozen=True)

    category: str
    feature_id: str


class Catalog(BaseModel):
    """Everything a catalog file provides, already validated."""

    model_config = ConfigDict(frozen=True)

    models: list[CatalogModel] = Field(default_factory=list)
    patterns: list[PatternRecord] = Field(default_factory=list)
    approved_guitars: list[ApprovedGuitarRecord] = Field(default_factory=list)
    features: list[IdentifyingFeature] = Field(default_factory=list)
    model_features: list[ModelFeatureAssociation] = Field(default_factory=list)

    def model_by_id(self, model_id: str) -> Optional[CatalogModel]:
        """Return the catalog model with the given id, if present."""
        for model in self.models:
            if model.id == model_id:
                return model
        return None

    def feature_by_id(self, feature_id: str) -> Optional[IdentifyingFeature]:
        """Return the identifying feature with the given id, if present."""
        for feature in self.features:
            if feature.id == feature_id:
                return feature
        return None
