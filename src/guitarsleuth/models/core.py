"""Core domain models for guitarsleuth.

This module defines the value objects produced by the serial and neck-block
dating engines.
- SerialFormat and ConfidenceTier enums give type-safe classification tags.
- ParseResult is the structured outcome of classifying one serial number.
- NeckBlockResult is a tagged union: a decoded year, an ambiguous pair of
  candidate years, or an undecodable stamp.

Design:
- Every model is frozen. Results are recomputed per call and never mutated, so
  callers can share them freely.
- The ambiguous neck-block case is its own variant rather than a nullable year,
  so it cannot be collapsed into a single guessed year by accident.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class SerialFormat(str, Enum):
    """Structural family of a serial number."""

    MODERN = "modern"
    YAIRI = "yairi"
    LEGACY = "legacy"
    NINE_DIGIT = "nine_digit"
    UNKNOWN = "unknown"


class ConfidenceTier(str, Enum):
    """Coarse confidence bucket paired with a numeric percentage."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Default meter widths per tier, used when no stronger evidence sets a
# percentage explicitly.
TIER_PERCENT = {
    ConfidenceTier.HIGH: 90,
    ConfidenceTier.MEDIUM: 60,
    ConfidenceTier.LOW: 30,
}
UNKNOWN_FORMAT_PERCENT = 20


class ParseResult(BaseModel):
    """Result of classifying a single serial number.

    Exactly one format is assigned per input. Optional fields are None when the
    serial carries no such information.
    """

    model_config = ConfigDict(frozen=True)

    serial: str
    """Normalized serial (trimmed, uppercase)."""

    format: SerialFormat
    """Format family assigned by the first matching rule."""

    estimated_year: Optional[int] = None
    """Build year, when the serial encodes one."""

    estimated_month: Optional[int] = Field(default=None, ge=1, le=12)
    """Build month (1-12). Invalid month digits are kept in notes instead."""

    year_range_display: str = "Unknown"
    """Human-readable year or year range."""

    confidence_tier: ConfidenceTier = ConfidenceTier.LOW
    confidence_percent: int = Field(default=30, ge=0, le=100)

    country_guess: str = "Unknown"
    """Most likely country of manufacture."""

    notes: str = ""
    """Explanation shown to the user, including any rejected month digits."""

    is_yairi: bool = False
    """True for bare Yairi sequence numbers, which carry no date."""

    needs_emperor_code: bool = False
    """True when only the neck-block stamp can date the instrument."""

    prefix: Optional[str] = None
    """Letter prefix extracted from the serial, if any."""

    @property
    def has_specific_date(self) -> bool:
        """Whether the serial alone gave both a year and a month."""
        return self.estimated_year is not None and self.estimated_month is not None


class NeckBlockEra(str, Enum):
    """Calendar a decoded neck-block stamp was read in."""

    SHOWA = "showa"
    POST_2000 = "post_2000"


class _NeckBlockBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    notes: str = ""


class DecodedNeckBlock(_NeckBlockBase):
    """A stamp that maps to exactly one calendar year."""

    kind: Literal["decoded"] = "decoded"
    year: int
    era: NeckBlockEra

    @property
    def possible_years(self) -> None:
        return None


class AmbiguousNeckBlock(_NeckBlockBase):
    """A stamp readable as either a Heisei year or a post-2000 year.

    Both candidates are kept; the resolver never picks one.
    """

    kind: Literal["ambiguous"] = "ambiguous"
    possible_years: Tuple[int, int]

    @property
    def year(self) -> None:
        return None


class UndecodedNeckBlock(_NeckBlockBase):
    """A stamp that is invalid or not covered by the era tables."""

    kind: Literal["undecoded"] = "undecoded"

    @property
    def year(self) -> None:
        return None

    @property
    def possible_years(self) -> None:
        return None


NeckBlockResult = Annotated[
    Union[DecodedNeckBlock, AmbiguousNeckBlock, UndecodedNeckBlock],
    Field(discriminator="kind"),
]
