"""Serial lookup orchestration.

Combines the serial classifier, the neck-block resolver and the catalog's
prefix patterns and approved guitars into a single AggregateResult with one
confidence tier and percentage.

Evidence precedence for the year, from strongest to weakest:
1. A year and month read straight from the serial.
2. A decoded neck-block stamp (forces high/95 and Japan).
3. The year range of the matching prefix patterns, only when the serial gave
   no year.
4. The classifier's own range.

A stronger source is never overwritten by a weaker one. An ambiguous neck
block never sets a year; both candidates are passed through.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from guitarsleuth.core.emperor_code import resolve_neck_block
from guitarsleuth.core.serial_classifier import classify_serial, normalize_serial
from guitarsleuth.models.catalog import ApprovedGuitarRecord, PatternRecord
from guitarsleuth.models.core import ConfidenceTier, NeckBlockResult, ParseResult
from guitarsleuth.models.lookup import AggregateResult, MatchedModel

# Logger for this module
logger = logging.getLogger(__name__)

NECK_BLOCK_PERCENT = 95
EXACT_MATCH_PERCENT = 95
MULTI_PATTERN_PERCENT = 85
SINGLE_PATTERN_PERCENT = 65


def lookup_prefix(parse: ParseResult) -> str:
    """Return the prefix used to query patterns for a classified serial.

    Falls back to the first two characters when no letter prefix was read.
    """
    return parse.prefix or parse.serial[:2]


def find_patterns(
    prefix: str, patterns: Iterable[PatternRecord]
) -> List[PatternRecord]:
    """Collect the patterns registered for *prefix*."""
    return [
        p
        for p in patterns
        if p.prefix is not None and p.prefix.strip().upper() == prefix
    ]


def find_similar_guitars(
    prefix: str, approved_guitars: Iterable[ApprovedGuitarRecord]
) -> List[ApprovedGuitarRecord]:
    """Collect approved guitars whose serial starts with *prefix*."""
    return [
        g
        for g in approved_guitars
        if g.serial_number.strip().upper().startswith(prefix)
    ]


def _pattern_year_range(patterns: Sequence[PatternRecord]) -> str:
    years = [y for p in patterns for y in (p.year_range_start, p.year_range_end)]
    low, high = min(years), max(years)
    return str(low) if low == high else f"{low}-{high}"


def _matched_models(patterns: Sequence[PatternRecord]) -> List[MatchedModel]:
    models: List[MatchedModel] = []
    seen: set[str] = set()
    for pattern in patterns:
        if pattern.model is None or pattern.model.id in seen:
            continue
        seen.add(pattern.model.id)
        models.append(
            MatchedModel(
                id=pattern.model.id,
                name=pattern.model.name,
                series=pattern.model.series,
                country=pattern.model.country,
            )
        )
    return models


def _years_in_production(
    neck: Optional[NeckBlockResult], patterns: Sequence[PatternRecord]
) -> List[int]:
    if neck is None or neck.kind != "ambiguous":
        return []
    windows = [p.model for p in patterns if p.model is not None]
    return [
        year
        for year in neck.possible_years
        if any(model.in_production(year) for model in windows)
    ]


def lookup_serial(
    serial: str,
    neck_block: Optional[str] = None,
    patterns: Iterable[PatternRecord] = (),
    approved_guitars: Iterable[ApprovedGuitarRecord] = (),
) -> AggregateResult:
    """Date a guitar from its serial, neck block and catalog evidence.

    Args:
        serial: Serial number as entered by the user.
        neck_block: Optional neck-block stamp.
        patterns: Known serial prefix patterns from the catalog.
        approved_guitars: Approved community submissions from the catalog.

    Returns:
        The aggregated result. Empty catalogs simply mean no external evidence.

    Raises:
        MissingSerialError: If the serial is empty or whitespace only.
    """
    cleaned = normalize_serial(serial)
    parse = classify_serial(cleaned)

    matching: List[PatternRecord] = []
    similar: List[ApprovedGuitarRecord] = []
    if parse.is_yairi:
        # Bare sequence numbers carry no prefix to look up.
        logger.debug("Serial %s is a Yairi sequence number", cleaned)
    else:
        prefix = lookup_prefix(parse)
        matching = find_patterns(prefix, patterns)
        similar = find_similar_guitars(prefix, approved_guitars)
        logger.debug(
            "Prefix %s matched %d pattern(s) and %d approved guitar(s)",
            prefix,
            len(matching),
            len(similar),
        )

    neck: Optional[NeckBlockResult] = None
    if neck_block is not None and neck_block.strip():
        neck = resolve_neck_block(neck_block)

    year = parse.estimated_year
    month = parse.estimated_month
    year_range = parse.year_range_display
    tier = parse.confidence_tier
    percent = parse.confidence_percent
    country = parse.country_guess
    notes = [parse.notes] if parse.notes else []

    strong_parse = parse.has_specific_date
    neck_decided = False
    if neck is not None:
        notes.append(neck.notes)
        if neck.kind == "decoded" and not strong_parse:
            year, month = neck.year, None
            year_range = str(neck.year)
            tier, percent = ConfidenceTier.HIGH, NECK_BLOCK_PERCENT
            country = "Japan"
            neck_decided = True

    if matching and not strong_parse and not neck_decided:
        if parse.estimated_year is None:
            year_range = _pattern_year_range(matching)
        if len(matching) >= 2:
            tier, percent = ConfidenceTier.HIGH, MULTI_PATTERN_PERCENT
        else:
            tier, percent = ConfidenceTier.MEDIUM, SINGLE_PATTERN_PERCENT

    exact_match = any(g.serial_number.strip().upper() == cleaned for g in similar)
    if exact_match:
        tier, percent = ConfidenceTier.HIGH, EXACT_MATCH_PERCENT

    if not neck_decided:
        pattern_countries = [
            p.model.country
            for p in matching
            if p.model is not None and p.model.country
        ]
        if pattern_countries:
            country = pattern_countries[0]

    fields = parse.model_dump()
    fields.update(
        estimated_year=year,
        estimated_month=month,
        year_range_display=year_range,
        confidence_tier=tier,
        confidence_percent=percent,
        country_guess=country,
        notes=" ".join(notes),
    )
    result = AggregateResult(
        **fields,
        serial_parse=parse,
        models=_matched_models(matching),
        patterns=matching,
        similar_guitars=similar,
        neck_block=neck,
        neck_block_years_in_production=_years_in_production(neck, matching),
        exact_match=exact_match,
    )
    logger.info(
        "Lookup %s: %s (%s, %d%%)",
        cleaned,
        result.year_range_display,
        result.confidence_tier.value,
        result.confidence_percent,
    )
    return result
