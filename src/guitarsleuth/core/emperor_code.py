"""Neck-block Emperor date code resolver.

Japanese-built Alvarez guitars carry a two digit year stamp on the neck block
written in the Japanese imperial calendar. Showa codes (45-63) are
unambiguous. Heisei codes 1-12 collide with the post-2000 practice of stamping
the last two digits of the year, so those come back as an ambiguous pair and
the caller decides from other evidence.
"""

import logging

from guitarsleuth.models.core import (
    AmbiguousNeckBlock,
    DecodedNeckBlock,
    NeckBlockEra,
    NeckBlockResult,
    UndecodedNeckBlock,
)

# Logger for this module
logger = logging.getLogger(__name__)

# Showa 1 is 1926, so code N is 1925 + N.
SHOWA_YEARS: dict[int, int] = {code: 1925 + code for code in range(45, 64)}
# Heisei 1 is 1989, so code N is 1988 + N (7 is 1995, not 1996).
HEISEI_YEARS: dict[int, int] = {code: 1988 + code for code in range(1, 13)}

NOT_IN_CHART_NOTES = "Neck block number not found in Emperor code chart."


def resolve_neck_block(code: str) -> NeckBlockResult:
    """Decode a neck-block stamp into a calendar year.

    Args:
        code: The stamp as read from the neck block, e.g. ``"52"``.

    Returns:
        A DecodedNeckBlock for unambiguous codes, an AmbiguousNeckBlock with
        both candidate years for codes 1-12, and an UndecodedNeckBlock for
        anything else.
    """
    cleaned = (code or "").strip()
    if not (cleaned.isascii() and cleaned.isdigit()):
        return UndecodedNeckBlock(
            code=cleaned, notes="Invalid neck block number format."
        )

    if len(cleaned) == 6:
        return UndecodedNeckBlock(
            code=cleaned,
            notes=(
                "Six digit neck block numbers cannot be decoded with the Emperor "
                "chart; the format varies by factory."
            ),
        )

    significant = cleaned.lstrip("0")
    if len(significant) > 2:
        return UndecodedNeckBlock(
            code=cleaned,
            notes=NOT_IN_CHART_NOTES,
        )

    num = int(significant or "0")
    if num in SHOWA_YEARS:
        year = SHOWA_YEARS[num]
        return DecodedNeckBlock(
            code=cleaned,
            year=year,
            era=NeckBlockEra.SHOWA,
            notes=f"Emperor code {num} (Showa {num}) = {year}",
        )

    if num in HEISEI_YEARS:
        heisei_year, modern_year = HEISEI_YEARS[num], 2000 + num
        logger.debug(
            "Neck block %s is ambiguous: %s or %s", cleaned, heisei_year, modern_year
        )
        return AmbiguousNeckBlock(
            code=cleaned,
            possible_years=(heisei_year, modern_year),
            notes=(
                f"Ambiguous: could be {heisei_year} (Heisei {num}) or "
                f"{modern_year} (post-2000 format). Check the model's production "
                "years to determine the era."
            ),
        )

    if 13 <= num <= 99:
        year = 2000 + num
        return DecodedNeckBlock(
            code=cleaned,
            year=year,
            era=NeckBlockEra.POST_2000,
            notes=f"Post-2000 format: {year}",
        )

    return UndecodedNeckBlock(
        code=cleaned,
        notes=NOT_IN_CHART_NOTES,
    )
