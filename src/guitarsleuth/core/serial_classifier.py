"""Serial number classifier for Alvarez guitars.

This module turns a raw serial string into a structured ParseResult using an
ordered table of format rules.
- Rules are tried in SERIAL_RULES order and the first structural match wins,
  so every serial gets exactly one format.
- Letter-prefixed modern serials (E, CS, CD, F, S) carry a date code of varying
  reliability; A-prefixed and plain numeric serials are vintage Japanese
  instruments that can only be dated from the neck block.
- Four to six digit serials are Yairi sequence numbers and carry no date at all.

The rule order and the per-prefix trust levels follow the Alvarez customer
service documentation. CD serials are trusted less than E/CS serials even
though the layout is identical, and F serials only yield a year for indicators
starting with 2 or 3.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

from guitarsleuth.models.core import (
    TIER_PERCENT,
    UNKNOWN_FORMAT_PERCENT,
    ConfidenceTier,
    ParseResult,
    SerialFormat,
)

# Logger for this module
logger = logging.getLogger(__name__)

YAIRI_NOTES = (
    "This is an Alvarez-Yairi sequence number. It counts instruments built, so "
    "the serial alone cannot date the guitar. For pre-2000s instruments, check "
    "the neck block inside the soundhole for the Emperor date stamp."
)
VINTAGE_NOTES = (
    "This appears to be a vintage Japanese Alvarez. Guitars from the 1960s-80s "
    "were built in several factories with their own numbering. Check the neck "
    "block inside the guitar for the Emperor date code."
)


class MissingSerialError(ValueError):
    """Raised when a serial is empty or whitespace only."""


def normalize_serial(serial: str) -> str:
    """Trim and uppercase a serial.

    Args:
        serial: Raw user input.

    Returns:
        The normalized serial.

    Raises:
        MissingSerialError: If nothing is left after trimming.
    """
    cleaned = (serial or "").strip().upper()
    if not cleaned:
        raise MissingSerialError("Please enter a serial number")
    return cleaned


def _valid_month(month_digits: str) -> Optional[int]:
    month = int(month_digits)
    return month if 1 <= month <= 12 else None


def _result(
    serial: str,
    fmt: SerialFormat,
    tier: ConfidenceTier,
    **fields: object,
) -> ParseResult:
    percent = TIER_PERCENT[tier]
    if fmt is SerialFormat.UNKNOWN:
        percent = UNKNOWN_FORMAT_PERCENT
    return ParseResult(
        serial=serial,
        format=fmt,
        confidence_tier=tier,
        confidence_percent=percent,
        **fields,
    )


def _dated_modern(
    serial: str, match: re.Match[str], prefix: str, tier: ConfidenceTier
) -> ParseResult:
    """Build a result for PREFIX + YY + MM + sequence serials."""
    year_digits, month_digits = match.group(1), match.group(2)
    year = 2000 + int(year_digits)
    month = _valid_month(month_digits)
    notes = (
        f"{prefix}-prefix serials encode the build year and month "
        f"({prefix}YYMM...). {prefix}-prefix guitars are made in China."
    )
    if month is None:
        notes += (
            f" Month digits '{month_digits}' are not a valid month, so only the "
            "year could be read."
        )
    if tier is not ConfidenceTier.HIGH:
        notes += " Dates on this prefix are less consistent than E or CS serials."
    return _result(
        serial,
        SerialFormat.MODERN,
        tier,
        estimated_year=year,
        estimated_month=month,
        year_range_display=str(year),
        country_guess="China",
        notes=notes,
        prefix=prefix,
    )


def _rule_e(serial: str, match: re.Match[str]) -> ParseResult:
    return _dated_modern(serial, match, "E", ConfidenceTier.HIGH)


def _rule_cs(serial: str, match: re.Match[str]) -> ParseResult:
    return _dated_modern(serial, match, "CS", ConfidenceTier.HIGH)


def _rule_cd(serial: str, match: re.Match[str]) -> ParseResult:
    return _dated_modern(serial, match, "CD", ConfidenceTier.MEDIUM)


def _rule_f(serial: str, match: re.Match[str]) -> ParseResult:
    indicator = match.group(1)
    year: Optional[int] = None
    year_range = "Early-mid 2000s"
    # Only 2x and 3x indicators are documented.
    if indicator[0] in ("2", "3"):
        year = 2000 + int(indicator[0])
        year_range = "2002-2008"
    return _result(
        serial,
        SerialFormat.MODERN,
        ConfidenceTier.MEDIUM,
        estimated_year=year,
        year_range_display=year_range,
        country_guess="China or Korea",
        notes=(
            f"F-prefix serial with indicator '{indicator}'. F-prefix guitars "
            "date from the early-to-mid 2000s and were made in China or Korea."
        ),
        prefix="F",
    )


def _rule_s(serial: str, match: re.Match[str]) -> ParseResult:
    yy = int(match.group(1))
    year: Optional[int] = None
    if 90 <= yy <= 99:
        year = 1900 + yy
    elif 0 <= yy <= 10:
        year = 2000 + yy
    return _result(
        serial,
        SerialFormat.MODERN,
        ConfidenceTier.MEDIUM,
        estimated_year=year,
        year_range_display=str(year) if year is not None else "1990s",
        country_guess="Korea or China",
        notes=(
            "S-prefix serials start with a two digit year. S-prefix guitars "
            "were made in Korea or China from the 1990s."
        ),
        prefix="S",
    )


def _rule_a(serial: str, match: re.Match[str]) -> ParseResult:
    return _result(
        serial,
        SerialFormat.LEGACY,
        ConfidenceTier.LOW,
        year_range_display="Vintage (pre-1990s)",
        country_guess="Japan",
        notes=f"A-prefix serials are vintage Japanese production. {VINTAGE_NOTES}",
        needs_emperor_code=True,
        prefix="A",
    )


def _rule_nine_digit(serial: str, match: re.Match[str]) -> ParseResult:
    yy, month_digits = int(match.group(1)), match.group(2)
    year: Optional[int] = None
    if 0 <= yy <= 25:
        year = 2000 + yy
    elif 80 <= yy <= 99:
        year = 1900 + yy
    month = _valid_month(month_digits)
    notes = "Nine digit serial read as YYMM followed by a five digit sequence."
    if year is None:
        notes += f" Year digits '{match.group(1)}' do not map to a known year."
    if month is None:
        notes += f" Month digits '{month_digits}' are not a valid month."
    return _result(
        serial,
        SerialFormat.NINE_DIGIT,
        ConfidenceTier.MEDIUM,
        estimated_year=year,
        estimated_month=month,
        year_range_display=str(year) if year is not None else "Unknown",
        notes=notes,
    )


def _rule_yairi(serial: str, match: re.Match[str]) -> ParseResult:
    return _result(
        serial,
        SerialFormat.YAIRI,
        ConfidenceTier.LOW,
        year_range_display="Unknown (sequence number)",
        country_guess="Japan",
        notes=YAIRI_NOTES,
        is_yairi=True,
        needs_emperor_code=False,
    )


def _rule_six_digit(serial: str, match: re.Match[str]) -> ParseResult:
    number = int(serial)
    return _result(
        serial,
        SerialFormat.LEGACY,
        ConfidenceTier.LOW,
        year_range_display="1980s" if number < 500000 else "1980s-1990s",
        country_guess="Japan",
        notes=VINTAGE_NOTES,
        needs_emperor_code=True,
    )


def _rule_numeric(serial: str, match: re.Match[str]) -> ParseResult:
    # Compared by significant digits; int() rejects very long strings.
    below_100000 = len(serial.lstrip("0")) <= 5
    return _result(
        serial,
        SerialFormat.LEGACY,
        ConfidenceTier.LOW,
        year_range_display="1960s-1980s" if below_100000 else "Unknown",
        country_guess="Japan",
        notes=VINTAGE_NOTES,
        needs_emperor_code=True,
    )


@dataclass(frozen=True)
class SerialRule:
    """A named serial format: a full-match regex and its result builder."""

    name: str
    pattern: re.Pattern[str]
    build: Callable[[str, re.Match[str]], ParseResult]


# Order matters: the first rule whose pattern matches decides the format.
# Six digit numerics are caught by the Yairi rule, so "six_digit_legacy" only
# documents the older factory range and never fires.
SERIAL_RULES: tuple[SerialRule, ...] = (
    SerialRule("e_prefix", re.compile(r"E(\d{2})(\d{2})(\d+)"), _rule_e),
    SerialRule("cs_prefix", re.compile(r"CS(\d{2})(\d{2})(\d+)"), _rule_cs),
    SerialRule("cd_prefix", re.compile(r"CD(\d{2})(\d{2})(\d+)"), _rule_cd),
    SerialRule("f_prefix", re.compile(r"F(\d{1,3})(\d*)"), _rule_f),
    SerialRule("s_prefix", re.compile(r"S(\d{2})(\d*)"), _rule_s),
    SerialRule("a_prefix", re.compile(r"A(\d+)"), _rule_a),
    SerialRule("nine_digit", re.compile(r"(\d{2})(\d{2})(\d{5})"), _rule_nine_digit),
    SerialRule("yairi", re.compile(r"\d{4,6}"), _rule_yairi),
    SerialRule("six_digit_legacy", re.compile(r"\d{6}"), _rule_six_digit),
    SerialRule("numeric_legacy", re.compile(r"\d+"), _rule_numeric),
)


def _unknown(serial: str) -> ParseResult:
    return _result(
        serial,
        SerialFormat.UNKNOWN,
        ConfidenceTier.LOW,
        notes=(
            "Serial number format not recognized. Please verify the serial "
            "number is entered correctly."
        ),
    )


def classify_serial(serial: str) -> ParseResult:
    """Classify a serial number and estimate its build date.

    Args:
        serial: Raw serial as entered; it is trimmed and uppercased first.

    Returns:
        The ParseResult of the first matching rule, or an ``unknown`` result
        when no rule matches.

    Raises:
        MissingSerialError: If the serial is empty after trimming.
    """
    cleaned = normalize_serial(serial)
    for rule in SERIAL_RULES:
        match = rule.pattern.fullmatch(cleaned)
        if match is None:
            continue
        logger.debug("Serial %s matched rule %s", cleaned, rule.name)
        return rule.build(cleaned, match)
    logger.debug("Serial %s matched no rule", cleaned)
    return _unknown(cleaned)
