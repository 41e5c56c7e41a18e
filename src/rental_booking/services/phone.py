"""Country-aware phone number validation and formatting."""

import re
from dataclasses import dataclass

DEFAULT_COUNTRY_CODE = "91"


@dataclass(frozen=True)
class CountryRule:
    """Digit-count rule for a dialing code."""

    code: str
    name: str
    digits: int
    max_digits: int | None = None

    @property
    def digit_range(self) -> tuple[int, int]:
        return self.digits, self.max_digits or self.digits


COUNTRY_CODES: tuple[CountryRule, ...] = (
    CountryRule("91", "India", 10),
    CountryRule("1", "USA/Canada", 10),
    CountryRule("44", "United Kingdom", 10),
    CountryRule("971", "UAE", 9),
    CountryRule("966", "Saudi Arabia", 9),
    CountryRule("65", "Singapore", 8),
    CountryRule("60", "Malaysia", 9, max_digits=10),
    CountryRule("61", "Australia", 9),
    CountryRule("64", "New Zealand", 9),
    CountryRule("27", "South Africa", 9),
)

GENERIC_DIGIT_RANGE = (7, 15)
_FALLBACK_DIGITS = 10
_NON_DIGITS = re.compile(r"\D")
_RULES = {rule.code: rule for rule in COUNTRY_CODES}


def find_country(country_code: str | None) -> CountryRule | None:
    """Return the rule for a dialing code, if it is one of the known countries."""
    return _RULES.get(country_code or "")


def digits_only(phone_number: str | None) -> str:
    """Strip every non-digit character."""
    return _NON_DIGITS.sub("", phone_number or "")


def expected_digit_count(country_code: str | None) -> int:
    """Return the nominal digit count shown to users for a country."""
    rule = find_country(country_code)
    return rule.digits if rule else _FALLBACK_DIGITS


def digit_range(country_code: str | None) -> tuple[int, int]:
    """Return the inclusive digit-count bounds used for validation."""
    rule = find_country(country_code)
    return rule.digit_range if rule else GENERIC_DIGIT_RANGE


def country_label(country_code: str | None) -> str:
    rule = find_country(country_code)
    return rule.name if rule else "selected country"


def is_valid_phone_number(
    phone_number: str | None, country_code: str | None = DEFAULT_COUNTRY_CODE
) -> bool:
    """Return True when the digit count matches the country's rule."""
    low, high = digit_range(country_code)
    return low <= len(digits_only(phone_number)) <= high


def format_phone_number(
    phone_number: str | None, country_code: str | None = DEFAULT_COUNTRY_CODE
) -> str:
    """Return the number prefixed with its dialing code, as the provider expects.

    Numbers that already start with the dialing code are returned unchanged,
    so applying this twice gives the same result.
    """
    digits = digits_only(phone_number)
    prefix = digits_only(country_code)
    if digits.startswith(prefix):
        return digits
    return f"{prefix}{digits}"
