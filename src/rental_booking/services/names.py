"""Fuzzy comparison of a credit-card name against a driver's license name."""

import re
from dataclasses import dataclass

HIGH_CONFIDENCE = 0.8
PARTIAL_CONFIDENCE = 0.5

_WHITESPACE = re.compile(r"\s+")
_PUNCTUATION = re.compile(r"[.,\-]")


@dataclass(frozen=True)
class NameMatch:
    """Outcome of comparing two personal names."""

    is_valid: bool
    confidence: float
    reason: str


def normalize_name(name: str | None) -> str:
    """Lower-case a name, drop common punctuation and collapse whitespace."""
    if not name:
        return ""
    collapsed = _WHITESPACE.sub(" ", name.lower().strip())
    return _WHITESPACE.sub(" ", _PUNCTUATION.sub(" ", collapsed)).strip()


def extract_name_parts(name: str | None) -> list[str]:
    """Return name tokens longer than one character, so initials are ignored."""
    return [part for part in normalize_name(name).split(" ") if len(part) > 1]


def match_names(credit_card_name: str | None, license_name: str | None) -> NameMatch:
    """Decide whether two names likely refer to the same person."""
    if not credit_card_name or not license_name:
        return NameMatch(
            is_valid=False,
            confidence=0.0,
            reason="Both names are required for validation",
        )

    if normalize_name(credit_card_name) == normalize_name(license_name):
        return NameMatch(is_valid=True, confidence=1.0, reason="Exact match")

    card_parts = extract_name_parts(credit_card_name)
    license_parts = extract_name_parts(license_name)
    if len(card_parts) <= len(license_parts):
        shorter, longer = card_parts, license_parts
    else:
        shorter, longer = license_parts, card_parts

    matched = sum(
        1
        for part in shorter
        if any(other in part or part in other for other in longer)
    )
    confidence = matched / len(shorter) if shorter else 0.0

    if confidence >= HIGH_CONFIDENCE:
        return NameMatch(
            is_valid=True,
            confidence=confidence,
            reason="High similarity between names",
        )
    if confidence >= PARTIAL_CONFIDENCE:
        return NameMatch(
            is_valid=False,
            confidence=confidence,
            reason="Partial match - manual review may be needed",
        )
    return NameMatch(
        is_valid=False,
        confidence=confidence,
        reason="Names do not appear to match",
    )


def format_match_message(result: NameMatch) -> str:
    """Return a short user-facing summary of a name match."""
    if result.is_valid:
        return "Names match successfully"
    if result.confidence > PARTIAL_CONFIDENCE:
        return "Names partially match - please verify they refer to the same person"
    return (
        "Names do not match - please ensure the credit card and driver's "
        "license belong to the same person"
    )
