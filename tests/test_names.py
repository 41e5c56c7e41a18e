"""Tests for the credit-card vs license name matcher."""

from rental_booking.services.names import (
    extract_name_parts,
    format_match_message,
    match_names,
    normalize_name,
)


def test_normalize_name_strips_punctuation_and_spacing() -> None:
    assert normalize_name("  John   A. Smith-Jones, Jr ") == "john a smith jones jr"
    assert normalize_name(None) == ""


def test_extract_name_parts_drops_initials() -> None:
    assert extract_name_parts("John A. Smith") == ["john", "smith"]


def test_middle_initial_still_matches() -> None:
    result = match_names("John A. Smith", "john smith")

    assert result.is_valid
    assert result.confidence >= 0.8


def test_exact_match_after_normalization() -> None:
    result = match_names("JOHN SMITH", "john  smith")

    assert result.is_valid
    assert result.confidence == 1.0
    assert result.reason == "Exact match"


def test_different_people_do_not_match() -> None:
    result = match_names("John Smith", "Jane Doe")

    assert not result.is_valid
    assert result.confidence < 0.5
    assert "do not match" in format_match_message(result)


def test_partial_match_needs_review() -> None:
    result = match_names("John Smith", "John Doe")

    assert not result.is_valid
    assert result.confidence == 0.5
    assert "manual review" in result.reason


def test_substring_tokens_count_as_matches() -> None:
    result = match_names("Chris Johnson", "Christopher Johnson")

    assert result.is_valid
    assert result.confidence == 1.0


def test_empty_name_is_rejected() -> None:
    result = match_names("", "John Smith")

    assert not result.is_valid
    assert result.confidence == 0


def test_initials_only_name_does_not_divide_by_zero() -> None:
    result = match_names("J. S.", "John Smith")

    assert not result.is_valid
    assert result.confidence == 0.0
