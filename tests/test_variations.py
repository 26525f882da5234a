"""Tests for name variation generation."""

import pytest

from calendar_agent.calendar.variations import generate_name_variations


def test_single_word_variations():
    """Test variations for a single lowercase word."""
    variations = generate_name_variations("sendblue")

    assert variations == [
        "sendblue",
        "SENDBLUE",
        "sendbl",
        "sendblue Inc",
        "sendblue LLC",
        "sendblue Ltd",
        "sendblue Corp",
        "sendblue Co",
    ]


def test_multi_word_company():
    """Test variations for a multi-word company name."""
    variations = generate_name_variations("Acme Corporation")

    assert "Acme Corporation" in variations
    assert "acme corporation" in variations
    assert "ACME CORPORATION" in variations
    assert "AcmeCorporation" in variations
    assert "Acme-Corporation" in variations
    assert "Acme.Corporation" in variations
    assert "acmeCorporation" in variations
    assert "AC" in variations
    # Too long for suffixes to be appended
    assert not any(v.endswith(" Inc") for v in variations)


def test_company_suffix_is_stripped():
    """Test that a known suffix yields the bare name."""
    variations = generate_name_variations("Tech Inc")

    assert variations == [
        "Tech Inc",
        "tech inc",
        "TECH INC",
        "TechInc",
        "Tech-Inc",
        "Tech.Inc",
        "techInc",
        "TI",
        "Tech",
        "Tech Inc LLC",
        "Tech Inc Ltd",
        "Tech Inc Corp",
        "Tech Inc Co",
    ]


def test_camel_and_pascal_case():
    """Test camelCase, PascalCase and acronym for two words."""
    variations = generate_name_variations("send blue")

    assert "sendBlue" in variations
    assert "SendBlue" in variations
    assert "SB" in variations


def test_case_transforms_lower_the_rest_of_each_word():
    variations = generate_name_variations("ACME widgets")

    assert "acmeWidgets" in variations
    assert "AcmeWidgets" in variations


def test_input_is_trimmed_and_whitespace_collapsed():
    variations = generate_name_variations("  big   data  ")

    assert variations[0] == "big   data"
    assert "bigdata" in variations
    assert "big-data" in variations
    assert "big.data" in variations


def test_short_single_word_has_no_partial_match():
    variations = generate_name_variations("acme")

    assert variations == [
        "acme",
        "ACME",
        "acme Inc",
        "acme LLC",
        "acme Ltd",
        "acme Corp",
        "acme Co",
    ]


def test_three_word_query_gets_no_suffixes():
    variations = generate_name_variations("big blue box")

    assert "BBB" in variations
    assert not any(v.endswith(" Co") for v in variations)


def test_empty_input_yields_only_empty_string():
    assert generate_name_variations("") == [""]
    assert generate_name_variations("   ") == [""]


def test_non_ascii_passes_through():
    variations = generate_name_variations("café münchen")

    assert "CAFÉ MÜNCHEN" in variations
    assert "CM" in variations


@pytest.mark.parametrize("text", ["sendblue", "Tech Inc", "a b c", "meeting@company.com"])
def test_variations_are_unique_and_deterministic(text):
    first = generate_name_variations(text)
    second = generate_name_variations(text)

    assert first == second
    assert len(first) == len(set(first))
    assert first[0] == text.strip()
    assert text.lower() in first
    assert text.upper() in first
