"""
Tests for free-text service to specialty resolution.
"""

from __future__ import annotations

from app.application.utils.specialty import resolve_specialty


def test_known_keywords_resolve_to_specialties():
    assert resolve_specialty("Pro Cleaning") == "Cleaning"
    assert resolve_specialty("Leak Fixer") == "Plumbing"
    assert resolve_specialty("Leaky faucet") == "Plumbing"
    assert resolve_specialty("PLUMBER needed") == "Plumbing"
    assert resolve_specialty("Volt Masters") == "Electrical"
    assert resolve_specialty("electrician") == "Electrical"
    assert resolve_specialty("Wood Works") == "Carpentry"
    assert resolve_specialty("Safe Guard") == "Security"
    assert resolve_specialty("night security") == "Security"


def test_first_matching_rule_wins():
    assert resolve_specialty("clean the leaky pipe") == "Cleaning"
    assert resolve_specialty("electric wood saw") == "Electrical"


def test_unknown_text_is_returned_unchanged():
    assert resolve_specialty("Gardening") == "Gardening"
    assert resolve_specialty("") == ""
    assert resolve_specialty(None) == ""
