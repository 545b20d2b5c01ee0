"""Tests for normalizer functions."""

from gazette_watch.core.normalizer import (
    clean_term,
    collapse_whitespace,
    normalize,
    normalize_term,
    parse_terms,
    strip_diacritics,
)


class TestNormalize:
    """Tests for normalize function."""

    def test_diacritics_and_case(self):
        """Test accented upper-case text folds to plain lower-case."""
        assert normalize("É PALÁCIO") == "e palacio"
        assert normalize("É PALÁCIO") == normalize("e palacio")

    def test_portuguese_letters(self):
        """Test cedilla and tilde are folded."""
        assert normalize("Licitação Pública") == "licitacao publica"

    def test_whitespace_collapsed(self):
        """Test whitespace runs become one space."""
        assert normalize("a \t\n\n  b") == "a b"

    def test_non_breaking_space(self):
        """Test NBSP counts as whitespace."""
        assert normalize("a\u00a0\u00a0b") == "a b"

    def test_empty_and_none(self):
        """Test empty inputs give an empty string."""
        assert normalize("") == ""
        assert normalize(None) == ""

    def test_deterministic(self):
        """Test normalizing twice changes nothing."""
        once = normalize("Diário  OFICIAL")
        assert normalize(once) == once


class TestTerms:
    """Tests for term helpers."""

    def test_strip_diacritics_keeps_case(self):
        assert strip_diacritics("Palácio") == "Palacio"

    def test_normalize_term_trims(self):
        assert normalize_term("  Kaline  ") == "kaline"

    def test_clean_term_keeps_accents(self):
        """Test display form keeps accents but is trimmed and lower-cased."""
        assert clean_term("  Palácio da Redenção ") == "palácio da redenção"

    def test_parse_terms(self):
        """Test comma-separated parsing drops empties and duplicates."""
        assert parse_terms("Prefeitura, kaline ,, prefeitura") == ["prefeitura", "kaline"]

    def test_parse_terms_empty(self):
        assert parse_terms("") == []
        assert parse_terms(None) == []

    def test_collapse_whitespace_preserves_text(self):
        assert collapse_whitespace("  Diário\n Oficial ") == "Diário Oficial"
