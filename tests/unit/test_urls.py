from __future__ import annotations

import pytest

from crumb.services.errors import InvalidURLError
from crumb.services.urls import clean_url_input, normalize_recipe_url


class TestCleanUrlInput:
    def test_trims_and_collapses_whitespace(self) -> None:
        assert clean_url_input("  https://example.com/a\n\n b  ") == "https://example.com/a b"

    def test_removes_zero_width_characters(self) -> None:
        assert clean_url_input("https://exa\u200bmple.com") == "https://example.com"


class TestNormalizeRecipeUrl:
    def test_adds_https_when_scheme_missing(self) -> None:
        assert normalize_recipe_url("example.com/recipe") == "https://example.com/recipe"

    def test_host_with_port(self) -> None:
        assert normalize_recipe_url("localhost:8080/soup") == "https://localhost:8080/soup"

    def test_protocol_relative(self) -> None:
        assert normalize_recipe_url("//example.com/recipe") == "https://example.com/recipe"

    def test_keeps_http_and_https(self) -> None:
        assert normalize_recipe_url("http://example.com/x") == "http://example.com/x"
        assert normalize_recipe_url("https://example.com/x") == "https://example.com/x"

    def test_encodes_spaces(self) -> None:
        assert normalize_recipe_url("https://example.com/a b") == "https://example.com/a%20b"

    @pytest.mark.parametrize("value", ["file:///etc/passwd", "javascript:alert(1)", "ftp://example.com/x"])
    def test_rejects_other_schemes(self, value: str) -> None:
        with pytest.raises(InvalidURLError, match="http://"):
            normalize_recipe_url(value)

    @pytest.mark.parametrize("value", ["", "   ", "\u200b"])
    def test_rejects_empty(self, value: str) -> None:
        with pytest.raises(InvalidURLError):
            normalize_recipe_url(value)
