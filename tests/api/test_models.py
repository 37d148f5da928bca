"""
Unit tests for request and response models.
"""

from api.models import BookPayload, NewsResponse, is_blank, missing_fields


class TestPresenceCheck:
    """Test cases for the book presence check."""

    def test_complete_payload(self):
        outcome = BookPayload(title="Dune", author="Herbert", year=1965, genre="SciFi").check()
        assert outcome.ok
        assert outcome.missing == []
        assert outcome.book.title == "Dune"
        assert outcome.book.year == 1965

    def test_empty_payload(self):
        outcome = BookPayload().check()
        assert not outcome.ok
        assert outcome.missing == ["title", "author", "year", "genre"]
        assert outcome.book is None

    def test_blank_strings_are_missing(self):
        outcome = BookPayload(title=" ", author="Herbert", year=1965, genre="").check()
        assert outcome.missing == ["title", "genre"]

    def test_numeric_string_year_is_coerced(self):
        outcome = BookPayload(title="Dune", author="Herbert", year="1965", genre="SciFi").check()
        assert outcome.ok
        assert outcome.book.year == 1965

    def test_is_blank(self):
        assert is_blank(None)
        assert is_blank("")
        assert is_blank("\t")
        assert not is_blank("x")
        assert not is_blank(1965)
        assert is_blank(0)
        assert is_blank(0.0)

    def test_missing_fields_ignores_extra_keys(self):
        values = {"title": "Dune", "author": "Herbert", "year": 1965, "genre": "SciFi", "isbn": None}
        assert missing_fields(values) == []


def test_news_response_defaults():
    response = NewsResponse()
    assert response.totalResults == 0
    assert response.articles == []
