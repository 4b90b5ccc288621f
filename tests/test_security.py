"""
Unit tests for query parameter validation.
"""
import pytest

from app.middleware.security import Security


@pytest.fixture
def sec():
    return Security()


class TestEnums:

    @pytest.mark.parametrize("category", ["business", "technology", "sports"])
    def test_valid_categories(self, sec, category):
        assert sec.is_valid_category(category)

    @pytest.mark.parametrize("category", ["politics", "Technology", ""])
    def test_invalid_categories(self, sec, category):
        assert not sec.is_valid_category(category)

    def test_sort_by(self, sec):
        assert sec.is_valid_sort_by("publishedAt")
        assert not sec.is_valid_sort_by("date")

    def test_language(self, sec):
        assert sec.is_valid_language("en")
        assert sec.is_valid_language("zh")
        assert not sec.is_valid_language("jp")


class TestDates:

    @pytest.mark.parametrize("date", ["2024-01-31", "2024-02-29"])
    def test_valid(self, sec, date):
        assert sec.is_valid_date(date)

    @pytest.mark.parametrize("date", ["2024-02-30", "2024-13-01", "24-01-01", "2024/01/01", "2024-01-01T00:00", ""])
    def test_invalid(self, sec, date):
        assert not sec.is_valid_date(date)


class TestPaging:

    def test_page(self, sec):
        assert sec.is_valid_page(1)
        assert not sec.is_valid_page(0)

    def test_page_size(self, sec):
        assert sec.is_valid_page_size(1)
        assert sec.is_valid_page_size(100)
        assert not sec.is_valid_page_size(0)
        assert not sec.is_valid_page_size(101)


class TestDomains:

    def test_plain_domains(self, sec):
        assert sec.normalize_domains("techcrunch.com,bbc.co.uk") == "techcrunch.com,bbc.co.uk"

    def test_urls_and_subdomains_reduce_to_registrable_domain(self, sec):
        result = sec.normalize_domains("https://www.bbc.co.uk/news, Engadget.com")
        assert result == "bbc.co.uk,engadget.com"

    def test_duplicates_collapse(self, sec):
        assert sec.normalize_domains("wsj.com, www.wsj.com") == "wsj.com"

    @pytest.mark.parametrize("value", ["not a domain", "user:pass@example.com", "localhost", "", ",,"])
    def test_invalid(self, sec, value):
        assert sec.normalize_domains(value) is None
