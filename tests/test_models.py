import pytest

from webunlock.models import ScrapeOptions, ScrapeRequest, WaitUntil


class TestSelectorList:

    def test_selectors_win_over_selector(self):
        request = ScrapeRequest(url="https://example.com", selector="h1", selectors=["p", "a"])
        assert request.selector_list() == ["p", "a"]

    @pytest.mark.parametrize("selectors", [[], ["", " "], ""])
    def test_empty_selectors_fall_back_to_selector(self, selectors):
        request = ScrapeRequest(url="https://example.com", selector=" h1 ", selectors=selectors)
        assert request.selector_list() == ["h1"]

    def test_duplicates_kept_and_blanks_dropped(self):
        request = ScrapeRequest(url="https://example.com", selectors=["p", "", "p"])
        assert request.selector_list() == ["p", "p"]

    def test_nothing_usable(self):
        assert ScrapeRequest(url="https://example.com").selector_list() == []


def test_option_defaults_and_wire_names():
    options = ScrapeOptions.model_validate({"waitUntil": "load", "fullPage": True, "userAgent": " "})

    assert options.wait_until is WaitUntil.LOADED
    assert options.full_page is True
    assert options.user_agent is None
    assert options.timeout == 10000
    assert options.retries == 0
