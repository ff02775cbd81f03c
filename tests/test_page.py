"""Tests for per-article operations."""

import pytest

from wikiclient import Wikipedia
from wikiclient.errors import DecodeFailure, MissingPath, RedirectLoop, TransportFailure
from wikiclient.models import Category, LangLink, Link, Reference

from conftest import load_fixture


API_URL = "https://en.wikipedia.org/w/api.php"

SUMMARY = [
    ("prop", "extracts"),
    ("explaintext", ""),
    ("exintro", ""),
    ("redirects", ""),
    ("format", "json"),
    ("action", "query"),
]


def redirect_to(title: str) -> dict:
    return {"query": {"redirects": [{"from": "x", "to": title}]}}


class TestContent:
    """Tests for text and HTML content."""

    def test_get_content(self, wiki, transport):
        transport.push({"query": {"pages": {"a": {"extract": "hello"}}}})
        page = wiki.page_from_pageid("4138548")
        assert page.get_content() == "hello"
        assert transport.arguments == [
            [
                ("prop", "extracts|revisions"),
                ("explaintext", ""),
                ("rvprop", "ids"),
                ("redirects", ""),
                ("format", "json"),
                ("action", "query"),
                ("pageids", "4138548"),
            ]
        ]

    def test_get_html_content(self, wiki, transport):
        transport.push({"query": {"pages": {"a": {"revisions": [{"*": "<div>hello</div>"}]}}}})
        page = wiki.page_from_pageid("4138548")
        assert page.get_html_content() == "<div>hello</div>"
        assert transport.arguments == [
            [
                ("prop", "revisions"),
                ("rvprop", "content"),
                ("rvlimit", "1"),
                ("rvparse", ""),
                ("redirects", ""),
                ("format", "json"),
                ("action", "query"),
                ("pageids", "4138548"),
            ]
        ]

    def test_get_summary(self, wiki, transport):
        transport.push({"query": {"pages": {"a": {"extract": "hello"}}}})
        page = wiki.page_from_title("Parkinson's law of triviality")
        assert page.get_summary() == "hello"
        assert transport.arguments == [SUMMARY + [("titles", "Parkinson's law of triviality")]]

    def test_missing_extract_raises(self, wiki, transport):
        """Test a page without extract is a structural failure."""
        transport.push({"query": {"pages": {"-1": {"missing": ""}}}})
        with pytest.raises(MissingPath):
            wiki.page_from_title("Nope").get_content()


class TestRedirects:
    """Tests for transparent redirect resolution."""

    def test_summary_follows_redirect(self, wiki, transport):
        """Test the whole operation is re-issued against the redirect target."""
        transport.push(redirect_to("hello world"))
        transport.push({"query": {"pages": {"a": {"extract": "hello"}}}})

        page = wiki.page_from_title("Parkinson's law of triviality")
        assert page.get_summary() == "hello"
        assert transport.urls == [API_URL, API_URL]
        assert transport.arguments == [
            SUMMARY + [("titles", "Parkinson's law of triviality")],
            SUMMARY + [("titles", "hello world")],
        ]

    def test_pageid_page_redirect_uses_title(self, wiki, transport):
        """Test a redirect from a page id restarts with a title identifier."""
        transport.push(redirect_to("Target"))
        transport.push({"query": {"pages": {"a": {"extract": "body"}}}})
        assert wiki.page_from_pageid("1").get_content() == "body"
        assert transport.arguments[1][-1] == ("titles", "Target")

    def test_chained_redirects(self, wiki, transport):
        """Test a redirect target may itself redirect."""
        transport.push(redirect_to("B"))
        transport.push(redirect_to("C"))
        transport.push({"query": {"pages": {"a": {"revisions": [{"*": "html"}]}}}})
        assert wiki.page_from_title("A").get_html_content() == "html"
        assert [args[-1] for args in transport.arguments] == [
            ("titles", "A"),
            ("titles", "B"),
            ("titles", "C"),
        ]

    def test_redirect_cycle_raises(self, wiki, transport):
        """Test revisiting a title raises RedirectLoop."""
        transport.push(redirect_to("B"))
        transport.push(redirect_to("C"))
        transport.push(redirect_to("B"))
        with pytest.raises(RedirectLoop) as exc_info:
            wiki.page_from_title("A").get_summary()
        assert exc_info.value.chain == ("B", "C", "B")
        assert len(transport.arguments) == 3

    def test_redirect_depth_limit(self, transport):
        """Test more than max_redirects hops raises RedirectLoop."""
        wiki = Wikipedia(transport, max_redirects=2)
        for title in ("B", "C", "D"):
            transport.push(redirect_to(title))
        with pytest.raises(RedirectLoop):
            wiki.page_from_title("A").get_summary()
        assert len(transport.arguments) == 3

    def test_self_redirect_raises_without_resending(self, wiki, transport):
        """Test a page redirecting to itself fails after one request."""
        transport.push(redirect_to("A"))
        with pytest.raises(RedirectLoop) as exc_info:
            wiki.page_from_title("A").get_summary()
        assert exc_info.value.chain == ("A",)
        assert len(transport.arguments) == 1

    def test_redirect_back_to_start_raises(self, wiki, transport):
        """Test A -> B -> A stops before asking for A again."""
        transport.push(redirect_to("B"))
        transport.push(redirect_to("A"))
        with pytest.raises(RedirectLoop) as exc_info:
            wiki.page_from_title("A").get_summary()
        assert exc_info.value.chain == ("B", "A")
        assert [args[-1] for args in transport.arguments] == [("titles", "A"), ("titles", "B")]

    def test_start_title_is_not_a_hop(self, transport):
        """Test the starting title does not use up the redirect budget."""
        wiki = Wikipedia(transport, max_redirects=1)
        transport.push(redirect_to("B"))
        transport.push({"query": {"pages": {"a": {"extract": "body"}}}})
        assert wiki.page_from_title("A").get_summary() == "body"

    def test_get_pageid_follows_redirect(self, wiki, transport):
        transport.push(redirect_to("Law of triviality"))
        transport.push({"query": {"pages": {"4138548": {"title": "Law of triviality"}}}})
        assert wiki.page_from_title("Bikeshedding").get_pageid() == "4138548"
        assert transport.arguments[1][-1] == ("titles", "Law of triviality")

    def test_get_title_redirect_returns_target(self, wiki, transport):
        """Test get_title on a redirected id resolves to the target title."""
        transport.push(redirect_to("Law of triviality"))
        assert wiki.page_from_pageid("1").get_title() == "Law of triviality"
        assert len(transport.arguments) == 1


class TestIdentity:
    """Tests for get_title() and get_pageid()."""

    def test_title_known_locally(self, wiki, transport):
        assert wiki.page_from_title("World").get_title() == "World"
        assert transport.arguments == []

    def test_pageid_known_locally(self, wiki, transport):
        assert wiki.page_from_pageid("123").get_pageid() == "123"
        assert transport.arguments == []

    def test_title_from_pageid(self, wiki, transport):
        transport.push({"query": {"pages": {"4138548": {"title": "Law of triviality"}}}})
        assert wiki.page_from_pageid("4138548").get_title() == "Law of triviality"
        assert transport.arguments == [
            [
                ("prop", "info|pageprops"),
                ("inprop", "url"),
                ("ppprop", "disambiguation"),
                ("redirects", ""),
                ("format", "json"),
                ("action", "query"),
                ("pageids", "4138548"),
            ]
        ]

    def test_pageid_from_title(self, wiki, transport):
        transport.push({"query": {"pages": {"4138548": {"title": "Law of triviality"}}}})
        assert wiki.page_from_title("Law of triviality").get_pageid() == "4138548"


class TestCoordinates:
    """Tests for get_coordinates()."""

    def test_coordinates(self, wiki, transport):
        transport.push({"query": {"pages": {"a": {"coordinates": [{"lat": 2.1, "lon": -1.3}]}}}})
        assert wiki.page_from_title("World").get_coordinates() == (2.1, -1.3)
        assert transport.arguments == [
            [
                ("prop", "coordinates"),
                ("colimit", "max"),
                ("redirects", ""),
                ("format", "json"),
                ("action", "query"),
                ("titles", "World"),
            ]
        ]

    def test_no_coordinates(self, wiki, transport):
        transport.push({"query": {"pages": {"a": {}}}})
        assert wiki.page_from_title("World").get_coordinates() is None

    def test_integer_coordinates(self, wiki, transport):
        transport.push({"query": {"pages": {"a": {"coordinates": [{"lat": 2, "lon": 3}]}}}})
        assert wiki.page_from_title("World").get_coordinates() == (2.0, 3.0)

    def test_malformed_coordinates_raise(self, wiki, transport):
        transport.push({"query": {"pages": {"a": {"coordinates": [{"lat": "north"}]}}}})
        with pytest.raises(MissingPath):
            wiki.page_from_title("World").get_coordinates()


class TestSections:
    """Tests for get_sections() and get_section_content()."""

    def test_sections(self, wiki, transport):
        transport.push({"parse": {"sections": [{"line": "hello"}, {"line": "world"}]}})
        assert wiki.page_from_pageid("123").get_sections() == ["hello", "world"]
        assert transport.arguments == [
            [
                ("prop", "sections"),
                ("format", "json"),
                ("action", "parse"),
                ("pageid", "123"),
            ]
        ]

    def test_sections_by_title_resolves_pageid(self, wiki, transport):
        """Test a title page first resolves its id, then parses by id."""
        transport.push({"query": {"pages": {"4138548": {}}}})
        transport.push({"parse": {"sections": [{"line": "Argument"}]}})
        assert wiki.page_from_title("Bikeshedding").get_sections() == ["Argument"]
        assert transport.arguments[1][-1] == ("pageid", "4138548")

    def test_section_content(self, wiki, transport):
        transport.push(load_fixture("content.json"))
        text = wiki.page_from_pageid("4138548").get_section_content("Examples")
        assert text == "\nA finance committee meeting spends its time on trivia.\n\n"

    def test_last_section_runs_to_end(self, wiki, transport):
        transport.push(load_fixture("content.json"))
        assert wiki.page_from_pageid("4138548").get_section_content("See also") == "\nBikeshedding"

    def test_missing_section(self, wiki, transport):
        transport.push(load_fixture("content.json"))
        assert wiki.page_from_pageid("4138548").get_section_content("History") is None


class TestCollections:
    """Tests for the paginated collections."""

    def test_references(self, wiki, transport):
        transport.push(
            {
                "continue": {"lol": "1"},
                "query": {"pages": {"a": {"extlinks": [{"*": "//example.com/reference1.html"}]}}},
            }
        )
        transport.push(
            {"query": {"pages": {"a": {"extlinks": [{"*": "//example.com/reference2.html"}]}}}}
        )
        refs = wiki.page_from_title("World").get_references().collect()
        assert refs == [
            Reference(url="http://example.com/reference1.html"),
            Reference(url="http://example.com/reference2.html"),
        ]
        common = [
            ("prop", "extlinks"),
            ("ellimit", "max"),
            ("format", "json"),
            ("action", "query"),
            ("titles", "World"),
        ]
        assert transport.arguments == [common + [("continue", "")], common + [("lol", "1")]]

    def test_links(self, wiki, transport):
        transport.push(
            {"continue": {"lol": "1"}, "query": {"pages": {"a": {"links": [{"title": "Hello"}]}}}}
        )
        transport.push({"query": {"pages": {"a": {"links": [{"title": "World"}]}}}})
        wiki.config.links_results = 3
        links = wiki.page_from_title("World").get_links().collect()
        assert links == [Link(title="Hello"), Link(title="World")]
        assert transport.arguments[0] == [
            ("prop", "links"),
            ("plnamespace", "0"),
            ("pllimit", "3"),
            ("format", "json"),
            ("action", "query"),
            ("titles", "World"),
            ("continue", ""),
        ]

    def test_categories(self, wiki, transport):
        transport.push(
            {
                "continue": {"lol": "1"},
                "query": {"pages": {"a": {"categories": [{"title": "Hello"}]}}},
            }
        )
        transport.push(
            {"query": {"pages": {"a": {"categories": [{"title": "Category: World"}]}}}}
        )
        categories = wiki.page_from_title("World").get_categories().collect()
        assert categories == [Category(title="Hello"), Category(title="World")]
        assert transport.arguments[1] == [
            ("prop", "categories"),
            ("cllimit", "max"),
            ("format", "json"),
            ("action", "query"),
            ("titles", "World"),
            ("lol", "1"),
        ]

    def test_langlinks(self, wiki, transport):
        transport.push(load_fixture("langlinks.json"))
        langlinks = wiki.page_from_title("Law of triviality").get_langlinks().collect()
        assert LangLink(lang="nl", title="Trivialiteitswet van Parkinson") in langlinks
        assert LangLink(lang="fr", title="Loi de futilité de Parkinson") in langlinks
        assert LangLink(lang="xx", title=None) in langlinks
        assert ("lllimit", "max") in transport.arguments[0]

    def test_page_without_collection_key(self, wiki, transport):
        """Test a page lacking the item array yields nothing but keeps going."""
        transport.push({"continue": {"c": "1"}, "query": {"pages": {"a": {"title": "World"}}}})
        transport.push({"query": {"pages": {"a": {"links": [{"title": "Late"}]}}}})
        assert wiki.page_from_title("World").get_links().collect() == [Link(title="Late")]
        assert len(transport.arguments) == 2

    def test_no_pages_ends_stream(self, wiki, transport):
        """Test an empty page map ends the stream even with a continuation."""
        transport.push({"continue": {"c": "1"}, "query": {"pages": {}}})
        assert wiki.page_from_title("World").get_links().collect() == []
        assert len(transport.arguments) == 1

    def test_missing_pages_on_first_request_raises(self, wiki, transport):
        transport.push({"query": {}})
        with pytest.raises(MissingPath):
            wiki.page_from_title("World").get_categories()

    def test_mid_stream_failure_is_reported(self, wiki, transport):
        """Test a failing second page ends the stream and is kept on .error."""
        transport.push(
            {"continue": {"c": "1"}, "query": {"pages": {"a": {"links": [{"title": "A"}]}}}}
        )
        transport.push(TransportFailure("down"))
        links = wiki.page_from_title("World").get_links()
        assert links.collect() == [Link(title="A")]
        assert isinstance(links.error, TransportFailure)

    def test_strict_mid_stream_failure_raises(self, wiki, transport):
        transport.push(
            {"continue": {"c": "1"}, "query": {"pages": {"a": {"links": [{"title": "A"}]}}}}
        )
        transport.push("not json")
        links = wiki.page_from_title("World").get_links(strict=True)
        assert next(links) == Link(title="A")
        with pytest.raises(DecodeFailure):
            next(links)

    def test_independent_iterators(self, wiki, transport):
        """Test two collections of one page advance independently."""
        transport.push({"query": {"pages": {"a": {"links": [{"title": "L"}]}}}})
        transport.push({"query": {"pages": {"a": {"categories": [{"title": "C"}]}}}})
        page = wiki.page_from_title("World")
        links = page.get_links()
        categories = page.get_categories()
        assert list(categories) == [Category(title="C")]
        assert list(links) == [Link(title="L")]
