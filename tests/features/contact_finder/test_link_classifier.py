import pytest

from app.features.contact_finder.services.link_classifier import (
    classify_links,
    is_navigable,
    origin_of,
)


LINKS = [
    "https://b.com/contact",
    "https://b.com/About-Us",
    "https://b.com/blog/post-1",
    "https://other.com/contact",
    "http://b.com/contact",
    "https://shop.b.com/contact",
    "javascript:openContact()",
    "mailto:contact@b.com",
    "tel:+15550100",
    "https://b.com/contact",
]


class TestClassifyLinks:
    def test_keeps_same_origin_keyword_links_in_first_seen_order(self):
        assert classify_links(LINKS, "https://b.com") == [
            "https://b.com/contact",
            "https://b.com/About-Us",
        ]

    def test_every_classified_link_satisfies_origin_and_keyword(self):
        keywords = ("contact", "about")
        for link in classify_links(LINKS, "https://b.com/some/page", keywords):
            assert origin_of(link) == "https://b.com"
            assert any(keyword in link.lower() for keyword in keywords)

    def test_cross_origin_links_are_never_followed(self):
        assert classify_links(["https://other.com/contact"], "https://b.com") == []

    def test_custom_keywords(self):
        links = ["https://b.com/impressum", "https://b.com/contact"]

        assert classify_links(links, "https://b.com", ["Impressum"]) == ["https://b.com/impressum"]

    def test_deterministic(self):
        assert classify_links(LINKS, "https://b.com") == classify_links(LINKS, "https://b.com")

    def test_invalid_site_origin(self):
        assert classify_links(LINKS, "not a url") == []

    def test_explicit_default_port_matches(self):
        assert classify_links(["https://b.com:443/contact"], "https://b.com") == ["https://b.com:443/contact"]


class TestOrigin:
    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://B.com/path?q=1", "https://b.com"),
            ("http://b.com:80/", "http://b.com"),
            ("http://b.com:8080/x", "http://b.com:8080"),
            ("b.com/contact", ""),
            ("https://b.com:notaport/", ""),
        ],
    )
    def test_origin_of(self, url, expected):
        assert origin_of(url) == expected


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://b.com", True),
        ("HTTP://b.com", True),
        ("javascript:void(0)", False),
        ("mailto:a@b.com", False),
        ("tel:123", False),
        ("ftp://b.com/file", False),
        ("", False),
        (None, False),
    ],
)
def test_is_navigable(url, expected):
    assert is_navigable(url) is expected
