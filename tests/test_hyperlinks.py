import pytest

from reportsheet.hyperlinks import (
    STRING_MAX,
    Hyperlink,
    LinkType,
    display_text,
    looks_like_url,
    split_fragment,
)


@pytest.mark.parametrize(
    "text",
    [
        "http://example.com",
        "https://example.com/a",
        "ftp://example.com",
        "ftps://example.com",
        "mailto:someone@example.com",
        "file:///D:/Desktop/photo.png",
        "see file://share/a",
    ],
)
def test_urls_detected(text):
    assert looks_like_url(text) is True


@pytest.mark.parametrize("text", ["plain text", "NDC9-2", "", "xhttp://example.com", "="])
def test_non_urls(text):
    assert looks_like_url(text) is False


def test_display_defaults_to_url():
    assert display_text("http://example.com") == "http://example.com"


def test_display_given_wins():
    assert display_text("http://example.com", "Home") == "Home"


def test_mailto_removed():
    assert display_text("mailto:someone@example.com") == "someone@example.com"


def test_display_truncated():
    long_url = "http://example.com/" + "a" * (STRING_MAX + 10)
    result = display_text(long_url)
    assert len(result) == STRING_MAX
    assert long_url.startswith(result)


def test_split_fragment():
    assert split_fragment("http://example.com/aaa.html#top") == (
        "http://example.com/aaa.html",
        "top",
    )


def test_split_without_fragment():
    url = "file:///D:/Desktop/photo.png"
    assert split_fragment(url) == (url, "")


def test_hyperlink_defaults():
    link = Hyperlink(target="http://example.com")
    assert link.link_type is LinkType.EXTERNAL
    assert (link.location, link.display, link.tooltip) == ("", "", "")