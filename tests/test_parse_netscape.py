from datetime import datetime, timezone

import pytest

from moxli.model import SOURCE_ANYBOX_HTML, SOURCE_FIREFOX, SOURCE_SAFARI
from moxli.parse_netscape import parse_netscape_html


def _ts(secs: int) -> datetime:
    return datetime.fromtimestamp(secs, tz=timezone.utc)


def test_firefox_reads_both_timestamps(fixtures_dir):
    c = parse_netscape_html((fixtures_dir / "firefox.html").read_bytes(), SOURCE_FIREFOX)

    assert len(c) == 3
    assert c.metadata.source == SOURCE_FIREFOX
    docs = c.find_by_canonical_url("https://example.com/docs")
    assert docs is not None
    assert docs.date_added == _ts(1577836800)
    assert docs.last_modified == _ts(1581232315)
    assert docs.title == "Example Docs"
    assert docs.source == SOURCE_FIREFOX
    # Folder headings are structure only.
    assert docs.folder == []
    assert docs.tags == []


def test_firefox_bad_timestamps_are_unknown(fixtures_dir):
    c = parse_netscape_html((fixtures_dir / "firefox.html").read_bytes(), SOURCE_FIREFOX)
    news = c.find_by_canonical_url("https://news.example.org/?a=1&b=2")
    assert news is not None
    assert news.date_added is None  # "not-a-number"
    assert news.last_modified is None  # "0"


def test_safari_has_urls_only(fixtures_dir):
    c = parse_netscape_html((fixtures_dir / "safari.html").read_bytes(), SOURCE_SAFARI)
    assert [b.canonical_url for b in c.bookmarks] == [
        "https://example.com/docs",
        "https://safari-only.example/",
    ]
    assert all(b.date_added is None and b.last_modified is None for b in c.bookmarks)


def test_safari_ignores_timestamp_attributes_if_present():
    html = b'<H1>Bookmarks</H1><DL><DT><A HREF="https://ex.com/" LAST_MODIFIED="1500000000">x</A></DL>'
    b = parse_netscape_html(html, SOURCE_SAFARI).bookmarks[0]
    assert b.last_modified is None


def test_anybox_html_tags_and_drops(fixtures_dir):
    c = parse_netscape_html((fixtures_dir / "anybox.html").read_bytes(), SOURCE_ANYBOX_HTML)

    # The anchor with an empty HREF is discarded.
    assert len(c) == 2
    docs = c.bookmarks[0]
    assert docs.tags == [["security"], ["dev-ops"], ["graph-ql-api"]]
    assert docs.date_added == _ts(1546300800)
    assert docs.last_modified is None
    assert c.bookmarks[1].tags == []
    assert c.metadata.tag_count == 3


def test_anybox_html_drops_tags_that_normalize_to_nothing():
    html = b'<DL><DT><A HREF="https://ex.com/" TAGS="!!!, ok">x</A></DL>'
    b = parse_netscape_html(html, SOURCE_ANYBOX_HTML).bookmarks[0]
    assert b.tags == [["ok"]]


def test_uncanonicalizable_href_is_dropped():
    html = b'<H1>Bookmarks</H1><DL><DT><A HREF="http://[::1">bad</A><DT><A HREF="https://good.example/">ok</A></DL>'
    c = parse_netscape_html(html, SOURCE_SAFARI)
    assert [b.url for b in c.bookmarks] == ["https://good.example/"]


@pytest.mark.parametrize("value", ["-5", "0", "", "abc", "99999999999999999999"])
def test_non_positive_or_unusable_epoch_is_unknown(value):
    html = f'<DL><DT><A HREF="https://ex.com/" ADD_DATE="{value}">x</A></DL>'.encode()
    b = parse_netscape_html(html, SOURCE_FIREFOX).bookmarks[0]
    assert b.date_added is None


def test_each_anchor_gets_its_own_id():
    html = b'<DL><DT><A HREF="https://ex.com/">a</A><DT><A HREF="https://ex.com/">b</A></DL>'
    c = parse_netscape_html(html, SOURCE_SAFARI)
    assert len(c) == 2
    assert c.bookmarks[0].id != c.bookmarks[1].id
    assert c.find_by_canonical_url("https://ex.com/") is c.bookmarks[0]


def test_rejects_non_netscape_source():
    with pytest.raises(ValueError):
        parse_netscape_html(b"<a href='x'>x</a>", "anybox")
