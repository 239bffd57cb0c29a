import pytest

from moxli.detect import Dialect, ParsedInput, detect_format, is_anybox_json, is_firefox_html, is_safari_html

FIREFOX_SNIPPET = b"""<!DOCTYPE NETSCAPE-Bookmark-file-1>
<TITLE>Bookmarks</TITLE>
<H1>Bookmarks</H1>
<DL><p>
  <DT><H3>Folder</H3>
  <DL><p>
    <DT><A HREF="https://example.com" ADD_DATE="1581232315">Example</A>
  </DL><p>
</DL><p>
"""


def test_fixture_files_classify(fixtures_dir):
    assert detect_format((fixtures_dir / "anybox.json").read_bytes()) is Dialect.ANYBOX
    assert detect_format((fixtures_dir / "anybox.html").read_bytes()) is Dialect.ANYBOX_HTML
    assert detect_format((fixtures_dir / "firefox.html").read_bytes()) is Dialect.FIREFOX
    assert detect_format((fixtures_dir / "safari.html").read_bytes()) is Dialect.SAFARI
    assert detect_format((fixtures_dir / "notes.json").read_bytes()) is Dialect.UNKNOWN
    assert detect_format((fixtures_dir / "page.html").read_bytes()) is Dialect.UNKNOWN


@pytest.mark.parametrize(
    "data, want",
    [
        (b'[{"url": "https://example.com", "isStarred": true}]', Dialect.ANYBOX),
        (b'[{"url": "https://example.com", "keyword": ""}]', Dialect.ANYBOX),
        (b'[{"url": "https://example.com", "tags": []}]', Dialect.ANYBOX),
        (b"[]", Dialect.UNKNOWN),
        (b'[{"url": "https://example.com", "title": "Test"}]', Dialect.UNKNOWN),
        (b'["https://example.com"]', Dialect.UNKNOWN),
        (b'{"isStarred": true}', Dialect.UNKNOWN),
        (b"not json", Dialect.UNKNOWN),
        (b"", Dialect.UNKNOWN),
    ],
)
def test_json_detection(data, want):
    assert detect_format(data) is want


def test_add_date_means_firefox_even_with_bookmarks_heading():
    assert detect_format(FIREFOX_SNIPPET) is Dialect.FIREFOX


def test_removing_add_date_turns_firefox_into_safari():
    data = FIREFOX_SNIPPET.replace(b' ADD_DATE="1581232315"', b"")
    assert detect_format(data) is Dialect.SAFARI


def test_safari_needs_a_marker():
    data = b'<html><body><DL><DT><A HREF="https://example.com">x</A></DL></body></html>'
    assert detect_format(data) is Dialect.UNKNOWN


def test_safari_accepts_comment_doctype_marker():
    data = b'<!-- DOCTYPE NETSCAPE-Bookmark-file-1 --><A HREF="https://example.com">Test</A>'
    assert detect_format(data) is Dialect.SAFARI


def test_heading_text_is_case_insensitive():
    data = b'<H1> BOOKMARKS </H1><DL><DT><A HREF="https://example.com">Test</A></DL>'
    assert detect_format(data) is Dialect.SAFARI


def test_tags_with_folder_headings_is_not_anybox_html():
    data = b"""<H1>Bookmarks</H1><DL>
    <DT><H3>Folder</H3><DL>
    <DT><A HREF="https://example.com" ADD_DATE="1" TAGS="a,b">x</A>
    </DL></DL>"""
    assert detect_format(data) is Dialect.FIREFOX


def test_anybox_html_wins_over_firefox_when_flat():
    data = b'<H1>Bookmarks</H1><DL><DT><A HREF="https://example.com" ADD_DATE="1" TAGS="a">x</A></DL>'
    assert detect_format(data) is Dialect.ANYBOX_HTML


def test_predicates_share_one_buffer():
    doc = ParsedInput(FIREFOX_SNIPPET)
    assert not is_anybox_json(doc)
    assert is_firefox_html(doc)
    assert not is_safari_html(doc)
    # Repeating a check sees the same input.
    assert is_firefox_html(doc)
    assert doc.data == FIREFOX_SNIPPET


def test_detect_is_repeatable_on_same_bytes(fixtures_dir):
    data = (fixtures_dir / "safari.html").read_bytes()
    assert detect_format(data) is detect_format(data) is Dialect.SAFARI
