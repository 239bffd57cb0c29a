import pytest

from moxli.model import Bookmark
from moxli.tagging import distinct_tags, normalize_tag, normalize_tags, split_flat_tags


@pytest.mark.parametrize(
    "raw, want",
    [
        ("DevOps", "dev-ops"),
        ("XMLParser", "xml-parser"),
        ("  Security  ", "security"),
        ("", ""),
        ("   ", ""),
        ("User Auth", "user-auth"),
        ("GraphQL API", "graph-ql-api"),
        ("already-kebab", "already-kebab"),
        ("--Weird__Tag!!", "weird-tag"),
        ("C++", "c"),
        ("web3 / crypto", "web3-crypto"),
        ("!!!", ""),
    ],
)
def test_normalize_tag(raw, want):
    assert normalize_tag(raw) == want


def test_normalize_tags_keeps_hierarchy_shape_and_order():
    b = Bookmark(id="1", url="https://x", tags=[["Security", "UserAuth"], ["Infrastructure"]])
    normalize_tags(b)
    assert b.tags == [["security", "user-auth"], ["infrastructure"]]


def test_split_flat_tags_trims_and_drops_empty():
    assert split_flat_tags(" a, B ,,c ") == [["a"], ["B"], ["c"]]
    assert split_flat_tags("") == []


def test_distinct_tags_flattens_levels():
    assert distinct_tags([["a", "b"], ["b"], ["c", "a"]]) == {"a", "b", "c"}
