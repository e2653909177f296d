"""Tests for puzzle resource URIs.

Critical Invariants:
- extract_id(derive_uri(id)) == id for every id
- Foreign URIs are rejected, not misparsed
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from puzzlebox.core import PUZZLE_RESOURCE_PATH, derive_uri, extract_id
from puzzlebox.core.identity import is_puzzle_uri


def test_derive_uri_uses_resource_path():
    assert derive_uri("puzzle-abc123") == "puzzlebox://puzzle/puzzle-abc123"
    assert derive_uri("puzzle-abc123").startswith(PUZZLE_RESOURCE_PATH)


@given(puzzle_id=st.text(min_size=1))
def test_uri_round_trip(puzzle_id):
    """CRITICAL: Any id survives derive_uri -> extract_id.

    Why: Subscriptions are keyed by URI and notifications are keyed by id;
    a lossy mapping would deliver events to the wrong subscribers.
    """
    assert extract_id(derive_uri(puzzle_id)) == puzzle_id


@given(a=st.text(min_size=1), b=st.text(min_size=1))
def test_distinct_ids_have_distinct_uris(a, b):
    if a != b:
        assert derive_uri(a) != derive_uri(b)


def test_custom_scheme_round_trip():
    scheme = "example://games/"
    uri = derive_uri("puzzle-1", scheme)

    assert uri == "example://games/puzzle-1"
    assert extract_id(uri, scheme) == "puzzle-1"


@pytest.mark.parametrize(
    "uri",
    ["puzzlebox://puzzle/", "puzzlebox://other/puzzle-1", "https://example.com/puzzle-1", ""],
)
def test_extract_id_rejects_foreign_uris(uri):
    assert not is_puzzle_uri(uri)
    with pytest.raises(ValueError, match="Not a puzzle resource URI"):
        extract_id(uri)
