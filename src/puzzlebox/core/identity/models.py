"""Puzzle identity and resource URIs.

Usage:
    uri = derive_uri("puzzle-k3j9x2")      # "puzzlebox://puzzle/puzzle-k3j9x2"
    puzzle_id = extract_id(uri)            # "puzzle-k3j9x2"
"""

from __future__ import annotations

from urllib.parse import quote, unquote

PUZZLE_RESOURCE_PATH = "puzzlebox://puzzle/"


def derive_uri(puzzle_id: str, scheme: str = PUZZLE_RESOURCE_PATH) -> str:
    """Map a puzzle id to its canonical resource URI.

    Ids are percent-encoded so any id survives the round trip through extract_id().
    """
    return f"{scheme}{quote(puzzle_id, safe='-_.~')}"


def is_puzzle_uri(uri: str, scheme: str = PUZZLE_RESOURCE_PATH) -> bool:
    """Check whether uri names a puzzle resource under scheme."""
    return uri.startswith(scheme) and len(uri) > len(scheme)


def extract_id(uri: str, scheme: str = PUZZLE_RESOURCE_PATH) -> str:
    """Inverse of derive_uri().

    Raises:
        ValueError: If uri is not a puzzle resource URI under scheme.
    """
    if not is_puzzle_uri(uri, scheme):
        raise ValueError(f"Not a puzzle resource URI: {uri!r}")
    return unquote(uri[len(scheme) :])
