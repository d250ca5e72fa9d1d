"""Pango markup escaping."""

from __future__ import annotations

import unicodedata
from collections.abc import Iterable, Iterator

_REPLACEMENTS = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    "'": "&#39;",
}


def collect_pango_escaped(pieces: Iterable[str]) -> str:
    """Join text pieces, escaping those that are a lone markup character."""
    return "".join(_REPLACEMENTS.get(piece, piece) for piece in pieces)


def _is_extending(char: str) -> bool:
    return unicodedata.combining(char) != 0 or unicodedata.category(char) in ("Mn", "Me", "Mc")


def _graphemes(text: str) -> Iterator[str]:
    cluster = ""
    for char in text:
        if cluster and _is_extending(char):
            cluster += char
            continue
        if cluster:
            yield cluster
        cluster = char
    if cluster:
        yield cluster


def _joins(prev: str | None, following: str | None) -> bool:
    """Whether an apostrophe between these clusters stays inside one word."""
    if prev is None or following is None:
        return False
    before, after = prev[0], following[0]
    return (before.isalpha() and after.isalpha()) or (before.isdigit() and after.isdigit())


def _word_pieces(text: str) -> Iterator[str]:
    clusters = list(_graphemes(text))
    pending = ""
    for prev, cluster, following in zip(
        [None, *clusters], clusters, [*clusters[1:], None]
    ):
        if cluster == "'" and _joins(prev, following):
            pending += cluster
            continue
        if pending:
            yield pending + cluster
            pending = ""
        else:
            yield cluster
    if pending:
        yield pending


def pango_escape(text: str) -> str:
    """Escape text so that it can be embedded in pango markup."""
    return collect_pango_escaped(_word_pieces(text))