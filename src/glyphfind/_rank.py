"""Fuzzy ranking of entries against a free-text query."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from operator import attrgetter

from glyphfind._ucd import Entry, fold_case, word_heads

logger = logging.getLogger(__name__)

SCORE_MATCH = 16
BONUS_HEAD = 8
BONUS_CONSECUTIVE = 8
BONUS_CASE = 1
PENALTY_GAP_START = 3
PENALTY_GAP_EXTEND = 1
PENALTY_LEADING = 1
MAX_LEADING_PENALTY = 3


@dataclass
class ScoredEntry:
    """An entry that matched a query, with its match score."""

    entry: Entry
    score: int


def _is_subsequence(needle: str, haystack: str) -> bool:
    pos = 0
    for ch in needle:
        pos = haystack.find(ch, pos)
        if pos < 0:
            return False
        pos += 1
    return True


def _positions(haystack: str, ch: str) -> Iterator[int]:
    j = haystack.find(ch)
    while j >= 0:
        yield j
        j = haystack.find(ch, j + 1)


def _align(text: str, key: str, heads: bytes, query: str, needle: str) -> int | None:
    """Score ``needle`` against ``key``; ``text`` and ``query`` give the original case."""
    if len(needle) > len(key) or not _is_subsequence(needle, key):
        return None

    # prev maps a text column to the best score with the previous query
    # character matched there; keys are inserted in ascending order.
    prev: dict[int, int] = {}
    for i, pat in enumerate(needle):
        row: dict[int, int] = {}
        prev_items = list(prev.items())
        p = 0
        best_gapped: int | None = None  # max of prev[k] + PENALTY_GAP_EXTEND * k, k < j - 1

        for j in _positions(key, pat):
            gain = SCORE_MATCH
            if heads[j]:
                gain += BONUS_HEAD
            if text[j] == query[i]:
                gain += BONUS_CASE

            if i == 0:
                if heads[j]:
                    row[j] = gain - PENALTY_LEADING * min(j, MAX_LEADING_PENALTY)
                continue

            while p < len(prev_items) and prev_items[p][0] < j - 1:
                k, score = prev_items[p]
                candidate = score + PENALTY_GAP_EXTEND * k
                if best_gapped is None or candidate > best_gapped:
                    best_gapped = candidate
                p += 1

            best: int | None = None
            adjacent = prev.get(j - 1)
            if adjacent is not None:
                best = adjacent + BONUS_CONSECUTIVE
            if best_gapped is not None and heads[j]:
                gapped = best_gapped - PENALTY_GAP_EXTEND * (j - 1) - PENALTY_GAP_START
                if best is None or gapped > best:
                    best = gapped

            if best is not None:
                row[j] = best + gain

        if not row:
            return None
        prev = row

    return max(prev.values())


def fuzzy_score(text: str, query: str) -> int | None:
    """
    Score ``query`` as a case-insensitive subsequence of ``text``.

    Every query character must match, in order. The first query character,
    and any character matched after skipping part of ``text``, must land on
    a word head. Contiguous runs and word heads are rewarded; skipped
    characters are penalized.

    Args:
        text: String being searched
        query: Characters to find in ``text``

    Returns:
        Best alignment score, or None if ``query`` cannot be matched
    """
    if not query:
        return 0
    return _align(text, fold_case(text), word_heads(text), query, fold_case(query))


def rank_scored(store: Iterable[Entry], query: str) -> list[ScoredEntry]:
    """
    Score every entry against ``query`` and order by descending score.

    Entries are sorted ascending (stable) and then reversed, so entries
    with equal scores come out in reverse store order.
    """
    if not query:
        return [ScoredEntry(entry=entry, score=0) for entry in store]

    start = time.perf_counter()
    needle = fold_case(query)
    scored = []
    for entry in store:
        # Folded text and word heads are cached on each entry after first use.
        score = _align(entry.search_text, entry.search_key, entry.search_heads, query, needle)
        if score is None or score <= 0:
            continue
        scored.append(ScoredEntry(entry=entry, score=score))

    scored.sort(key=attrgetter("score"))
    scored.reverse()

    logger.debug(
        "Ranked %r: %d matches in %.1fms",
        query,
        len(scored),
        (time.perf_counter() - start) * 1000,
    )
    return scored


def rank(store: Iterable[Entry], query: str) -> list[Entry]:
    """Entries matching ``query``, best first; the whole store for an empty query."""
    if not query:
        return list(store)
    return [scored.entry for scored in rank_scored(store, query)]
