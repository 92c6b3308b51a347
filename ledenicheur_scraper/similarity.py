"""
Candidate scoring for search results.

The score is a bigram Dice similarity weighted at 0.7, plus bonuses for
shared numbers (model numbers, capacities) and shared technical qualifiers.
Bonuses are capped at 0.4 so they never outweigh the lexical match.
"""

from collections import Counter
from typing import Iterable, Optional
import logging
import re

from .models import ScoredCandidate, SearchCandidate
from .text import normalize

logger = logging.getLogger(__name__)


DICE_WEIGHT = 0.7
MAX_BONUS = 0.4
ALL_NUMBERS_BONUS = 0.25
PARTIAL_NUMBERS_BONUS = 0.15
QUALIFIER_BONUS = 0.05
MAX_QUALIFIER_BONUS = 0.15

TECHNICAL_TERMS = frozenset({
    "ti", "super", "xt", "oc", "v2", "lhr", "gaming", "pro",
    "dual", "fan", "edition", "white", "black",
})

_DIGITS_RE = re.compile(r"\d+")
_SPACE_RE = re.compile(r"\s")


def _bigrams(text: str) -> Counter:
    return Counter(text[i:i + 2] for i in range(len(text) - 1))


def dice_coefficient(a: str, b: str) -> float:
    """Sørensen–Dice over character bigrams, counted as multisets."""
    if a == b:
        return 1.0
    if len(a) < 2 or len(b) < 2:
        return 0.0
    first, second = _bigrams(a), _bigrams(b)
    shared = sum((first & second).values())
    return 2.0 * shared / (sum(first.values()) + sum(second.values()))


def _numbers_bonus(norm_query: str, norm_candidate: str) -> float:
    query_numbers = set(_DIGITS_RE.findall(norm_query))
    if not query_numbers:
        return 0.0
    common = query_numbers & set(_DIGITS_RE.findall(norm_candidate))
    if len(common) == len(query_numbers):
        return ALL_NUMBERS_BONUS
    if common:
        return PARTIAL_NUMBERS_BONUS * len(common) / len(query_numbers)
    return 0.0


def _qualifier_bonus(norm_query: str, norm_candidate: str) -> float:
    shared = (TECHNICAL_TERMS & set(norm_query.split())
              & set(norm_candidate.split()))
    return min(MAX_QUALIFIER_BONUS, QUALIFIER_BONUS * len(shared))


def score(query: str, candidate: str,
          norm_query: str, norm_candidate: str) -> float:
    """Match score in [0, 1] for pre-normalized query/candidate titles.

    ``query`` and ``candidate`` are the raw strings; only the normalized
    forms take part in the computation. Identical normalized titles score
    1.0 whatever their bonuses.
    """
    if norm_query and norm_query == norm_candidate:
        return 1.0
    dice = dice_coefficient(_SPACE_RE.sub("", norm_query),
                            _SPACE_RE.sub("", norm_candidate))
    bonus = (_numbers_bonus(norm_query, norm_candidate)
             + _qualifier_bonus(norm_query, norm_candidate))
    return min(1.0, DICE_WEIGHT * dice + min(MAX_BONUS, bonus))


def rank_candidates(query: str,
                    candidates: Iterable[SearchCandidate]
                    ) -> list[ScoredCandidate]:
    """Score every candidate and sort best first (ties keep input order)."""
    norm_query = normalize(query)
    scored = []
    for cand in candidates:
        if not cand.title:
            continue
        norm_title = normalize(cand.title)
        similarity = score(query, cand.title, norm_query, norm_title)
        logger.debug(f"  {similarity:.4f}  {cand.title!r} ({norm_title!r})")
        scored.append(ScoredCandidate(cand, similarity))
    return sorted(scored, key=lambda s: -s.similarity)


def select_best(ranked: list[ScoredCandidate],
                threshold: float) -> Optional[ScoredCandidate]:
    """Top candidate if it reaches ``threshold``, else no match."""
    if not ranked:
        return None
    best = ranked[0]
    if best.similarity < threshold:
        logger.info(
            f"Best candidate {best.title!r} scored {best.similarity:.4f}, "
            f"below threshold {threshold}"
        )
        return None
    return best
