from typing import Callable, TypeVar
from rapidfuzz import fuzz, utils

T = TypeVar("T")


def rate(name: str, target: str | None) -> float:
    """Similarity of two names in [0, 1], case and punctuation insensitive"""
    if not target:
        return 0.0
    return fuzz.ratio(name, target, processor=utils.default_process) / 100


def best_matches(
    name: str,
    candidates: list[T],
    key: Callable[[T], str | None],
    max_match_count: int,
    min_match_rating: float
) -> list[T]:
    """
    Rank candidates by similarity of key(candidate) to name, best first.\n
    Candidates rated below min_match_rating are dropped, equal ratings keep their original order
    """
    rated = [(rate(name, key(candidate)), candidate) for candidate in candidates]
    rated = [pair for pair in rated if pair[0] >= min_match_rating]
    # sorted() is stable, so ties stay in input order
    rated = sorted(rated, key=lambda pair: pair[0], reverse=True)
    return [candidate for _, candidate in rated[:max_match_count]]
