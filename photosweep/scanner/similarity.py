"""
Similarity module for the scanner package.

Compares fingerprints position by position and searches the most recent
fingerprints for matches of a newly analyzed photo, so each photo costs a
bounded number of comparisons regardless of library size.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from ..config import DUPLICATE_THRESHOLD, SIMILARITY_THRESHOLD, SIMILARITY_WINDOW
from ..models import AssetRef, SimilarityMatch
from ..state import RecencyCache
from .dependencies import _logger


def calculate_similarity(fingerprint1: str, fingerprint2: str) -> float:
    """
    Share of character positions at which two fingerprints agree.

    Returns:
        Similarity in [0, 1]; 0 if either fingerprint is empty or the
        lengths differ
    """
    if not fingerprint1 or not fingerprint2 or len(fingerprint1) != len(fingerprint2):
        return 0.0

    mismatches = sum(1 for a, b in zip(fingerprint1, fingerprint2) if a != b)
    return 1 - (mismatches / len(fingerprint1))


def is_similar(similarity: float, threshold: float = SIMILARITY_THRESHOLD) -> bool:
    return similarity >= threshold


def is_duplicate(similarity: float, threshold: float = DUPLICATE_THRESHOLD) -> bool:
    return similarity > threshold


def classify_similarity(
    similarity: float,
    similar_threshold: float = SIMILARITY_THRESHOLD,
    duplicate_threshold: float = DUPLICATE_THRESHOLD,
) -> str:
    """
    Classify a similarity score.

    Returns:
        'duplicate', 'similar' or 'different'
    """
    if not is_similar(similarity, similar_threshold):
        return 'different'
    if is_duplicate(similarity, duplicate_threshold):
        return 'duplicate'
    return 'similar'


def pair_key(id1: str, id2: str) -> tuple[str, str]:
    """Canonical key of an unordered pair of asset ids."""
    return (id1, id2) if id1 <= id2 else (id2, id1)


async def find_similar_photos(
    target_id: str,
    target_fingerprint: str,
    fingerprints: RecencyCache,
    processed_pairs: set[tuple[str, str]],
    resolve_asset: Callable[[str], Awaitable[AssetRef]],
    window_size: int = SIMILARITY_WINDOW,
    similar_threshold: float = SIMILARITY_THRESHOLD,
    duplicate_threshold: float = DUPLICATE_THRESHOLD,
) -> SimilarityMatch:
    """
    Find earlier photos whose fingerprints match a photo's fingerprint.

    Only the window_size fingerprints stored just before the target are
    compared, so within a run a pair is only ever evaluated from its later
    member. Matching pairs are recorded in processed_pairs and skipped on
    later calls. Candidate metadata is resolved only for matches; a failed
    lookup skips the candidate without recording the pair.

    Args:
        target_id: Asset id of the photo being searched for
        target_fingerprint: Its fingerprint
        fingerprints: Fingerprint cache, most recent entries last
        processed_pairs: Pair keys already reported in this run (mutated)
        resolve_asset: Coroutine returning full metadata for an asset id
        window_size: Number of recent fingerprints to compare against
        similar_threshold: Minimum similarity for a match
        duplicate_threshold: Similarity above which a match is a duplicate

    Returns:
        SimilarityMatch with matches in window order (newest first)
    """
    result = SimilarityMatch()
    if not target_fingerprint:
        return result

    # Snapshot the window; the cache must not be iterated across awaits
    window = list(fingerprints.recent_before(target_id, window_size))

    for candidate_id, candidate_fingerprint in window:
        if candidate_id == target_id:
            continue

        key = pair_key(target_id, candidate_id)
        if key in processed_pairs:
            continue

        similarity = calculate_similarity(target_fingerprint, candidate_fingerprint)
        if not is_similar(similarity, similar_threshold):
            continue

        try:
            candidate = await resolve_asset(candidate_id)
        except Exception as e:
            _logger.warning(f"Could not load asset {candidate_id}: {e}")
            continue

        result.matches.append(candidate)
        result.highest_similarity = max(result.highest_similarity, similarity)
        if is_duplicate(similarity, duplicate_threshold):
            result.is_duplicate = True

        processed_pairs.add(key)

    return result


__all__ = [
    'calculate_similarity',
    'classify_similarity',
    'find_similar_photos',
    'is_duplicate',
    'is_similar',
    'pair_key',
]
