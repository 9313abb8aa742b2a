"""
Unit tests for fingerprint comparison and incremental similarity search.
"""

import pytest
from photosweep.models import AssetRef
from photosweep.scanner import (
    calculate_similarity,
    classify_similarity,
    find_similar_photos,
    is_duplicate,
    is_similar,
    pair_key,
)
from photosweep.state import RecencyCache

FP = 'a' * 64


def variant(mismatches: int) -> str:
    """A fingerprint differing from FP at the given number of positions."""
    return 'b' * mismatches + 'a' * (64 - mismatches)


class TestCalculateSimilarity:
    """Test calculate_similarity."""

    def test_identical(self):
        assert calculate_similarity(FP, FP) == 1.0

    def test_symmetric(self):
        assert calculate_similarity(FP, variant(5)) == calculate_similarity(variant(5), FP)

    def test_fraction_of_matching_positions(self):
        assert calculate_similarity(FP, variant(8)) == 1 - 8 / 64

    def test_completely_different(self):
        assert calculate_similarity('a' * 64, 'b' * 64) == 0.0

    @pytest.mark.parametrize("fp1,fp2", [('', FP), (FP, ''), ('', ''), ('abc', 'abcd')])
    def test_empty_or_length_mismatch(self, fp1, fp2):
        assert calculate_similarity(fp1, fp2) == 0.0


class TestClassification:
    """Test similarity thresholds."""

    def test_similar_threshold_inclusive(self):
        assert is_similar(0.87)
        assert not is_similar(0.86999)

    def test_duplicate_threshold_exclusive(self):
        assert is_duplicate(0.99)
        assert not is_duplicate(0.98)

    @pytest.mark.parametrize("score,expected", [
        (1.0, 'duplicate'),
        (0.985, 'duplicate'),
        (0.98, 'similar'),
        (0.87, 'similar'),
        (0.86999, 'different'),
        (0.0, 'different'),
    ])
    def test_classify(self, score, expected):
        assert classify_similarity(score) == expected

    def test_fingerprint_boundaries(self):
        assert classify_similarity(calculate_similarity(FP, variant(1))) == 'duplicate'
        assert classify_similarity(calculate_similarity(FP, variant(2))) == 'similar'
        assert classify_similarity(calculate_similarity(FP, variant(8))) == 'similar'
        assert classify_similarity(calculate_similarity(FP, variant(9))) == 'different'

    def test_pair_key_distinguishes_path_ids(self):
        assert pair_key('/d', '/x_/y') != pair_key('/d_/x', '/y')

    def test_pair_key_is_unordered(self):
        assert pair_key('b', 'a') == pair_key('a', 'b') == ('a', 'b')


class TestFindSimilarPhotos:
    """Test the sliding-window similarity search."""

    def setup_method(self):
        self.cache = RecencyCache()
        self.pairs = set()
        self.resolved = []

    async def resolve(self, asset_id: str) -> AssetRef:
        self.resolved.append(asset_id)
        return AssetRef(id=asset_id, uri=f"/library/{asset_id}.jpg")

    async def search(self, target_id: str, **kwargs):
        return await find_similar_photos(
            target_id,
            self.cache.get(target_id),
            self.cache,
            self.pairs,
            self.resolve,
            **kwargs,
        )

    @pytest.mark.asyncio
    async def test_finds_earlier_duplicates(self):
        self.cache.put('a', FP)
        self.cache.put('x', 'f' * 64)
        self.cache.put('b', FP)

        match = await self.search('b')

        assert [p.id for p in match.matches] == ['a']
        assert match.is_duplicate
        assert match.highest_similarity == 1.0
        assert self.pairs == {('a', 'b')}
        assert self.resolved == ['a']

    @pytest.mark.asyncio
    async def test_similar_not_duplicate(self):
        self.cache.put('a', variant(4))
        self.cache.put('b', FP)

        match = await self.search('b')

        assert [p.id for p in match.matches] == ['a']
        assert not match.is_duplicate
        assert match.highest_similarity == pytest.approx(1 - 4 / 64)

    @pytest.mark.asyncio
    async def test_matches_newest_first(self):
        for asset_id in ('a', 'b', 'c'):
            self.cache.put(asset_id, FP)
        self.cache.put('d', FP)

        match = await self.search('d')
        assert [p.id for p in match.matches] == ['c', 'b', 'a']

    @pytest.mark.asyncio
    async def test_earlier_photo_does_not_see_later(self):
        self.cache.put('a', FP)
        self.cache.put('b', FP)

        match = await self.search('a')
        assert match.matches == []
        assert self.pairs == set()

    @pytest.mark.asyncio
    async def test_pair_reported_once(self):
        self.cache.put('a', FP)
        self.cache.put('b', FP)

        first = await self.search('b')
        second = await self.search('b')

        assert len(first.matches) == 1
        assert second.matches == []
        assert not second.is_duplicate

    @pytest.mark.asyncio
    async def test_window_limits_comparisons(self):
        for i in range(5):
            self.cache.put(f"old{i}", FP)
        self.cache.put('target', FP)

        match = await self.search('target', window_size=2)
        assert [p.id for p in match.matches] == ['old4', 'old3']

    @pytest.mark.asyncio
    async def test_empty_fingerprint_never_matches(self):
        self.cache.put('a', '')
        self.cache.put('b', '')

        match = await self.search('b')
        assert match.matches == []
        assert self.resolved == []

    @pytest.mark.asyncio
    async def test_dissimilar_candidates_not_resolved(self):
        self.cache.put('a', 'f' * 64)
        self.cache.put('b', FP)

        match = await self.search('b')
        assert match.matches == []
        assert self.resolved == []

    @pytest.mark.asyncio
    async def test_failed_lookup_skips_candidate(self):
        self.cache.put('a', FP)
        self.cache.put('gone', FP)
        self.cache.put('b', FP)

        async def resolve(asset_id):
            if asset_id == 'gone':
                raise KeyError(asset_id)
            return AssetRef(id=asset_id, uri=asset_id)

        match = await find_similar_photos('b', FP, self.cache, self.pairs, resolve)

        assert [p.id for p in match.matches] == ['a']
        assert self.pairs == {('a', 'b')}

    @pytest.mark.asyncio
    async def test_custom_thresholds(self):
        self.cache.put('a', variant(16))
        self.cache.put('b', FP)

        match = await self.search('b', similar_threshold=0.7, duplicate_threshold=0.7)
        assert match.is_duplicate

    @pytest.mark.asyncio
    async def test_path_ids_sharing_a_joined_form(self):
        # Joined with '_', both pairs would read '/d_/x_/y'
        self.cache.put('/d', FP)
        self.cache.put('/x_/y', FP)
        first = await self.search('/x_/y')

        self.cache.put('/d_/x', FP)
        self.cache.put('/y', FP)
        match = await find_similar_photos('/y', FP, self.cache, self.pairs, self.resolve, window_size=1)

        assert [p.id for p in first.matches] == ['/d']
        assert [p.id for p in match.matches] == ['/d_/x']
