"""
Unit tests for data models and scan settings.
"""

from datetime import datetime

import pytest
from photosweep.config import ScanSettings
from photosweep.models import (
    AssetRef,
    ColorSignature,
    PhotoType,
    ScanResult,
    ScanStats,
    SimilarityMatch,
)


class TestAssetRef:
    """Test AssetRef data class."""

    def test_resolution(self):
        asset = AssetRef(id='a', uri='/p/a.jpg', width=800, height=600)
        assert asset.resolution == "800x600"

    def test_resolution_unknown(self):
        assert AssetRef(id='a', uri='/p/a.jpg').resolution == '?'

    def test_is_immutable(self):
        asset = AssetRef(id='a', uri='/p/a.jpg')
        with pytest.raises(AttributeError):
            asset.id = 'b'

    def test_dict_roundtrip(self):
        asset = AssetRef(
            id='a', uri='/p/a.jpg', created_at=datetime(2024, 5, 1, 10, 30), width=10, height=20,
        )
        data = asset.to_dict()
        assert data['created_at'] == '2024-05-01T10:30:00'
        assert AssetRef.from_dict(data) == asset


class TestColorSignature:
    """Test ColorSignature data class."""

    def test_is_monochrome(self):
        mono = ColorSignature(PhotoType.MONOCHROME, '#000000', 0.99)
        normal = ColorSignature(PhotoType.NORMAL, '#777777', 0.5)
        assert mono.is_monochrome
        assert not normal.is_monochrome

    def test_to_dict(self):
        sig = ColorSignature(PhotoType.MONOCHROME, '#613420', 0.987654)
        assert sig.to_dict() == {
            'type': 'monochrome',
            'dominant_color': '#613420',
            'dominant_percent': 0.9877,
        }


class TestScanStats:
    """Test ScanStats data class."""

    def test_defaults_are_zero(self):
        stats = ScanStats()
        assert stats.to_dict() == {
            'total_processed': 0,
            'monochrome_count': 0,
            'duplicates_found': 0,
            'similar_photos_found': 0,
        }

    def test_similar_total(self):
        stats = ScanStats(duplicates_found=2, similar_photos_found=3)
        assert stats.similar_total == 5


class TestScanResult:
    """Test ScanResult creation and serialization."""

    def setup_method(self):
        self.photo = AssetRef(id='p', uri='/p/p.jpg')
        self.other = AssetRef(id='q', uri='/p/q.jpg')
        self.color = ColorSignature(PhotoType.NORMAL, '#123456', 0.4)

    def test_create_without_matches(self):
        result = ScanResult.create(self.photo, self.color, SimilarityMatch())
        assert result.similar_photos is None
        assert result.similarity_score is None
        assert not result.has_similar
        assert result.photo_type == PhotoType.NORMAL
        assert result.dominant_color == '#123456'

    def test_create_with_matches(self):
        match = SimilarityMatch(matches=[self.other], highest_similarity=0.9)
        result = ScanResult.create(self.photo, self.color, match)
        assert result.has_similar
        assert result.similar_photos == [self.other]
        assert result.similarity_score == 0.9

    def test_create_copies_match_list(self):
        match = SimilarityMatch(matches=[self.other], highest_similarity=1.0)
        result = ScanResult.create(self.photo, self.color, match)
        match.matches.append(self.photo)
        assert result.similar_photos == [self.other]

    def test_dict_roundtrip(self):
        match = SimilarityMatch(matches=[self.other], highest_similarity=1.0, is_duplicate=True)
        result = ScanResult.create(self.photo, self.color, match)
        restored = ScanResult.from_dict(result.to_dict())
        assert restored == result

    def test_from_dict_defaults_to_normal(self):
        restored = ScanResult.from_dict({'photo': self.photo.to_dict()})
        assert restored.photo_type == PhotoType.NORMAL
        assert restored.similar_photos is None


class TestScanSettings:
    """Test ScanSettings defaults and derived values."""

    def test_defaults(self):
        settings = ScanSettings()
        assert settings.hash_size == 16
        assert settings.color_analysis_size == 32
        assert settings.monochrome_threshold == 0.92
        assert settings.similarity_threshold == 0.87
        assert settings.duplicate_threshold == 0.98
        assert settings.batch_size == 100
        assert settings.max_parallel_operations == 25
        assert settings.max_media_assets == 100_000

    @pytest.mark.parametrize("workers,expected", [(25, 13), (4, 2), (1, 2), (2, 2), (7, 4)])
    def test_similarity_parallelism(self, workers, expected):
        assert ScanSettings(max_parallel_operations=workers).similarity_parallelism == expected
