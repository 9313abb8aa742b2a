"""
Data models for PhotoSweep.

Contains dataclasses for photo references, per-photo signatures, scan
statistics and the "interesting" results a scan produces.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Optional


class PhotoType(str, Enum):
    """Color classification of a photo."""
    NORMAL = 'normal'
    MONOCHROME = 'monochrome'


@dataclass(frozen=True)
class AssetRef:
    """
    Immutable reference to a photo in the asset library.

    Attributes:
        id: Opaque, stable identifier assigned by the library
        uri: Location the image bytes can be read from
        created_at: Creation timestamp, if known
        width: Width in pixels, if known
        height: Height in pixels, if known
    """
    id: str
    uri: str
    created_at: Optional[datetime] = None
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def resolution(self) -> str:
        """Return resolution as 'WxH' string, or '?' when unknown."""
        if self.width is None or self.height is None:
            return '?'
        return f"{self.width}x{self.height}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'uri': self.uri,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'width': self.width,
            'height': self.height,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'AssetRef':
        """Create AssetRef from dictionary."""
        created_at = data.get('created_at')
        return cls(
            id=data['id'],
            uri=data['uri'],
            created_at=datetime.fromisoformat(created_at) if created_at else None,
            width=data.get('width'),
            height=data.get('height'),
        )


@dataclass
class AssetPage:
    """One page of an asset listing."""
    assets: list = field(default_factory=list)
    has_next_page: bool = False
    next_cursor: Optional[str] = None


@dataclass(frozen=True)
class ColorSignature:
    """
    Color uniformity signature of a photo.

    dominant_percent is a uniformity score in [0, 1], not the share of
    pixels having dominant_color.
    """
    photo_type: PhotoType
    dominant_color: str
    dominant_percent: float

    @property
    def is_monochrome(self) -> bool:
        return self.photo_type == PhotoType.MONOCHROME

    def to_dict(self) -> dict:
        return {
            'type': self.photo_type.value,
            'dominant_color': self.dominant_color,
            'dominant_percent': round(self.dominant_percent, 4),
        }


@dataclass
class PhotoSignature:
    """Fingerprint and color signature extracted for one photo."""
    photo: AssetRef
    fingerprint: str
    color: ColorSignature


@dataclass
class SimilarityMatch:
    """
    Outcome of comparing one photo against the recent fingerprints.

    Attributes:
        matches: Photos at or above the similarity threshold
        highest_similarity: Best score among the matches (0.0 if none)
        is_duplicate: True if any match is above the duplicate threshold
    """
    matches: list = field(default_factory=list)
    highest_similarity: float = 0.0
    is_duplicate: bool = False


@dataclass
class ScanStats:
    """Counters accumulated over one scan run."""
    total_processed: int = 0
    monochrome_count: int = 0
    duplicates_found: int = 0
    similar_photos_found: int = 0

    @property
    def similar_total(self) -> int:
        """Duplicates plus merely similar photos."""
        return self.duplicates_found + self.similar_photos_found

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ScanResult:
    """
    An "interesting" photo: monochrome, or similar to an earlier photo.

    Attributes:
        photo: The photo this result describes
        photo_type: Color classification
        dominant_color: Synthesized display color ('#rrggbb')
        dominant_percent: Color uniformity score
        similar_photos: Earlier photos this one matched, None if no match
        similarity_score: Highest similarity among the matches
    """
    photo: AssetRef
    photo_type: PhotoType
    dominant_color: Optional[str] = None
    dominant_percent: Optional[float] = None
    similar_photos: Optional[list] = None
    similarity_score: Optional[float] = None

    @property
    def has_similar(self) -> bool:
        return bool(self.similar_photos)

    @classmethod
    def create(
        cls,
        photo: AssetRef,
        color: ColorSignature,
        match: Optional[SimilarityMatch] = None,
    ) -> 'ScanResult':
        """Build a result from a photo's color signature and its matches."""
        has_matches = match is not None and len(match.matches) > 0
        return cls(
            photo=photo,
            photo_type=color.photo_type,
            dominant_color=color.dominant_color,
            dominant_percent=color.dominant_percent,
            similar_photos=list(match.matches) if has_matches else None,
            similarity_score=match.highest_similarity if has_matches else None,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'photo': self.photo.to_dict(),
            'type': self.photo_type.value,
            'dominant_color': self.dominant_color,
            'dominant_percent': self.dominant_percent,
            'similar_photos': (
                [p.to_dict() for p in self.similar_photos] if self.similar_photos else None
            ),
            'similarity_score': self.similarity_score,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'ScanResult':
        """Create ScanResult from dictionary."""
        similar = data.get('similar_photos')
        return cls(
            photo=AssetRef.from_dict(data['photo']),
            photo_type=PhotoType(data.get('type', PhotoType.NORMAL.value)),
            dominant_color=data.get('dominant_color'),
            dominant_percent=data.get('dominant_percent'),
            similar_photos=[AssetRef.from_dict(p) for p in similar] if similar else None,
            similarity_score=data.get('similarity_score'),
        )
