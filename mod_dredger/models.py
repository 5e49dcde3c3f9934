"""
Data models and outcome types shared by every stage of the pipeline.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional

# ============================================================================
# DISCOVERY RECORDS
# ============================================================================

@dataclass(frozen=True)
class SitemapEntry:
    url: str
    lastmod: Optional[str] = None


@dataclass
class DiscoveredItem:
    title: str
    author: str
    external_url: str
    discovery_source_url: str
    image_urls: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CategoryMapping:
    content_type: str
    theme: Optional[str] = None


@dataclass
class Classification:
    content_type: Optional[str] = None
    themes: List[str] = field(default_factory=list)


@dataclass
class PlatformDetail:
    """What a source adapter could read off the item's own page."""
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    images: List[str] = field(default_factory=list)
    is_free: bool = True


@dataclass
class ScrapedDetail:
    title: str
    author: str
    description: str
    short_description: str
    thumbnail: Optional[str]
    images: List[str]
    download_url: str
    source_url: str
    source: str
    source_id: Optional[str]
    category: str
    game_version: str
    tags: List[str] = field(default_factory=list)
    is_free: bool = True
    is_nsfw: bool = False
    content_type: Optional[str] = None
    visual_style: Optional[str] = None
    themes: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class RunStats:
    pages_scraped: int = 0
    items_discovered: int = 0
    created: int = 0
    updated: int = 0
    skipped: int = 0
    images_uploaded: int = 0
    errors: int = 0
    blocked: int = 0

    def to_dict(self) -> dict:
        return asdict(self)

# ============================================================================
# OUTCOMES
# ============================================================================

class FetchStatus(Enum):
    OK = "ok"
    BLOCKED = "blocked"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    TRANSPORT_ERROR = "transport_error"


@dataclass
class FetchResult:
    url: str
    status: FetchStatus
    response: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.OK

    @property
    def status_code(self) -> Optional[int]:
        return getattr(self.response, 'status_code', None)


class DetailStatus(Enum):
    SUCCESS = "success"
    BLOCKED = "blocked"
    UNAVAILABLE = "unavailable"
    FAILED = "failed"


@dataclass
class DetailOutcome:
    status: DetailStatus
    detail: Optional[PlatformDetail] = None
    reason: Optional[str] = None


class PageStatus(Enum):
    OK = "ok"
    BLOCKED = "blocked"
    FAILED = "failed"


@dataclass
class PageResult:
    url: str
    status: PageStatus
    items: List[DiscoveredItem] = field(default_factory=list)


class UpsertAction(Enum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"


@dataclass
class UpsertResult:
    action: UpsertAction
    record_id: Optional[str] = None
    reason: Optional[str] = None


class ItemOutcome(Enum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
    NO_IMAGE = "no_image"
    FAILED = "failed"
    DISCOVERED = "discovered"


def fields_for_catalog(detail: ScrapedDetail) -> Dict[str, Any]:
    """Maps a detail onto the catalog's camelCase record fields."""
    return {
        'title': detail.title,
        'author': detail.author,
        'description': detail.description,
        'shortDescription': detail.short_description,
        'thumbnail': detail.thumbnail,
        'images': list(detail.images),
        'downloadUrl': detail.download_url,
        'sourceUrl': detail.source_url,
        'source': detail.source,
        'sourceId': detail.source_id,
        'category': detail.category,
        'gameVersion': detail.game_version,
        'tags': list(detail.tags),
        'isFree': detail.is_free,
        'isNSFW': detail.is_nsfw,
        'contentType': detail.content_type,
        'visualStyle': detail.visual_style,
        'themes': list(detail.themes),
    }
