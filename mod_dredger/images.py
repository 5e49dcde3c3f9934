"""
Image ingestion: download candidate images and rehost them on first-party storage.
Only the returned first-party URLs may ever reach the catalog.
"""

import logging
import re
import time
from typing import Callable, Iterable, List, Optional, Tuple

from . import config
from .blob import BlobStore, BlobUploadError
from .models import FetchStatus
from .session import RateGovernor

logger = logging.getLogger("dredger.images")

IMAGE_DENY_FRAGMENTS = (
    'data:image', 'placeholder', '1x1', 'pixel', 'tracking', 'spacer', 'blank', 'transparent',
    'gravatar', 'avatar', 'icon', 'logo', 'favicon',
)

EXTENSIONS = {
    'image/jpeg': 'jpg',
    'image/jpg': 'jpg',
    'image/png': 'png',
    'image/gif': 'gif',
    'image/webp': 'webp',
    'image/svg+xml': 'svg',
    'image/avif': 'avif',
}
DEFAULT_EXTENSION = 'jpg'

IMAGE_ACCEPT = 'image/webp,image/apng,image/*,*/*;q=0.8'


class ImageRejected(Exception):
    pass


def is_valid_image_url(url: Optional[str]) -> bool:
    if not url or not url.lower().startswith(('http://', 'https://')):
        return False
    lowered = url.lower()
    return not any(fragment in lowered for fragment in IMAGE_DENY_FRAGMENTS)


def extension_for(content_type: Optional[str]) -> str:
    base = (content_type or '').split(';')[0].strip().lower()
    return EXTENSIONS.get(base, DEFAULT_EXTENSION)


def slugify(title: str) -> str:
    slug = re.sub(r'[^a-z0-9]+', '-', (title or '').lower()).strip('-')
    return slug[:50] or 'mod'

class ImageIngestor:
    """Image GETs are paced and rotated by the shared rate governor."""
    def __init__(self, blob_store: BlobStore, governor: RateGovernor,
                 max_images: int = config.MAX_IMAGES_PER_ITEM, timeout: float = config.IMAGE_TIMEOUT,
                 max_bytes: int = config.MAX_IMAGE_BYTES,
                 clock_ms: Callable[[], int] = lambda: int(time.time() * 1000)):
        self.blob_store = blob_store
        self.governor = governor
        self.max_images = max_images
        self.timeout = timeout
        self.max_bytes = max_bytes
        self._clock_ms = clock_ms

    def ingest(self, candidate_urls: Iterable[str], title: str) -> List[str]:
        """Rehosts up to max_images candidates; failures are skipped, never raised."""
        candidates = [u for u in dict.fromkeys(candidate_urls) if is_valid_image_url(u)][:self.max_images]
        slug = slugify(title)
        rehosted: List[str] = []

        for i, url in enumerate(candidates):
            logger.debug(f"      📥 Image {i + 1}/{len(candidates)}: {url[:80]}")
            try:
                data, content_type = self._download(url)
                path = f"{config.BLOB_FOLDER}/{slug}-{self._clock_ms()}-{i}.{extension_for(content_type)}"
                rehosted.append(self.blob_store.put(data, content_type, path))
            except (ImageRejected, BlobUploadError) as e:
                logger.warning(f"      ⚠️  Image skipped ({e}): {url[:80]}")

        return rehosted

    def _download(self, url: str) -> Tuple[bytes, str]:
        result = self.governor.fetch(url, timeout=self.timeout, accept=IMAGE_ACCEPT)
        if result.status is FetchStatus.BLOCKED:
            raise ImageRejected(f"blocked (HTTP {result.status_code})")
        if not result.ok:
            raise ImageRejected(result.error)

        r = result.response
        content_type = r.headers.get('Content-Type', '').split(';')[0].strip().lower()
        if not content_type.startswith('image/'):
            raise ImageRejected(f"not an image: {content_type or 'no content type'}")

        data = r.content
        if not data:
            raise ImageRejected("empty body")
        if len(data) > self.max_bytes:
            raise ImageRejected(f"too large: {len(data)} bytes")
        return data, content_type
