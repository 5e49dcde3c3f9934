"""
Source adapters: read description, thumbnail, gallery and paid status off a
mod's page on its hosting platform.

Each adapter is a selector table. Blocked, unavailable or failed fetches come
back as DetailOutcome values so the caller can fall back to discovery data.
"""

import logging
import re
from typing import List, Optional, Tuple
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from . import config, taxonomy
from .images import is_valid_image_url
from .models import DetailOutcome, DetailStatus, DiscoveredItem, FetchStatus, PlatformDetail
from .session import RateGovernor

logger = logging.getLogger("dredger.adapters")

META_DESCRIPTION = 'meta[name="description"]'
OG_DESCRIPTION = 'meta[property="og:description"]'
OG_IMAGE = 'meta[property="og:image"]'

# ============================================================================
# PLATFORM IDENTIFICATION
# ============================================================================

def platform_for(url: str) -> str:
    host = urlparse(url).netloc.lower()
    for name, fragment in taxonomy.PLATFORM_HOSTS:
        if fragment in host:
            return name
    return taxonomy.OTHER_PLATFORM


def extract_source_id(url: str, platform: Optional[str] = None) -> Optional[str]:
    platform = platform or platform_for(url)
    pattern = taxonomy.SOURCE_ID_PATTERNS.get(platform)
    if pattern:
        match = re.search(pattern, url)
        if match:
            return match.group(1)
    path = urlparse(url).path.strip('/')
    return path.replace('/', '_')[:taxonomy.SOURCE_ID_MAX_LENGTH] or None

# ============================================================================
# ADAPTERS
# ============================================================================

class Adapter:
    name = taxonomy.OTHER_PLATFORM
    hosts: Tuple[str, ...] = ()
    description_selectors: Tuple[str, ...] = (OG_DESCRIPTION, META_DESCRIPTION)
    thumbnail_selectors: Tuple[str, ...] = (OG_IMAGE, 'img')
    gallery_selectors: Tuple[str, ...] = ()
    paid_selectors: Tuple[str, ...] = ()

    def matches(self, url: str) -> bool:
        host = urlparse(url).netloc.lower()
        return any(fragment in host for fragment in self.hosts)

    def scrape(self, item: DiscoveredItem, governor: RateGovernor) -> DetailOutcome:
        result = governor.fetch(item.external_url, timeout=config.PAGE_TIMEOUT)
        if result.status is FetchStatus.BLOCKED:
            return DetailOutcome(DetailStatus.BLOCKED, reason=f"HTTP {result.status_code}")
        if result.status is FetchStatus.TRANSPORT_ERROR:
            return DetailOutcome(DetailStatus.FAILED, reason=result.error)
        if not result.ok:
            return DetailOutcome(DetailStatus.UNAVAILABLE, reason=result.error)

        soup = BeautifulSoup(result.response.content, 'lxml')
        return DetailOutcome(DetailStatus.SUCCESS, detail=self.extract(soup, item.external_url))

    def extract(self, soup: BeautifulSoup, url: str) -> PlatformDetail:
        return PlatformDetail(
            description=self._first_text(soup, self.description_selectors),
            thumbnail=self._first_image(soup, self.thumbnail_selectors, url),
            images=self._gallery(soup, url),
            is_free=not any(soup.select_one(sel) for sel in self.paid_selectors),
        )

    @staticmethod
    def _first_text(soup: BeautifulSoup, selectors) -> Optional[str]:
        for selector in selectors:
            node = soup.select_one(selector)
            if node is None:
                continue
            text = node.get('content', '') if node.name == 'meta' else node.get_text(' ', strip=True)
            text = ' '.join((text or '').split())
            if text:
                return text
        return None

    @staticmethod
    def _image_src(node, url: str) -> Optional[str]:
        src = node.get('content') if node.name == 'meta' else node.get('src') or node.get('data-src')
        if not src:
            return None
        try:
            return urljoin(url, src.strip())
        except ValueError:
            logger.debug(f"      Malformed image src skipped: {src[:80]}")
            return None

    def _first_image(self, soup: BeautifulSoup, selectors, url: str) -> Optional[str]:
        for selector in selectors:
            for node in soup.select(selector):
                src = self._image_src(node, url)
                if src and is_valid_image_url(src):
                    return src
        return None

    def _gallery(self, soup: BeautifulSoup, url: str) -> List[str]:
        images: List[str] = []
        for selector in self.gallery_selectors:
            for node in soup.select(selector):
                src = self._image_src(node, url)
                if src and src not in images and is_valid_image_url(src):
                    images.append(src)
        return images


class TheSimsResourceAdapter(Adapter):
    name = 'TheSimsResource'
    hosts = ('thesimsresource.com',)
    description_selectors = (
        '.download-description', '.item-description', '.description', '.detail-description',
        META_DESCRIPTION,
    )
    thumbnail_selectors = (OG_IMAGE, '.download-image img', '.item-image img', '.preview-image img')
    gallery_selectors = ('.download-images img', '.gallery img', '.preview-images img')
    paid_selectors = ('.premium-only', '.vip-only', '[class*="premium"]', '[class*="vip"]')


class PatreonAdapter(Adapter):
    name = 'Patreon'
    hosts = ('patreon.com',)
    description_selectors = (OG_DESCRIPTION, '.post-content', '.post-body', '[data-tag="post-content"]')
    thumbnail_selectors = (OG_IMAGE,)
    gallery_selectors = ('[data-tag="post-content"] img', '.post-content img', '.post-body img')
    paid_selectors = ('.locked-post', '[class*="locked"]', '[class*="patron-only"]')


class TumblrAdapter(Adapter):
    name = 'Tumblr'
    hosts = ('tumblr.com',)
    description_selectors = (OG_DESCRIPTION, '.post-content', '.post-body', '.body-text')
    thumbnail_selectors = (OG_IMAGE, '.post img', '.photo img')
    gallery_selectors = ('.post img', '.photo img', '.content img')


class ModCollectiveAdapter(Adapter):
    name = 'ModCollective'
    hosts = ('modcollective.gg',)
    description_selectors = ('.mod-description', '.item-description', '.description', OG_DESCRIPTION)
    thumbnail_selectors = (OG_IMAGE, '.mod-image img', '.main-image img')
    gallery_selectors = ('.gallery img', '.screenshots img', '.preview-images img')


class GenericAdapter(Adapter):
    """Anything without a dedicated adapter; metadata tags only."""


ADAPTERS: Tuple[Adapter, ...] = (
    TheSimsResourceAdapter(),
    PatreonAdapter(),
    TumblrAdapter(),
    ModCollectiveAdapter(),
)
GENERIC_ADAPTER = GenericAdapter()


def adapter_for(url: str) -> Adapter:
    for adapter in ADAPTERS:
        if adapter.matches(url):
            return adapter
    return GENERIC_ADAPTER
