"""
Sitemap walker: finds every collection page the discovery site publishes.
"""

import logging
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from . import config
from .models import FetchStatus, SitemapEntry
from .session import RateGovernor

logger = logging.getLogger("dredger.sitemap")

CONTENT_SITEMAP_MARKERS = ('post-sitemap', 'wp-sitemap-posts-post-')
EXCLUDED_PATH_FRAGMENTS = ('/category/', '/tag/', '/author/')
XML_ACCEPT = 'application/xml,text/xml;q=0.9,*/*;q=0.8'


def _local_tags(soup: BeautifulSoup, name: str):
    # Match on the local name so namespaced (sm:url) and plain (url) documents both work
    return soup.find_all(lambda tag: tag.name.rsplit(':', 1)[-1] == name)


def _child_text(tag, name: str) -> Optional[str]:
    for child in tag.find_all(True, recursive=False):
        if child.name.rsplit(':', 1)[-1] == name:
            text = child.get_text(strip=True)
            return text or None
    return None


def parse_sitemap(content: bytes) -> Tuple[List[str], List[SitemapEntry]]:
    """Returns (sub-sitemap urls, url entries) found in one sitemap document."""
    soup = BeautifulSoup(content, 'xml')
    sub_sitemaps = [loc for loc in (_child_text(t, 'loc') for t in _local_tags(soup, 'sitemap')) if loc]
    entries = []
    for tag in _local_tags(soup, 'url'):
        loc = _child_text(tag, 'loc')
        if loc:
            entries.append(SitemapEntry(url=loc, lastmod=_child_text(tag, 'lastmod')))
    return sub_sitemaps, entries


def is_content_sitemap(url: str) -> bool:
    return any(marker in url for marker in CONTENT_SITEMAP_MARKERS)


class SitemapWalker:
    def __init__(self, governor: RateGovernor, origin: str = config.DISCOVERY_SITE):
        self.governor = governor
        self.origin = origin.rstrip('/')
        self.errors = 0

    def find_root_sitemap(self) -> str:
        result = self.governor.fetch(f"{self.origin}/robots.txt", timeout=config.SHORT_TIMEOUT)
        if result.ok:
            for line in result.response.text.splitlines():
                if line.lower().startswith('sitemap:'):
                    return line.split(':', 1)[1].strip()
        return f"{self.origin}/sitemap.xml"

    def is_collection_url(self, url: str) -> bool:
        lowered = url.lower()
        if any(fragment in lowered for fragment in EXCLUDED_PATH_FRAGMENTS):
            return False
        try:
            return urlparse(url).path.strip('/') != ''
        except ValueError:
            return False

    def _fetch(self, url: str) -> Optional[bytes]:
        result = self.governor.fetch(url, timeout=config.SITEMAP_TIMEOUT, accept=XML_ACCEPT)
        if result.ok:
            return result.response.content
        if result.status is FetchStatus.BLOCKED:
            logger.warning(f"   🚧 Sitemap blocked: {url}")
        else:
            self.errors += 1
            logger.warning(f"   ⚠️  Sitemap unavailable ({result.error}): {url}")
        return None

    def walk(self) -> List[SitemapEntry]:
        """Collection pages in sitemap order, deduplicated. Empty when the root is unreachable."""
        self.errors = 0
        root_url = self.find_root_sitemap()
        logger.info(f"🗺️  Reading sitemap: {root_url}")

        content = self._fetch(root_url)
        if content is None:
            return []

        sub_sitemaps, entries = parse_sitemap(content)
        if sub_sitemaps:
            targets = [s for s in sub_sitemaps if is_content_sitemap(s)]
            logger.info(f"   Found {len(targets)} content sitemaps (of {len(sub_sitemaps)})")
            entries = []
            for sub in targets:
                sub_content = self._fetch(sub)
                if sub_content is None:
                    continue
                _, sub_entries = parse_sitemap(sub_content)
                entries.extend(sub_entries)

        seen = set()
        pages = []
        for entry in entries:
            if entry.url in seen or not self.is_collection_url(entry.url):
                continue
            seen.add(entry.url)
            pages.append(entry)

        logger.info(f"   Found {len(pages)} collection pages")
        return pages
