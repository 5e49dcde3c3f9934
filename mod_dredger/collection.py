"""
Collection page parser.

A collection page lists mods under numbered headings such as
"3. Ponytail Braid by JaneCreates", each followed by preview images and a link
to the mod's own page. Any object with a compatible parse(url) -> PageResult
method (for instance a model-backed block parser) can stand in for this class.
"""

import logging
import re
from typing import List, Optional, Sequence, Tuple
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from . import config, taxonomy
from .classifier import DISCOVERY_HOST
from .images import is_valid_image_url
from .models import DiscoveredItem, FetchStatus, PageResult, PageStatus
from .session import RateGovernor

logger = logging.getLogger("dredger.collection")

# Greedy title so the last " by " separates the author
HEADING_PATTERN = re.compile(r'^\s*\d+\s*[.)]\s*(.+)\s+by\s+(.+?)\s*$', re.IGNORECASE)
ITEM_HEADINGS = ['h3', 'h4']
STOP_HEADINGS = {'h2', 'h3', 'h4', 'h5'}
IMAGE_SOURCE_ATTRS = ('data-src', 'data-lazy-src', 'src')

ALLOWED_LINK_HOSTS = tuple(host for _, host in taxonomy.PLATFORM_HOSTS)


class CollectionPageParser:
    def __init__(self, governor: RateGovernor, discovery_host: str = DISCOVERY_HOST,
                 allowed_hosts: Sequence[str] = ALLOWED_LINK_HOSTS,
                 max_images: int = config.MAX_IMAGES_PER_ITEM,
                 lookahead: int = config.HEADING_LOOKAHEAD):
        self.governor = governor
        self.discovery_host = discovery_host
        self.allowed_hosts = tuple(allowed_hosts)
        self.max_images = max_images
        self.lookahead = lookahead

    def parse(self, url: str) -> PageResult:
        result = self.governor.fetch(url, timeout=config.PAGE_TIMEOUT)
        if result.status is FetchStatus.BLOCKED:
            return PageResult(url=url, status=PageStatus.BLOCKED)
        if not result.ok:
            logger.warning(f"   ⚠️  Collection page unavailable ({result.error}): {url}")
            return PageResult(url=url, status=PageStatus.FAILED)
        return PageResult(url=url, status=PageStatus.OK, items=self.extract_items(result.response.content, url))

    def extract_items(self, html, page_url: str) -> List[DiscoveredItem]:
        soup = BeautifulSoup(html, 'lxml')
        items = []
        for heading in soup.find_all(ITEM_HEADINGS):
            text = ' '.join(heading.get_text(' ', strip=True).split())
            match = HEADING_PATTERN.match(text)
            if not match:
                continue

            title, author = match.group(1).strip(), match.group(2).strip()
            images, link = self._scan_block(heading, page_url)
            if not link:
                logger.debug(f"      No external link for '{title}', skipping")
                continue

            items.append(DiscoveredItem(
                title=title,
                author=author,
                external_url=link,
                discovery_source_url=page_url,
                image_urls=images,
            ))
        return items

    def _scan_block(self, heading, page_url: str) -> Tuple[List[str], Optional[str]]:
        images: List[str] = []
        link = None
        node = heading
        for _ in range(self.lookahead):
            node = node.find_next_sibling()
            if node is None or node.name in STOP_HEADINGS:
                break

            for img in ([node] if node.name == 'img' else node.find_all('img')):
                src = next((img.get(attr) for attr in IMAGE_SOURCE_ATTRS if img.get(attr)), None)
                if not src:
                    continue
                try:
                    src = urljoin(page_url, src.strip())
                except ValueError:
                    logger.debug(f"      Malformed image src skipped: {src[:80]}")
                    continue
                if len(images) < self.max_images and src not in images and is_valid_image_url(src):
                    images.append(src)

            if link is None:
                anchors = [node] if node.name == 'a' else node.find_all('a', href=True)
                for anchor in anchors:
                    href = (anchor.get('href') or '').strip()
                    if self.is_external_link(href):
                        link = href
                        break
        return images, link

    def is_external_link(self, href: str) -> bool:
        if not href or href.startswith(('#', '/')):
            return False
        try:
            host = urlparse(href).netloc.lower()
        except ValueError:
            return False
        if not host or self.discovery_host in host:
            return False
        return any(allowed in host for allowed in self.allowed_hosts)
