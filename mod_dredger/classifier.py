"""
Classifier: maps a discovered item onto the canonical content type and room themes.

An explicit category segment in the discovery page URL always wins. Otherwise
keyword rules are tried in priority order over the title and description.
"""

import logging
import re
from functools import lru_cache
from typing import List, Optional, Set, Tuple
from urllib.parse import urlparse

from . import config, taxonomy
from .models import CategoryMapping, Classification

logger = logging.getLogger("dredger.classifier")

HIGH = 'high'
MEDIUM = 'medium'


@lru_cache(maxsize=None)
def _keyword_pattern(keyword: str):
    # Whole word, allowing a plural suffix: 'brow' hits 'brows' but not 'brown'
    return re.compile(r'(?<![a-z0-9])' + re.escape(keyword) + r'(?:s|es)?(?![a-z0-9])')


def has_keyword(text: str, keyword: str) -> bool:
    return bool(text) and _keyword_pattern(keyword).search(text) is not None


def _matches(text: str, keywords) -> List[str]:
    return [kw for kw in keywords if has_keyword(text, kw)]


def _host_of(url: str) -> str:
    host = urlparse(url).netloc.lower()
    return host[4:] if host.startswith('www.') else host


DISCOVERY_HOST = _host_of(config.DISCOVERY_SITE)

# ============================================================================
# URL HINTS
# ============================================================================

def extract_category_from_url(url: Optional[str], discovery_host: str = DISCOVERY_HOST,
                              root_segment: str = config.CONTENT_ROOT_SEGMENT) -> Optional[str]:
    """
    Category segment of a discovery-site URL shaped like /{root}/{category}/{slug}.
    Nested paths (/{root}/{parent}/{category}/{slug}) yield the most specific segment.
    """
    if not url:
        return None
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if not parsed.netloc or discovery_host not in parsed.netloc.lower():
        return None

    segments = [s for s in parsed.path.split('/') if s]
    if len(segments) < 2 or segments[0].lower() != root_segment:
        return None
    if len(segments) >= 4:
        return segments[-2].lower()
    return segments[1].lower()

# ============================================================================
# KEYWORD DETECTION
# ============================================================================

def score_content_type(title: str, description: Optional[str] = None) -> Optional[Tuple[str, str]]:
    """(content_type, confidence) for the first confident rule, or None."""
    title_lower = (title or '').lower()
    desc_lower = (description or '').lower()

    rules = sorted(taxonomy.CONTENT_TYPE_RULES, key=lambda r: -r.priority)
    for rule in rules:
        if _matches(title_lower, rule.negative) or _matches(desc_lower, rule.negative):
            continue

        in_title = _matches(title_lower, rule.keywords)
        if in_title:
            strong = len(in_title) >= 2 or rule.priority >= taxonomy.HIGH_CONFIDENCE_PRIORITY
            return rule.content_type, HIGH if strong else MEDIUM

        in_desc = _matches(desc_lower, rule.keywords)
        if len(in_desc) >= 2:
            return rule.content_type, MEDIUM
        if len(in_desc) == 1 and rule.priority >= taxonomy.DESCRIPTION_TRUST_PRIORITY:
            return rule.content_type, MEDIUM
    return None


def detect_content_type(title: str, description: Optional[str] = None) -> Optional[str]:
    """Returns a content type only for medium or high confidence matches."""
    scored = score_content_type(title, description)
    if scored is None:
        return None
    content_type, confidence = scored
    logger.debug(f"      Detected {content_type} ({confidence} confidence) for '{title}'")
    return content_type


def detect_room_themes(title: str, description: Optional[str] = None) -> List[str]:
    text = f"{title or ''} {description or ''}".lower()
    return [theme for theme, keywords in taxonomy.ROOM_THEME_RULES if _matches(text, keywords)]


def detect_visual_style(title: str, description: Optional[str] = None) -> Optional[str]:
    text = f"{title or ''} {description or ''}".lower()
    for style, keywords in taxonomy.VISUAL_STYLE_RULES:
        if _matches(text, keywords):
            return style
    return None


def detect_nsfw(title: str, description: Optional[str] = None) -> bool:
    text = f"{title or ''} {description or ''}".lower()
    return bool(_matches(text, taxonomy.NSFW_KEYWORDS))


def extract_tags(title: str, description: Optional[str] = None) -> List[str]:
    text = f"{title or ''} {description or ''}".lower()
    return _matches(text, taxonomy.COMMON_TAGS)


def categorize(title: str, description: Optional[str] = None) -> str:
    """Coarse legacy category label kept alongside the faceted taxonomy."""
    text = f"{title or ''} {description or ''}".lower()
    for label, keywords in taxonomy.LEGACY_CATEGORY_RULES:
        if _matches(text, keywords):
            return label
    return taxonomy.DEFAULT_LEGACY_CATEGORY

# ============================================================================
# CLASSIFIER
# ============================================================================

class Classifier:
    def __init__(self, discovery_host: str = DISCOVERY_HOST, root_segment: str = config.CONTENT_ROOT_SEGMENT):
        self.discovery_host = discovery_host
        self.root_segment = root_segment
        self.unmapped: Set[str] = set()

    def map_url_category(self, segment: Optional[str]) -> Optional[CategoryMapping]:
        if not segment:
            return None
        normalized = segment.strip().lower()
        mapping = taxonomy.URL_CATEGORY_MAP.get(normalized)
        if mapping is None and normalized not in self.unmapped:
            self.unmapped.add(normalized)
            logger.info(f"   🗂️  Unmapped URL category: '{normalized}'")
        return mapping

    def url_hint(self, *urls: Optional[str]) -> Optional[CategoryMapping]:
        for url in urls:
            segment = extract_category_from_url(url, self.discovery_host, self.root_segment)
            if segment:
                mapping = self.map_url_category(segment)
                if mapping:
                    return mapping
        return None

    def classify(self, title: str, description: Optional[str] = None,
                 source_url: Optional[str] = None, discovery_page_url: Optional[str] = None) -> Classification:
        hint = self.url_hint(discovery_page_url, source_url)

        content_type = hint.content_type if hint else detect_content_type(title, description)

        themes: List[str] = []
        if hint and hint.theme:
            themes.append(hint.theme)
        if content_type is None or content_type in taxonomy.ROOM_CONTENT_TYPES:
            for theme in detect_room_themes(title, description):
                if theme not in themes:
                    themes.append(theme)

        return Classification(content_type=content_type, themes=themes)
