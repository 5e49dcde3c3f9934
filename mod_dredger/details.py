"""
Builds the ScrapedDetail that gets persisted for one discovered item.

Images always come from first-party storage. A scraped description is kept only
when it reads like prose; breadcrumbs, bare titles and text in the wrong
language are replaced by a generated description that never names the source.
"""

import logging
import re
from typing import List, Optional, Tuple

from langdetect import DetectorFactory, LangDetectException, detect

from . import config
from .adapters import extract_source_id, platform_for
from .classifier import Classifier, categorize, detect_nsfw, detect_visual_style, extract_tags
from .models import DetailOutcome, DetailStatus, DiscoveredItem, ScrapedDetail

logger = logging.getLogger("dredger.details")

# Seed langdetect for reproducible results
DetectorFactory.seed = 0

SHORT_DESCRIPTION_LIMIT = 200
DESCRIPTION_LIMIT = 1000
SCRAPED_SHORT_LIMIT = 150

# --- BREADCRUMB FILTERS ---
BREADCRUMB_PATTERNS = [re.compile(p, re.IGNORECASE) for p in (
    r'^the sims resource\s*-',
    r'^tsr\s*-',
    r'^patreon\s*-',
    r'^tumblr\s*-',
    r'^mod\s*collective\s*-',
    r'^curseforge\s*-',
    r'^sims\s*dom\s*-',
    r'^mod\s*the\s*sims\s*-',
    r'^sims\s*4\s*-\s*(hair|clothing|makeup|skin|furniture|accessories|build|buy)',
    r'^[^-]+\s*-\s*sims\s*4\s*-\s*',
    r'^download\s+(from|at|on)\s+',
)]
DASH_SEPARATOR = re.compile(r'\s+-\s+')


def is_breadcrumb_description(text: Optional[str]) -> bool:
    """True when the text is site metadata rather than a written description."""
    if not text or len(text) < 10:
        return True
    if any(p.search(text) for p in BREADCRUMB_PATTERNS):
        return True
    if len(DASH_SEPARATOR.findall(text[:100])) >= 4:
        return True
    # Bare title: short with no sentence punctuation
    return len(text) < 50 and '.' not in text and ',' not in text


def language_mismatch(text: str, language: str = config.LANGUAGE_FILTER) -> bool:
    if not language or len(text) <= 50:
        return False
    try:
        return detect(text) != language
    except LangDetectException as e:
        logger.debug(f"Language detection failed: {e}")
        return False

# ============================================================================
# DESCRIPTION GENERATOR
# ============================================================================

HAIR_ATTRIBUTES = (
    (('ponytail',), 'ponytail'), (('updo',), 'updo'), (('braid',), 'braided'), (('bun',), 'bun'),
    (('curly', 'curls'), 'curly'), (('wavy',), 'wavy'), (('straight',), 'straight'), (('long',), 'long'),
    (('short',), 'short'), (('medium',), 'medium-length'), (('bangs', 'fringe'), 'with bangs'),
    (('bob',), 'bob'), (('pixie',), 'pixie cut'), (('afro',), 'afro'),
)
CLOTHING_ATTRIBUTES = (
    (('casual',), 'casual'), (('formal',), 'formal'), (('vintage',), 'vintage-inspired'),
    (('modern',), 'modern'), (('elegant',), 'elegant'), (('cozy',), 'cozy'), (('summer',), 'summer'),
    (('winter',), 'winter'), (('party',), 'party'), (('everyday',), 'everyday'),
    (('athletic', 'sport'), 'athletic'),
)
MAKEUP_ATTRIBUTES = (
    (('natural',), 'natural'), (('glam',), 'glamorous'), (('bold',), 'bold'), (('subtle',), 'subtle'),
    (('smoky', 'smokey'), 'smoky'), (('glitter', 'sparkle'), 'sparkly'),
)
STYLE_SENTENCES = {
    'maxis-match': 'This Maxis Match content seamlessly blends with the base game aesthetic. ',
    'alpha': 'This alpha CC features a realistic, high-detail style. ',
    'semi-maxis': 'This semi-maxis content offers a balanced blend of realistic and Maxis Match styles. ',
}
CLOTHING_NOUNS = {'tops': 'top', 'bottoms': 'bottom', 'dresses': 'dress'}


def _attributes(title: str, table) -> List[str]:
    return [label for needles, label in table if any(n in title for n in needles)]


def clean_title(title: str) -> str:
    title = re.sub(r'^(download|get|free)\s+', '', title or '', flags=re.IGNORECASE)
    return re.sub(r'\s+(download|cc|custom content)$', '', title, flags=re.IGNORECASE).strip()


def generate_description(title: str, author: str, content_type: Optional[str] = None,
                         visual_style: Optional[str] = None, category: Optional[str] = None) -> Tuple[str, str]:
    """Returns (short_description, description) built only from the item's own attributes."""
    lower = clean_title(title).lower()
    style = STYLE_SENTENCES.get(visual_style, '')
    category = category or categorize(title)

    if content_type == 'hair':
        attrs = _attributes(lower, HAIR_ATTRIBUTES)
        what = f"A beautiful {', '.join(attrs)} hairstyle" if attrs else 'A stunning hairstyle'
        short = f"{what} for your Sims by {author}."
        long = (f"{what} created by {author}. {style}Perfect for adding variety to your Sims' look. "
                f"This custom content hairstyle is compatible with The Sims 4 and offers a fresh option "
                f"for your Create-A-Sim wardrobe.")
    elif content_type in CLOTHING_NOUNS:
        noun = CLOTHING_NOUNS[content_type]
        attrs = _attributes(lower, CLOTHING_ATTRIBUTES)
        what = f"A {', '.join(attrs)} {noun}" if attrs else f"A stylish {noun}"
        short = f"{what} for your Sims by {author}."
        long = (f"{what} created by {author}. {style}This custom content clothing item adds a fresh "
                f"fashion option to your Sims' closet. Perfect for everyday wear or special occasions.")
    elif content_type == 'shoes':
        short = f"Stylish footwear for your Sims by {author}."
        long = (f"Fashionable shoes created by {author}. {style}Complete your Sims' outfits with this "
                f"custom footwear option. Designed to complement a variety of styles.")
    elif content_type in ('accessories', 'jewelry'):
        short = f"Beautiful {content_type} for your Sims by {author}."
        long = (f"Stunning {content_type} created by {author}. {style}Add the perfect finishing touch "
                f"to your Sims' look with these custom accessories.")
    elif content_type == 'makeup':
        attrs = _attributes(lower, MAKEUP_ATTRIBUTES)
        what = f"A {', '.join(attrs)} makeup look" if attrs else 'A beautiful makeup look'
        short = f"{what} for your Sims by {author}."
        long = (f"{what} created by {author}. {style}Enhance your Sims' appearance with this custom "
                f"makeup. Perfect for creating diverse and unique looks in Create-A-Sim.")
    elif content_type == 'skin':
        short = f"Custom skin overlay for your Sims by {author}."
        long = (f"High-quality skin content created by {author}. {style}Enhance your Sims' appearance "
                f"with this custom skin option. Designed to work seamlessly with your existing CC.")
    elif content_type == 'eyes':
        short = f"Custom eye contacts/colors for your Sims by {author}."
        long = (f"Beautiful eye content created by {author}. {style}Give your Sims stunning new eye "
                f"options with this custom content.")
    elif content_type in ('furniture', 'decor'):
        short = f"Custom {content_type} for your Sims' homes by {author}."
        long = (f"{content_type.capitalize()} created by {author}. {style}Add personality to your Sims' "
                f"living spaces with this custom build/buy content.")
    elif content_type == 'poses':
        short = f"Custom poses for your Sims by {author}."
        long = (f"Expressive pose pack created by {author}. Perfect for storytelling, screenshots, and "
                f"creating memorable moments with your Sims. Compatible with pose player mods.")
    elif content_type in ('gameplay-mod', 'script-mod'):
        short = f"A gameplay mod for The Sims 4 by {author}."
        long = (f"Gameplay modification created by {author}. This mod enhances or changes gameplay "
                f"mechanics in The Sims 4. Always read the creator's documentation for installation "
                f"and compatibility information.")
    elif category == 'Poses':
        short = f"Custom poses for your Sims by {author}."
        long = f"Pose pack created by {author}. Perfect for screenshots and storytelling with your Sims."
    elif category == 'Hair':
        short = f"Custom hairstyle for your Sims by {author}."
        long = (f"A beautiful custom hairstyle created by {author}. {style}Perfect for adding variety "
                f"to your Sims' Create-A-Sim options.")
    elif category.startswith('CAS'):
        short = f"Custom content for Create-A-Sim by {author}."
        long = (f"Create-A-Sim custom content created by {author}. {style}Enhance your Sims' appearance "
                f"with this custom content.")
    elif category.startswith('Build'):
        short = f"Custom build/buy content by {author}."
        long = (f"Build and buy mode content created by {author}. {style}Add new options to your Sims' "
                f"homes with this custom content.")
    else:
        short = f"Custom content for The Sims 4 by {author}."
        long = (f"Custom content created by {author}. {style}Enhance your Sims 4 experience with this "
                f"community-created content.")

    return short[:SHORT_DESCRIPTION_LIMIT], long[:DESCRIPTION_LIMIT]

# ============================================================================
# ASSEMBLY
# ============================================================================

def assemble_detail(item: DiscoveredItem, outcome: DetailOutcome, rehosted_images: List[str],
                    classifier: Classifier, language: str = config.LANGUAGE_FILTER) -> ScrapedDetail:
    """
    Combines discovery data, the adapter outcome and rehosted images.
    Any non-success outcome falls back to discovery data alone.
    """
    scraped = outcome.detail if outcome.status is DetailStatus.SUCCESS else None
    source = platform_for(item.external_url)

    description = scraped.description if scraped and scraped.description else ''
    if description and (is_breadcrumb_description(description) or language_mismatch(description, language)):
        logger.debug(f"      Discarding scraped description for '{item.title}'")
        description = ''

    classification = classifier.classify(
        item.title,
        description or None,
        source_url=item.external_url,
        discovery_page_url=item.discovery_source_url,
    )
    visual_style = detect_visual_style(item.title, description)
    category = categorize(item.title, description)
    tags = extract_tags(item.title, description)
    is_nsfw = detect_nsfw(item.title, description)

    if description:
        short_description = description[:SCRAPED_SHORT_LIMIT]
        description = description[:DESCRIPTION_LIMIT]
    else:
        short_description, description = generate_description(
            item.title, item.author, classification.content_type, visual_style, category,
        )

    if scraped:
        is_free = scraped.is_free
    else:
        is_free = source != 'Patreon'

    return ScrapedDetail(
        title=item.title,
        author=item.author,
        description=description,
        short_description=short_description,
        thumbnail=rehosted_images[0] if rehosted_images else None,
        images=list(rehosted_images),
        download_url=item.external_url,
        source_url=item.external_url,
        source=source,
        source_id=extract_source_id(item.external_url, source),
        category=category,
        game_version=config.GAME_VERSION,
        tags=tags,
        is_free=is_free,
        is_nsfw=is_nsfw,
        content_type=classification.content_type,
        visual_style=visual_style,
        themes=classification.themes,
    )
