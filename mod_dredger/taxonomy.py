"""
Static classification tables.

Kept as plain data so new aliases, keywords and platforms can be added without
touching the code that reads them.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from .models import CategoryMapping

# ============================================================================
# URL CATEGORY MAP
# ============================================================================

# contentType -> URL path segments that name it
_URL_ALIASES: Dict[str, List[str]] = {
    'hair': ['hair', 'hairstyle', 'hairstyles', 'haircut', 'haircuts'],
    'eyebrows': ['eyebrows', 'eyebrow', 'brows', 'brow'],
    'lashes': ['eyelashes', 'eyelash', 'lashes', 'lash'],
    'eyeliner': ['eyeliner', 'liner', 'eye-liner'],
    'lipstick': ['lipstick', 'lips', 'lip-gloss', 'lipgloss'],
    'blush': ['blush', 'blusher', 'cheeks', 'contour', 'highlighter'],
    'beard': ['beard', 'beards', 'stubble', 'goatee'],
    'facial-hair': ['mustache', 'moustache', 'facial-hair'],
    'cas-background': ['cas-backgrounds', 'cas-background', 'cas-bg'],
    'preset': ['presets', 'preset', 'body-preset', 'body-presets', 'face-preset', 'face-presets'],
    'loading-screen': ['loading-screen', 'loading-screens'],
    'makeup': ['makeup', 'make-up', 'cosmetics', 'eyeshadow', 'mascara', 'foundation'],
    'skin': [
        'skin', 'skinblend', 'skin-blend', 'skindetails', 'skin-details', 'freckles', 'moles',
        'overlays', 'overlay', 'skin-overlay', 'skin-overlays',
    ],
    'eyes': ['eyes', 'eye-colors', 'eye-colour', 'contacts', 'contact-lenses'],
    'tattoos': ['tattoo', 'tattoos'],
    'nails': ['nails', 'nail', 'manicure'],
    'full-body': ['clothing', 'clothes', 'outfit', 'outfits', 'cas'],
    'tops': ['tops', 'top', 'shirts', 'shirt', 'blouse', 'blouses', 'sweater', 'sweaters'],
    'bottoms': ['bottoms', 'bottom', 'pants', 'jeans', 'skirts', 'skirt', 'shorts'],
    'dresses': ['dresses', 'dress', 'gown', 'gowns'],
    'shoes': ['shoes', 'footwear', 'boots', 'heels', 'sneakers'],
    'accessories': ['accessories', 'accessory'],
    'jewelry': [
        'jewelry', 'jewellery', 'necklace', 'necklaces', 'earrings', 'earring', 'bracelet',
        'bracelets', 'rings', 'ring', 'piercings', 'piercing',
    ],
    'glasses': ['glasses', 'sunglasses', 'eyewear'],
    'hats': ['hats', 'hat', 'caps', 'cap', 'headwear'],
    'furniture': [
        'furniture', 'furnishings', 'furnishing', 'sofa', 'sofas', 'couch', 'couches', 'chair',
        'chairs', 'table', 'tables', 'desk', 'desks', 'bed', 'beds', 'dresser', 'dressers',
        'wardrobe', 'wardrobes', 'closet', 'closets', 'shelf', 'shelves', 'bookshelf',
        'bookshelves', 'cabinet', 'cabinets', 'nightstand', 'nightstands', 'vanity', 'mirror',
        'mirrors', 'build-buy', 'buildbuy',
    ],
    'decor': ['decor', 'decoration', 'decorations', 'decorative', 'objects', 'object'],
    'clutter': ['clutter', 'clutter-items'],
    'wall-art': ['wall-art', 'wallart', 'paintings', 'painting', 'posters', 'poster'],
    'rugs': ['rugs', 'rug', 'carpet', 'carpets'],
    'curtains': ['curtains', 'curtain', 'drapes', 'blinds'],
    'plants': ['plants', 'plant', 'houseplants', 'succulents'],
    'lighting': ['lighting', 'lights', 'light', 'lamp', 'lamps', 'chandelier', 'chandeliers'],
    'poses': ['poses', 'pose', 'pose-pack', 'posepacks', 'animations', 'animation'],
    'pet-furniture': ['pet-furniture', 'pet-bed', 'pet-beds', 'cat-bed', 'dog-bed'],
    'pet-clothing': ['pet-clothing', 'pet-clothes'],
    'pet-accessories': ['pet-accessories', 'pet-accessory', 'collar', 'collars'],
    'gameplay-mod': ['gameplay', 'gameplay-mod', 'gameplay-mods', 'mods', 'mod'],
    'script-mod': ['script', 'scripts', 'script-mod', 'script-mods'],
    'lot': ['lot', 'lots', 'house', 'houses', 'build', 'builds'],
}

# Room segments carry a theme as well as a content type
_ROOM_SEGMENTS: Dict[str, Tuple[str, str]] = {
    'bathroom': ('furniture', 'bathroom'),
    'kitchen': ('furniture', 'kitchen'),
    'bedroom': ('furniture', 'bedroom'),
    'living-room': ('furniture', 'living-room'),
    'livingroom': ('furniture', 'living-room'),
    'living': ('furniture', 'living-room'),
    'dining-room': ('furniture', 'dining-room'),
    'diningroom': ('furniture', 'dining-room'),
    'dining': ('furniture', 'dining-room'),
    'office': ('furniture', 'office'),
    'study': ('furniture', 'office'),
    'kids-room': ('furniture', 'kids-room'),
    'kidsroom': ('furniture', 'kids-room'),
    'kids': ('furniture', 'kids-room'),
    'toddler': ('furniture', 'kids-room'),
    'nursery': ('furniture', 'nursery'),
    'baby': ('furniture', 'nursery'),
    'outdoor': ('decor', 'outdoor'),
    'garden': ('decor', 'outdoor'),
    'patio': ('decor', 'outdoor'),
    'yard': ('decor', 'outdoor'),
}


def _build_url_category_map() -> Dict[str, CategoryMapping]:
    table = {}
    for content_type, aliases in _URL_ALIASES.items():
        for alias in aliases:
            table[alias] = CategoryMapping(content_type)
    for segment, (content_type, theme) in _ROOM_SEGMENTS.items():
        table[segment] = CategoryMapping(content_type, theme)
    return table


URL_CATEGORY_MAP: Dict[str, CategoryMapping] = _build_url_category_map()

# ============================================================================
# KEYWORD RULES
# ============================================================================

@dataclass(frozen=True)
class KeywordRule:
    content_type: str
    priority: int
    keywords: Tuple[str, ...]
    negative: Tuple[str, ...] = ()


# Higher priority rules are tried first; equal priorities keep table order
CONTENT_TYPE_RULES: Tuple[KeywordRule, ...] = (
    # Face details
    KeywordRule('eyebrows', 110, ('eyebrow', 'brow'),
                ('lash', 'eyelash', 'eyeliner', 'lipstick', 'blush', 'mascara')),
    KeywordRule('lashes', 109, ('eyelash', 'lash', '3d lash'), ('eyebrow', 'brow')),
    KeywordRule('eyeliner', 108, ('eyeliner', 'eye liner', 'liner'), ('lip liner', 'lipliner')),
    KeywordRule('lipstick', 107, ('lipstick', 'lip stick', 'lip gloss', 'lipgloss', 'lip color',
                                  'lip colour', 'glossy lips', 'matte lips', 'butter gloss', 'lip tint')),
    KeywordRule('blush', 106, ('blush', 'blusher', 'cheek color', 'rouge', 'contour', 'contouring',
                               'highlighter', 'highlight')),
    KeywordRule('beard', 105, ('beard', 'goatee', 'stubble')),
    KeywordRule('facial-hair', 104, ('facial hair', 'facial-hair', 'mustache', 'moustache',
                                     'sideburns', 'mutton chops'), ('beard',)),
    # CAS specials
    KeywordRule('cas-background', 99, ('cas background', 'cas-background', 'cas bg', 'cas room',
                                       'create a sim background')),
    KeywordRule('loading-screen', 98, ('loading screen', 'loading-screen', 'load screen', 'main menu')),
    KeywordRule('preset', 97, ('body preset', 'preset', 'face preset', 'cas preset', 'sim preset'),
                ('reshade', 'gshade', 'shader')),
    # Pets
    KeywordRule('pet-furniture', 75, ('pet bed', 'pet furniture', 'cat bed', 'dog bed', 'cat tree',
                                      'scratch post', 'scratching post', 'pet bowl', 'food bowl',
                                      'water bowl', 'fish tank', 'aquarium', 'pet house', 'dog house',
                                      'cat house', 'pet crate', 'kennel')),
    KeywordRule('pet-clothing', 74, ('pet clothing', 'pet clothes', 'dog clothing', 'cat clothing',
                                     'pet outfit', 'dog outfit', 'cat outfit', 'pet sweater',
                                     'dog sweater', 'cat sweater', 'pet costume', 'dog costume',
                                     'cat costume')),
    KeywordRule('pet-accessories', 73, ('pet accessory', 'pet accessories', 'collar', 'leash',
                                        'harness', 'pet bandana', 'dog bandana', 'cat bandana',
                                        'pet bow', 'pet tag')),
    # Build/buy
    KeywordRule('wall-art', 58, ('wall art', 'wall-art', 'painting', 'poster', 'canvas', 'wall decor',
                                 'mural', 'picture frame', 'framed')),
    KeywordRule('rugs', 57, ('rug', 'carpet', 'floor mat', 'area rug')),
    KeywordRule('curtains', 56, ('curtain', 'drapes', 'drape', 'blinds', 'window treatment')),
    KeywordRule('plants', 55, ('plant', 'houseplant', 'succulent', 'potted plant', 'flower pot',
                               'planter', 'greenery', 'foliage'), ('garden', 'outdoor')),
    KeywordRule('lighting', 54, ('lamp', 'light', 'lighting', 'chandelier', 'sconce', 'lantern',
                                 'ceiling light', 'floor lamp', 'table lamp', 'pendant light'),
                ('christmas light', 'fairy light', 'string light')),
    KeywordRule('clutter', 53, ('clutter', 'trinket', 'knickknack', 'figurine', 'decorative object',
                                'small decor', 'tabletop decor', 'shelf decor', 'pillow',
                                'throw pillow', 'cushion')),
    KeywordRule('decor', 45, ('decor', 'decoration', 'decorative', 'ornament')),
    KeywordRule('furniture', 44, ('furniture', 'sofa', 'couch', 'chair', 'table', 'desk', 'bed',
                                  'dresser', 'wardrobe', 'closet', 'shelf', 'shelves', 'bookshelf',
                                  'bookshelves', 'cabinet', 'nightstand', 'vanity', 'mirror',
                                  'fireplace', 'armchair', 'bench', 'stool', 'ottoman', 'console',
                                  'sideboard', 'buffet', 'dining table', 'coffee table', 'end table',
                                  'tv stand', 'entertainment center', 'sink', 'toilet', 'shower',
                                  'tub', 'bathtub')),
    # CAS
    KeywordRule('hair', 38, ('hair', 'hairstyle', 'haircut', 'ponytail', 'braid', 'bun', 'updo',
                             'bangs', 'wig', 'locs', 'loc', 'dreadlocks', 'dreads', 'afro', 'mohawk',
                             'pixie', 'bob cut', 'curls', 'waves', 'straight hair'),
                ('facial hair', 'beard', 'eyebrow', 'brow', 'body hair')),
    KeywordRule('makeup', 37, ('makeup', 'make-up', 'cosmetic', 'eyeshadow', 'mascara', 'foundation',
                               'contour', 'highlighter', 'concealer', 'beauty', 'palette',
                               'eyeshadow palette')),
    KeywordRule('tattoos', 36, ('tattoo', 'body art', 'sleeve tattoo', 'leg tattoo', 'arm tattoo',
                                'back tattoo', 'chest tattoo', 'face tattoo', 'neck tattoo',
                                'hand tattoo')),
    KeywordRule('full-body', 35, ('outfit', 'full body', 'full-body', 'jumpsuit', 'romper', 'bodysuit',
                                  'onesie', 'overalls', 'uniform', 'costume', 'pajamas', 'pyjamas',
                                  'sleepwear', 'swimsuit', 'bikini', 'swimwear', 'wetsuit',
                                  'clothing set', 'clothes set', 'outfit set'),
                ('eyeshadow', 'makeup', 'palette', 'sneaker', 'shoe', 'boots', 'furniture', 'decor',
                 'clutter', 'tattoo')),
    KeywordRule('dresses', 34, ('dress', 'gown', 'maxi', 'mini dress', 'midi dress', 'cocktail dress',
                                'evening dress', 'wedding dress', 'ball gown')),
    KeywordRule('tops', 33, ('top', 'shirt', 'blouse', 'sweater', 'hoodie', 'jacket', 'coat',
                             'cardigan', 't-shirt', 'tshirt', 'tank top', 'crop top', 'turtleneck',
                             'vest', 'blazer', 'pullover')),
    KeywordRule('bottoms', 32, ('pants', 'jeans', 'shorts', 'skirt', 'leggings', 'trousers',
                                'sweatpants', 'joggers', 'capris', 'culottes', 'mini skirt',
                                'maxi skirt')),
    KeywordRule('shoes', 31, ('shoe', 'boots', 'sneakers', 'heels', 'sandals', 'slippers', 'loafers',
                              'flats', 'pumps', 'oxfords', 'platforms', 'wedges', 'mules', 'clogs',
                              'ankle boots', 'high heels', 'stilettos')),
    KeywordRule('jewelry', 30, ('jewelry', 'jewellery', 'necklace', 'earring', 'bracelet', 'ring',
                                'piercing', 'choker', 'pendant', 'anklet', 'brooch', 'cuff', 'stud',
                                'hoop')),
    KeywordRule('glasses', 29, ('glasses', 'sunglasses', 'eyewear', 'eyeglasses', 'spectacles',
                                'shades', 'aviators', 'frames')),
    KeywordRule('hats', 28, ('hat', 'cap', 'beanie', 'beret', 'headband', 'crown', 'tiara', 'headwear',
                             'headpiece', 'hood', 'turban', 'bandana', 'headscarf')),
    KeywordRule('accessories', 25, ('accessory', 'accessories', 'bag', 'purse', 'backpack', 'belt',
                                    'scarf', 'scarves', 'gloves', 'watch', 'socks', 'tights')),
    KeywordRule('skin', 23, ('skin', 'skinblend', 'skin blend', 'skin detail', 'overlay', 'freckles',
                             'moles', 'birthmark', 'wrinkles', 'pores', 'skin texture', 'body hair')),
    KeywordRule('eyes', 22, ('eyes', 'eye color', 'eye colour', 'contacts', 'contact lenses', 'iris',
                             'pupils', 'heterochromia'), ('eyebrow', 'eyelash', 'eyeliner')),
    KeywordRule('nails', 20, ('nail', 'manicure', 'nail polish', 'press-on', 'press on',
                              'acrylic nails', 'gel nails', 'nail art', 'fingernails')),
    # Mods and other
    KeywordRule('poses', 18, ('pose', 'pose pack', 'posepack', 'posing')),
    KeywordRule('gameplay-mod', 15, ('gameplay mod', 'gameplay', 'mod pack', 'social interaction',
                                     'interaction', 'trait mod', 'career mod', 'realistic',
                                     'slice of life', 'tradition', 'autonomy', 'woohoo', 'pregnancy',
                                     'custom event', 'romance mod')),
    KeywordRule('script-mod', 14, ('script mod', 'script', '.ts4script', 'mccc', 'mc command center',
                                   'wicked whims', 'basemental', 'utility mod', 'cheat', 'tweak')),
    KeywordRule('lot', 12, ('lot', 'house', 'home', 'apartment', 'mansion', 'cottage', 'residential',
                            'venue', 'community lot', 'starter', 'build', 'renovation')),
)

# A single description hit is trusted only for rules at or above this priority
DESCRIPTION_TRUST_PRIORITY = 80
# A title hit on a rule at or above this priority is high confidence
HIGH_CONFIDENCE_PRIORITY = 100

# ============================================================================
# ROOM THEMES
# ============================================================================

ROOM_THEME_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ('bathroom', ('bathroom', 'bath', 'shower', 'toilet', 'tub', 'bathtub', 'washroom', 'restroom',
                  'lavatory', 'powder room')),
    ('kitchen', ('kitchen', 'cooking', 'culinary', 'chef', 'pantry')),
    ('bedroom', ('bedroom', 'bed room', 'sleeping', 'master bedroom', 'guest bedroom')),
    ('living-room', ('living room', 'livingroom', 'living-room', 'lounge', 'family room',
                     'sitting room')),
    ('dining-room', ('dining room', 'diningroom', 'dining-room', 'dining area', 'eating area')),
    ('outdoor', ('outdoor', 'patio', 'garden', 'yard', 'backyard', 'front yard', 'balcony', 'terrace',
                 'deck', 'pool', 'exterior')),
    ('office', ('office', 'study', 'workspace', 'work space', 'home office', 'desk area')),
    ('kids-room', ('kids room', 'kid room', 'kids bedroom', 'kid bedroom', 'child room',
                   'child bedroom', 'childrens room', "children's room", 'playroom', 'play room')),
    ('nursery', ('nursery', 'baby room', 'infant room', 'newborn', 'toddler room')),
)

# Content types that describe objects placed in a room
ROOM_CONTENT_TYPES = frozenset({
    'furniture', 'decor', 'clutter', 'lighting', 'plants', 'rugs', 'curtains', 'wall-art',
})

# ============================================================================
# SECONDARY FACETS
# ============================================================================

# Checked in order; first hit wins
VISUAL_STYLE_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ('maxis-match', ('maxis match', 'maxis-match', 'mm')),
    ('alpha', ('alpha', 'realistic')),
    ('semi-maxis', ('semi-maxis', 'semi maxis')),
    ('clayified', ('clayified',)),
)

NSFW_KEYWORDS = ('nsfw', 'adult', 'mature', 'explicit', 'sexual', '18+', 'wicked whims')

COMMON_TAGS = (
    'sims4', 'sims3', 'build', 'buy', 'cas', 'gameplay', 'furniture', 'clothing', 'hair', 'makeup',
    'career', 'skill', 'trait', 'mod', 'cc', 'maxis-match', 'alpha',
)

# Legacy coarse category label, first hit wins
LEGACY_CATEGORY_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ('Hair', ('hair', 'hairstyle', 'ponytail', 'bun')),
    ('Poses', ('pose', 'animation', 'posing')),
    ('CAS - Makeup', ('makeup', 'blush', 'lipstick', 'eyeshadow', 'eyeliner')),
    ('CAS - Accessories', ('accessory', 'accessories', 'jewelry', 'necklace', 'earring')),
    ('CAS - Clothing', ('clothing', 'dress', 'outfit', 'shirt', 'pants', 'shoes', 'sweater', 'jacket',
                        'top')),
    ('Build/Buy - Clutter', ('clutter', 'decor object')),
    ('Build/Buy', ('build', 'furniture', 'chair', 'table', 'sofa', 'bed', 'kitchen', 'bathroom')),
    ('Gameplay', ('gameplay', 'career', 'skill', 'aspiration')),
    ('Scripts', ('script', 'trait', 'mod')),
    ('CAS', ('cas', 'create-a-sim')),
)
DEFAULT_LEGACY_CATEGORY = 'Other'

# ============================================================================
# SOURCE PLATFORMS
# ============================================================================

# (platform name, host fragment) in lookup order
PLATFORM_HOSTS: Tuple[Tuple[str, str], ...] = (
    ('TheSimsResource', 'thesimsresource.com'),
    ('Patreon', 'patreon.com'),
    ('Tumblr', 'tumblr.com'),
    ('ModCollective', 'modcollective.gg'),
    ('CurseForge', 'curseforge.com'),
    ('SimsDom', 'simsdom.com'),
    ('ModTheSims', 'modthesims.info'),
    ('Sims4Studio', 'sims4studio.com'),
)
OTHER_PLATFORM = 'Other'

SOURCE_ID_PATTERNS: Dict[str, str] = {
    'TheSimsResource': r'/id/(\d+)',
    'Patreon': r'/posts/([^/?#]+)',
    'ModCollective': r'/(?:collection|mod|item)/(\d+)',
    'CurseForge': r'/mods/([^/?#]+)',
    'Tumblr': r'/post/(\d+)',
    'ModTheSims': r'/d/(\d+)',
}
SOURCE_ID_MAX_LENGTH = 100
