from mod_dredger.classifier import (
    Classifier, categorize, detect_content_type, detect_nsfw, detect_room_themes, detect_visual_style,
    extract_category_from_url, extract_tags, has_keyword, score_content_type,
)
from mod_dredger.taxonomy import URL_CATEGORY_MAP

HOST = "wewantmods.com"


def test_extract_category_from_url_shapes():
    assert extract_category_from_url("https://wewantmods.com/sims4/hair/ponytail-cc/", HOST) == "hair"
    assert extract_category_from_url("https://wewantmods.com/sims4/furniture/bathroom/bathroom-cc/", HOST) == "bathroom"
    assert extract_category_from_url("https://www.wewantmods.com/sims4/Hair/", HOST) == "hair"
    assert extract_category_from_url("https://wewantmods.com/blog/hair/post/", HOST) is None
    assert extract_category_from_url("https://wewantmods.com/sims4/", HOST) is None
    assert extract_category_from_url("https://www.patreon.com/sims4/hair/x/", HOST) is None
    assert extract_category_from_url("", HOST) is None
    assert extract_category_from_url(None, HOST) is None


def test_url_map_covers_aliases_and_rooms():
    assert URL_CATEGORY_MAP["hairstyles"].content_type == "hair"
    assert URL_CATEGORY_MAP["kitchen"].content_type == "furniture"
    assert URL_CATEGORY_MAP["kitchen"].theme == "kitchen"
    assert URL_CATEGORY_MAP["garden"].content_type == "decor"
    assert URL_CATEGORY_MAP["garden"].theme == "outdoor"
    assert URL_CATEGORY_MAP["hair"].theme is None


def test_keyword_matching_is_whole_word():
    assert has_keyword("thick brows pack", "brow")
    assert not has_keyword("brown leather sofa", "brow")
    assert has_keyword("two tables", "table")
    assert not has_keyword("comfortable", "table")


def test_detect_content_type_by_title():
    assert detect_content_type("Ponytail Braid") == "hair"
    assert detect_content_type("Soft Eyebrows N12") == "eyebrows"
    assert detect_content_type("Modern Bathtub Set") == "furniture"
    assert detect_content_type("3D Eyelash Set") == "lashes"


def test_negative_keywords_veto_a_rule():
    assert detect_content_type("Body Hair Overlay") == "skin"
    assert detect_content_type("Outfit with Sneakers") == "shoes"


def test_description_needs_confidence():
    # a single low-priority description hit is ignored
    assert detect_content_type("Nova Set", "comes with a matching chair") is None
    # two hits from the same rule are enough
    assert detect_content_type("Nova Set", "a chair and a table for the den") == "furniture"
    # a single hit on a high-priority rule is trusted
    assert detect_content_type("Nova Set", "soft natural lipstick shades") == "lipstick"


def test_confidence_levels():
    # two title keywords
    assert score_content_type("Ponytail Braid") == ("hair", "high")
    # one title keyword on a top-priority rule
    assert score_content_type("Soft Eyebrows N12") == ("eyebrows", "high")
    # one title keyword on an ordinary rule
    assert score_content_type("Cozy Sofa") == ("furniture", "medium")
    assert score_content_type("Nova Set", "a chair and a table for the den") == ("furniture", "medium")
    assert score_content_type("Nova Set", "comes with a matching chair") is None


def test_secondary_detectors():
    assert detect_room_themes("Modern Bathroom Sink") == ["bathroom"]
    assert detect_room_themes("Patio Kitchen Set") == ["kitchen", "outdoor"]
    assert detect_visual_style("Ponytail MM") == "maxis-match"
    assert detect_visual_style("Realistic Skin") == "alpha"
    assert detect_visual_style("Ponytail Braid") is None
    assert detect_nsfw("Wicked Whims Animations")
    assert not detect_nsfw("Cozy Sweater")
    assert extract_tags("Maxis-Match Hair CC for CAS") == ["cas", "hair", "cc", "maxis-match"]
    assert categorize("Ponytail Braid") == "Hair"
    assert categorize("Couple Poses") == "Poses"
    assert categorize("Mystery Item") == "Other"


def test_bathroom_collection_hint_wins():
    classifier = Classifier(discovery_host=HOST)
    result = classifier.classify(
        "Porcelain Sink",
        source_url="https://www.thesimsresource.com/downloads/id/1/",
        discovery_page_url="https://wewantmods.com/sims4/furniture/bathroom/bathroom-cc/",
    )
    assert result.content_type == "furniture"
    assert result.themes == ["bathroom"]


def test_url_hint_overrides_keywords():
    classifier = Classifier(discovery_host=HOST)
    result = classifier.classify(
        "Ponytail Braid Necklace",
        discovery_page_url="https://wewantmods.com/sims4/jewelry/hair-jewelry/",
    )
    assert result.content_type == "jewelry"
    assert result.themes == []


def test_room_themes_merge_for_room_content():
    classifier = Classifier(discovery_host=HOST)
    result = classifier.classify(
        "Bathroom Towel Rack Clutter",
        discovery_page_url="https://wewantmods.com/sims4/kitchen/kitchen-clutter/",
    )
    assert result.content_type == "furniture"
    assert result.themes == ["kitchen", "bathroom"]


def test_unknown_segment_is_recorded_once():
    classifier = Classifier(discovery_host=HOST)
    page = "https://wewantmods.com/sims4/sims4-cas-stuff/hair-cc/"
    first = classifier.classify("Ponytail Braid", discovery_page_url=page)
    second = classifier.classify("Ponytail Braid", discovery_page_url=page)
    assert first.content_type == "hair"
    assert first == second
    assert classifier.unmapped == {"sims4-cas-stuff"}


def test_nothing_matches():
    result = Classifier(discovery_host=HOST).classify("Nova")
    assert result.content_type is None
    assert result.themes == []
