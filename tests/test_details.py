from mod_dredger.classifier import Classifier
from mod_dredger.details import (
    assemble_detail, clean_title, generate_description, is_breadcrumb_description, language_mismatch,
)
from mod_dredger.models import DetailOutcome, DetailStatus, DiscoveredItem, PlatformDetail

REHOSTED = [
    "https://store1.public.blob.vercel-storage.com/mods/ponytail-braid-1-0.jpg",
    "https://store1.public.blob.vercel-storage.com/mods/ponytail-braid-1-1.png",
]


def _item(url="https://www.patreon.com/posts/ponytail-braid-98765"):
    return DiscoveredItem(
        title="Ponytail Braid",
        author="JaneCreates",
        external_url=url,
        discovery_source_url="https://wewantmods.com/sims4/hair/ponytail-cc/",
        image_urls=["https://cdn.wewantmods.com/img/ponytail.jpg"],
    )


def test_breadcrumb_descriptions_are_rejected():
    assert is_breadcrumb_description("The Sims Resource - Sims 4 - Hair - Ponytail")
    assert is_breadcrumb_description("Download from Patreon now")
    assert is_breadcrumb_description("Ponytail Braid")
    assert is_breadcrumb_description("")
    assert is_breadcrumb_description(None)
    assert is_breadcrumb_description("Home - Sims - CC - Hair - Female")
    assert not is_breadcrumb_description(
        "A long braided ponytail in 24 colours, compatible with hats and all ages."
    )


def test_language_filter():
    english = "A long braided ponytail in many colours that works with every hat in the game."
    assert not language_mismatch(english, "")
    assert not language_mismatch("Zu kurz", "en")
    assert not language_mismatch(english, "en")


def test_clean_title():
    assert clean_title("Download Ponytail Braid CC") == "Ponytail Braid"
    assert clean_title("Free Cozy Sofa") == "Cozy Sofa"


def test_generated_hair_description():
    short, long = generate_description("Long Ponytail Braid", "JaneCreates", "hair", "maxis-match")
    assert short == "A beautiful ponytail, braided, long hairstyle for your Sims by JaneCreates."
    assert "Maxis Match" in long
    assert "JaneCreates" in long


def test_generated_description_falls_back_on_category():
    short, _ = generate_description("Couple Poses", "Maker", None, None)
    assert short == "Custom poses for your Sims by Maker."
    short, _ = generate_description("Mystery", "Maker", None, None)
    assert short == "Custom content for The Sims 4 by Maker."


def test_generated_description_limits():
    short, long = generate_description("Hair " * 100, "A" * 300, "hair")
    assert len(short) <= 200
    assert len(long) <= 1000


def test_scraped_prose_is_kept():
    description = "A long braided ponytail in 24 colours. Compatible with hats and all ages, " * 3
    outcome = DetailOutcome(DetailStatus.SUCCESS, detail=PlatformDetail(description=description, is_free=False))
    detail = assemble_detail(_item(), outcome, REHOSTED, Classifier(discovery_host="wewantmods.com"), "")

    assert detail.description == description
    assert detail.short_description == description[:150]
    assert detail.is_free is False
    assert detail.content_type == "hair"
    assert detail.source == "Patreon"
    assert detail.source_id == "ponytail-braid-98765"
    assert detail.download_url == detail.source_url == _item().external_url
    assert detail.game_version == "Sims 4"


def test_blocked_outcome_uses_discovery_data():
    outcome = DetailOutcome(DetailStatus.BLOCKED, reason="HTTP 403")
    detail = assemble_detail(_item(), outcome, REHOSTED, Classifier(discovery_host="wewantmods.com"), "")

    assert detail.description.startswith("A beautiful ponytail, braided hairstyle created by JaneCreates.")
    assert "Patreon" not in detail.description
    assert detail.is_free is False
    assert detail.thumbnail == REHOSTED[0]
    assert detail.images == REHOSTED
    assert detail.category == "Hair"


def test_breadcrumb_scrape_is_replaced():
    outcome = DetailOutcome(
        DetailStatus.SUCCESS,
        detail=PlatformDetail(description="The Sims Resource - Sims 4 - Hair - Ponytail Braid",
                              thumbnail="https://static.thesimsresource.com/big.jpg",
                              images=["https://static.thesimsresource.com/1.jpg"]),
    )
    tsr = "https://www.thesimsresource.com/downloads/details/id/1654321/"
    detail = assemble_detail(_item(tsr), outcome, REHOSTED, Classifier(discovery_host="wewantmods.com"), "")

    assert "The Sims Resource" not in detail.description
    assert detail.is_free is True
    # only first-party images are ever carried
    assert detail.thumbnail == REHOSTED[0]
    assert all("thesimsresource" not in url for url in detail.images)
