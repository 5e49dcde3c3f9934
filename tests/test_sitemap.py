import requests

from conftest import FakeResponse, xml
from mod_dredger.sitemap import SitemapWalker, is_content_sitemap, parse_sitemap

ORIGIN = "https://wewantmods.com"

INDEX = """<?xml version="1.0" encoding="UTF-8"?>
<sitemapindex xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
  <sitemap><loc>https://wewantmods.com/post-sitemap.xml</loc></sitemap>
  <sitemap><loc>https://wewantmods.com/post-sitemap2.xml</loc></sitemap>
  <sitemap><loc>https://wewantmods.com/page-sitemap.xml</loc></sitemap>
  <sitemap><loc>https://wewantmods.com/category-sitemap.xml</loc></sitemap>
</sitemapindex>"""

POSTS_1 = """<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
  <url><loc>https://wewantmods.com/sims4/hair/ponytail-cc/</loc><lastmod>2024-01-03</lastmod></url>
  <url><loc>https://wewantmods.com/sims4/furniture/bathroom/bathroom-cc/</loc></url>
  <url><loc>https://wewantmods.com/category/hair/</loc></url>
  <url><loc>https://wewantmods.com/</loc></url>
</urlset>"""

POSTS_2 = """<?xml version="1.0" encoding="UTF-8"?>
<sm:urlset xmlns:sm="http://www.sitemaps.org/schemas/sitemap/0.9">
  <sm:url><sm:loc>https://wewantmods.com/sims4/hair/ponytail-cc/</sm:loc></sm:url>
  <sm:url><sm:loc>https://wewantmods.com/sims4/poses/couple-poses/</sm:loc></sm:url>
  <sm:url><sm:loc>https://wewantmods.com/tag/maxis-match/</sm:loc></sm:url>
  <sm:url><sm:loc>https://wewantmods.com/author/admin/</sm:loc></sm:url>
</sm:urlset>"""


def _routes(**overrides):
    routes = {
        f"{ORIGIN}/robots.txt": FakeResponse(404),
        f"{ORIGIN}/sitemap.xml": xml(INDEX),
        f"{ORIGIN}/post-sitemap.xml": xml(POSTS_1),
        f"{ORIGIN}/post-sitemap2.xml": xml(POSTS_2),
    }
    routes.update(overrides)
    return routes


def test_parse_plain_and_namespaced_documents():
    subs, entries = parse_sitemap(INDEX.encode())
    assert len(subs) == 4
    assert entries == []

    _, plain = parse_sitemap(POSTS_1.encode())
    assert plain[0].url == "https://wewantmods.com/sims4/hair/ponytail-cc/"
    assert plain[0].lastmod == "2024-01-03"
    assert plain[1].lastmod is None

    _, prefixed = parse_sitemap(POSTS_2.encode())
    assert [e.url for e in prefixed][:2] == [
        "https://wewantmods.com/sims4/hair/ponytail-cc/",
        "https://wewantmods.com/sims4/poses/couple-poses/",
    ]


def test_content_sitemap_markers():
    assert is_content_sitemap("https://wewantmods.com/post-sitemap3.xml")
    assert is_content_sitemap("https://wewantmods.com/wp-sitemap-posts-post-1.xml")
    assert not is_content_sitemap("https://wewantmods.com/page-sitemap.xml")


def test_walk_index_keeps_collection_pages_in_order(governor, http):
    http.routes.update(_routes())
    pages = SitemapWalker(governor, origin=ORIGIN).walk()

    assert [p.url for p in pages] == [
        "https://wewantmods.com/sims4/hair/ponytail-cc/",
        "https://wewantmods.com/sims4/furniture/bathroom/bathroom-cc/",
        "https://wewantmods.com/sims4/poses/couple-poses/",
    ]
    assert f"{ORIGIN}/page-sitemap.xml" not in http.urls()


def test_robots_sitemap_line_is_preferred(governor, http):
    robots = FakeResponse(200, "User-agent: *\nDisallow: /wp-admin/\nSitemap: https://wewantmods.com/sitemap_index.xml\n")
    http.routes.update(_routes(**{
        f"{ORIGIN}/robots.txt": robots,
        f"{ORIGIN}/sitemap_index.xml": xml(POSTS_1),
    }))
    pages = SitemapWalker(governor, origin=ORIGIN).walk()
    assert len(pages) == 2
    assert f"{ORIGIN}/sitemap.xml" not in http.urls()


def test_failed_sub_sitemap_is_skipped_and_counted(governor, http):
    http.routes.update(_routes(**{f"{ORIGIN}/post-sitemap.xml": requests.Timeout("timed out")}))
    walker = SitemapWalker(governor, origin=ORIGIN)
    pages = walker.walk()
    assert [p.url for p in pages] == [
        "https://wewantmods.com/sims4/hair/ponytail-cc/",
        "https://wewantmods.com/sims4/poses/couple-poses/",
    ]
    assert walker.errors == 1


def test_blocked_sub_sitemap_is_not_an_error(governor, http):
    http.routes.update(_routes(**{f"{ORIGIN}/post-sitemap2.xml": FakeResponse(403)}))
    walker = SitemapWalker(governor, origin=ORIGIN)
    assert len(walker.walk()) == 2
    assert walker.errors == 0


def test_unreachable_root_yields_nothing(governor, http):
    http.routes.update(_routes(**{f"{ORIGIN}/sitemap.xml": FakeResponse(500)}))
    walker = SitemapWalker(governor, origin=ORIGIN)
    assert walker.walk() == []
    assert walker.errors == 1


def test_malformed_loc_is_not_a_collection_page(governor):
    walker = SitemapWalker(governor, origin=ORIGIN)
    assert not walker.is_collection_url("http://[broken/sims4/hair/")
    assert walker.is_collection_url("https://wewantmods.com/sims4/hair/ponytail-cc/")
