"""
Mod Dredger - discovery and ingestion pipeline for Sims 4 custom content.
Walks the discovery site's sitemap, parses collection pages, rehosts images,
classifies each mod and upserts it into the catalog.
Usage: mod-dredger [--dry-run] [--limit 10] [--force] [--privacy stealth] [--version]
"""

import argparse
import logging
import signal
import sys
from datetime import datetime
from typing import Callable, Optional
from urllib.parse import urlparse

import requests
from tqdm import tqdm

from . import VERSION, config
from .adapters import Adapter, adapter_for
from .blob import BlobStore
from .catalog import CatalogClient, CatalogError, UpsertGateway
from .classifier import Classifier
from .collection import CollectionPageParser
from .details import assemble_detail
from .images import ImageIngestor
from .models import (
    DetailStatus, DiscoveredItem, ItemOutcome, PageStatus, RunStats, UpsertAction,
)
from .session import PROFILES, RateGovernor, get_profile
from .sitemap import SitemapWalker
from .storage import StorageManager

logger = logging.getLogger("dredger")

UPSERT_OUTCOMES = {
    UpsertAction.CREATED: ItemOutcome.CREATED,
    UpsertAction.UPDATED: ItemOutcome.UPDATED,
    UpsertAction.SKIPPED: ItemOutcome.SKIPPED,
}


def setup_logging(level: str = config.LOG_LEVEL):
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=[logging.StreamHandler(sys.stdout)]
    )

# ============================================================================
# GRACEFUL KILLER
# ============================================================================

class GracefulKiller:
    """Catches stop signals so the run ends between items with a summary."""
    def __init__(self, install: bool = True):
        self.kill_now = False
        if install:
            signal.signal(signal.SIGINT, self.exit_gracefully)
            signal.signal(signal.SIGTERM, self.exit_gracefully)

    def exit_gracefully(self, signum, frame):
        signal_name = 'SIGINT (Ctrl+C)' if signum == signal.SIGINT else 'SIGTERM'
        logger.info(f"🛑 Received {signal_name}. Finishing the current item...")
        self.kill_now = True

# ============================================================================
# RUN ORCHESTRATOR
# ============================================================================

class Dredger:
    def __init__(self, governor: RateGovernor, walker: SitemapWalker, parser, ingestor: ImageIngestor,
                 classifier: Classifier, gateway: UpsertGateway, storage: StorageManager,
                 killer: Optional[GracefulKiller] = None, dry_run: bool = False, force: bool = False,
                 show_progress: bool = config.SHOW_PROGRESS, language: str = config.LANGUAGE_FILTER,
                 adapter_lookup: Callable[[str], Adapter] = adapter_for):
        self.governor = governor
        self.walker = walker
        self.parser = parser
        self.ingestor = ingestor
        self.classifier = classifier
        self.gateway = gateway
        self.storage = storage
        self.killer = killer or GracefulKiller(install=False)
        self.dry_run = dry_run
        self.force = force
        self.show_progress = show_progress
        self.language = language
        self.adapter_lookup = adapter_lookup
        self.stats = RunStats()
        self.status = 'idle'

    @property
    def cancelled(self) -> bool:
        return self.killer.kill_now

    def run(self, limit: Optional[int] = None) -> RunStats:
        self.stats = RunStats()
        self.status = 'completed'
        started_at = datetime.now()
        logger.info(f"🧺 Mod Dredger Started ({VERSION})")
        logger.info(f"   Mode: {'DRY RUN' if self.dry_run else 'LIVE IMPORT'}")
        logger.info(f"   Privacy: {self.governor.profile.name} "
                    f"({self.governor.profile.min_delay_ms}-{self.governor.profile.max_delay_ms} ms)")

        try:
            pages = self.walker.walk()
            self.stats.errors += self.walker.errors
            if not pages:
                logger.info("📭 No collection pages found - nothing to do")
                self.status = 'no-work'
                return self.stats

            if limit is not None:
                pages = pages[:limit]
            logger.info(f"   Processing {len(pages)} collection pages")

            iterator = tqdm(pages, desc="Collection pages", unit="page", disable=not self.show_progress)
            for index, entry in enumerate(iterator, 1):
                if self.cancelled:
                    break
                self.process_page(entry.url)
                if index % config.PROGRESS_LOG_EVERY == 0:
                    logger.info(f"   📈 Progress: {index}/{len(pages)} pages, "
                                f"{self.stats.created} created, {self.stats.updated} updated")

            if self.cancelled:
                self.status = 'interrupted'
        except Exception:
            self.status = 'failed'
            raise
        finally:
            self.governor.close()
            self.finish(started_at)

        return self.stats

    def process_page(self, url: str):
        if not self.force and self.storage.is_fresh(url):
            logger.debug(f"   Fresh, skipping: {url}")
            return

        logger.info(f"📄 Collection page: {url}")
        try:
            result = self.parser.parse(url)
        except Exception as e:
            logger.error(f"   ❌ Could not parse {url}: {e!r}")
            self.stats.errors += 1
            return
        if result.status is PageStatus.BLOCKED:
            self.stats.blocked += 1
            return
        if result.status is PageStatus.FAILED:
            self.stats.errors += 1
            return

        self.stats.pages_scraped += 1
        self.stats.items_discovered += len(result.items)
        logger.info(f"   Found {len(result.items)} mods")

        failed = 0
        for item in result.items:
            if self.cancelled:
                return
            try:
                outcome = self.process_item(item)
            except Exception as e:
                logger.error(f"      ❌ Unexpected error on '{item.title}': {e!r}")
                outcome = ItemOutcome.FAILED
            if outcome is ItemOutcome.FAILED:
                failed += 1
            self.record(outcome)

        # pages with failed items stay due so the next run retries them
        if failed:
            logger.info(f"   {failed} mods failed - page left unvisited for retry")
        elif not self.dry_run:
            self.storage.mark_visited(url)

    def process_item(self, item: DiscoveredItem) -> ItemOutcome:
        if self.dry_run:
            logger.info(f"   [DRY RUN] {item.title} by {item.author} -> {item.external_url}")
            return ItemOutcome.DISCOVERED

        logger.info(f"   🔎 {item.title} by {item.author}")
        if not item.image_urls:
            logger.info("      No images on the collection page, skipping")
            return ItemOutcome.NO_IMAGE

        rehosted = self.ingestor.ingest(item.image_urls, item.title)
        self.stats.images_uploaded += len(rehosted)
        if not rehosted:
            logger.info("      No image could be rehosted, skipping")
            return ItemOutcome.NO_IMAGE

        adapter = self.adapter_lookup(item.external_url)
        outcome = adapter.scrape(item, self.governor)
        if outcome.status is DetailStatus.BLOCKED:
            self.stats.blocked += 1
            logger.info(f"      {adapter.name} blocked ({outcome.reason}) - using discovery data")
        elif outcome.status is DetailStatus.FAILED:
            self.stats.errors += 1
            logger.warning(f"      {adapter.name} unreachable ({outcome.reason}) - using discovery data")
        elif outcome.status is DetailStatus.UNAVAILABLE:
            logger.info(f"      {adapter.name} page unavailable ({outcome.reason}) - using discovery data")

        detail = assemble_detail(item, outcome, rehosted, self.classifier, self.language)
        try:
            result = self.gateway.upsert(detail)
        except CatalogError as e:
            logger.error(f"      ❌ Catalog write failed for '{item.title}': {e}")
            return ItemOutcome.FAILED

        logger.info(f"      ✅ {result.action.value} ({detail.content_type or 'unclassified'})")
        return UPSERT_OUTCOMES[result.action]

    def record(self, outcome: ItemOutcome):
        if outcome is ItemOutcome.CREATED:
            self.stats.created += 1
        elif outcome is ItemOutcome.UPDATED:
            self.stats.updated += 1
        elif outcome in (ItemOutcome.SKIPPED, ItemOutcome.NO_IMAGE):
            self.stats.skipped += 1
        elif outcome is ItemOutcome.FAILED:
            self.stats.errors += 1

    def finish(self, started_at: datetime):
        if self.status == 'interrupted':
            logger.info("⏸️  Gracefully stopped by signal")
        print_summary(self.stats, self.status, self.classifier.unmapped)
        if not self.dry_run:
            self.storage.add_unmapped(self.classifier.unmapped)
            self.storage.record_run(self.stats.to_dict(), started_at, self.status)
            self.storage.flush_all()

# ============================================================================
# REPORTING
# ============================================================================

def print_summary(stats: RunStats, status: str = 'completed', unmapped=()):
    logger.info("=" * 50)
    logger.info(f"📊 Run Summary ({status}):")
    logger.info(f"   Pages scraped:    {stats.pages_scraped}")
    logger.info(f"   Mods discovered:  {stats.items_discovered}")
    logger.info(f"   Created:          {stats.created}")
    logger.info(f"   Updated:          {stats.updated}")
    logger.info(f"   Skipped:          {stats.skipped}")
    logger.info(f"   Images uploaded:  {stats.images_uploaded}")
    logger.info(f"   Blocked:          {stats.blocked}")
    logger.info(f"   Errors:           {stats.errors}")
    if unmapped:
        logger.info(f"   Unmapped URL categories: {', '.join(sorted(unmapped))}")
    logger.info("=" * 50)


def send_notification(stats: RunStats, status: str, webhook_url: str = config.NOTIFICATION_WEBHOOK_URL):
    """Send a summary notification via webhook (Discord, Slack, ntfy, etc.)."""
    if not webhook_url:
        return

    summary = (
        f"🧺 Mod Dredger {status} ({VERSION})\n"
        f"   Created: {stats.created}, Updated: {stats.updated}, Skipped: {stats.skipped}\n"
        f"   Images: {stats.images_uploaded}, Blocked: {stats.blocked}, Errors: {stats.errors}"
    )

    try:
        requests.post(webhook_url, json={"content": summary, "text": summary}, timeout=config.SHORT_TIMEOUT)
        logger.info("📨 Notification sent")
    except requests.RequestException as e:
        logger.warning(f"Failed to send notification: {e}")

# ============================================================================
# CLI & MAIN
# ============================================================================

def validate_config(dry_run: bool):
    """Check for common misconfigurations. Live runs cannot proceed without storage credentials."""
    if dry_run:
        return
    if config.CATALOG_API_TOKEN == 'your-token':
        logger.warning("⚠️  Warning: CATALOG_API_TOKEN not configured (still set to default)")
    if not config.BLOB_READ_WRITE_TOKEN:
        logger.critical("❌ BLOB_READ_WRITE_TOKEN is required to rehost images.")
        sys.exit(1)


def check_connectivity(catalog: CatalogClient):
    """Verify catalog connectivity before starting the crawl. Exit early on failure."""
    try:
        code = catalog.ping()
    except CatalogError as e:
        logger.critical(f"❌ Cannot reach the catalog at {catalog.base_url}: {e}")
        sys.exit(1)
    if code == 200:
        logger.info(f"   ✅ Catalog connectivity OK ({catalog.base_url})")
    elif code in (401, 403):
        logger.critical(f"❌ Catalog token rejected (HTTP {code}). Check CATALOG_API_TOKEN.")
        sys.exit(1)
    else:
        logger.warning(f"⚠️  Catalog returned HTTP {code} - proceeding anyway")


def build_dredger(site: str, privacy: Optional[str], dry_run: bool, force: bool,
                  killer: Optional[GracefulKiller] = None) -> Dredger:
    site = site.rstrip('/')
    discovery_host = urlparse(site).netloc.lower()
    if discovery_host.startswith('www.'):
        discovery_host = discovery_host[4:]

    governor = RateGovernor(get_profile(privacy))
    catalog = CatalogClient()
    if not dry_run:
        check_connectivity(catalog)

    return Dredger(
        governor=governor,
        walker=SitemapWalker(governor, origin=site),
        parser=CollectionPageParser(governor, discovery_host=discovery_host),
        ingestor=ImageIngestor(BlobStore(), governor),
        classifier=Classifier(discovery_host=discovery_host),
        gateway=UpsertGateway(catalog),
        storage=StorageManager(),
        killer=killer,
        dry_run=dry_run,
        force=force,
    )


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def main(argv=None):
    parser = argparse.ArgumentParser(description="Mod Dredger: discovery and ingestion pipeline")
    parser.add_argument("--dry-run", action="store_true", help="Discover and list mods without writing anything")
    parser.add_argument("--limit", type=positive_int, default=None, help="Maximum collection pages to process")
    parser.add_argument("--force", action="store_true", help="Re-scrape pages visited recently")
    parser.add_argument("--privacy", choices=sorted(PROFILES), default=None, help="Privacy profile (default: PRIVACY_LEVEL)")
    parser.add_argument("--site", type=str, default=config.DISCOVERY_SITE, help="Discovery site origin")
    parser.add_argument("--version", action="version", version=f"Mod Dredger {VERSION}")
    args = parser.parse_args(argv)

    setup_logging()
    dry_run = args.dry_run or config.DRY_RUN
    validate_config(dry_run)

    killer = GracefulKiller()
    dredger = build_dredger(args.site, args.privacy, dry_run, args.force, killer=killer)
    stats = dredger.run(limit=args.limit)

    send_notification(stats, dredger.status)
    logger.info("🏁 Dredge Cycle Complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
