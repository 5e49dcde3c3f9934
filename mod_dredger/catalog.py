"""
Catalog persistence: REST client for the catalog API and the dedup/upsert gateway.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Set, Tuple

import requests

from . import config
from .blob import is_first_party
from .models import ScrapedDetail, UpsertAction, UpsertResult, fields_for_catalog

logger = logging.getLogger("dredger.catalog")

FACET_TYPES = ('contentType', 'visualStyle', 'themes')
# Fields never overwritten with an empty incoming value
PRESERVED_WHEN_EMPTY = ('description', 'shortDescription', 'author')
# Dedup keys belong to the record's first sighting and are never rewritten
IDENTITY_FIELDS = ('sourceUrl', 'source', 'sourceId', 'downloadUrl')


class CatalogError(Exception):
    pass


class DuplicateRecordError(CatalogError):
    pass

# ============================================================================
# CATALOG CLIENT
# ============================================================================

class CatalogClient:
    def __init__(self, base_url: str = config.CATALOG_URL, token: str = config.CATALOG_API_TOKEN,
                 http: Optional[requests.Session] = None, timeout: float = config.CATALOG_TIMEOUT):
        self.base_url = base_url.rstrip('/')
        self.http = http or requests.Session()
        self.timeout = timeout
        self.headers = {"Authorization": f"Bearer {token}"}

    def _request(self, method: str, path: str, **kwargs):
        try:
            r = self.http.request(method, f"{self.base_url}{path}", headers=self.headers,
                                  timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise CatalogError(f"{method} {path} failed: {e}") from e
        if r.status_code == 409:
            raise DuplicateRecordError(f"{method} {path}: duplicate")
        return r

    @staticmethod
    def _json(r, method: str, path: str, expected=(200, 201)) -> dict:
        if r.status_code not in expected:
            raise CatalogError(f"{method} {path}: HTTP {r.status_code}")
        try:
            return r.json()
        except ValueError as e:
            raise CatalogError(f"{method} {path}: unreadable response") from e

    def ping(self) -> int:
        return self._request('GET', '/api/mods', params={'limit': 1}).status_code

    def find_existing(self, criteria: Dict[str, str]) -> Optional[dict]:
        r = self._request('GET', '/api/mods', params={**criteria, 'limit': 1})
        if r.status_code == 404:
            return None
        items = self._json(r, 'GET', '/api/mods', expected=(200,)).get('items', [])
        return items[0] if items else None

    def create(self, fields: dict) -> dict:
        r = self._request('POST', '/api/mods', json=fields)
        return self._json(r, 'POST', '/api/mods')

    def update(self, record_id: str, fields: dict) -> dict:
        path = f"/api/mods/{record_id}"
        r = self._request('PATCH', path, json=fields)
        return self._json(r, 'PATCH', path)

    def ensure_taxonomy_value(self, facet_type: str, value: str, display_name: str,
                              sort_order: int = config.FACET_SORT_ORDER) -> bool:
        """True when the value was created, False when it already existed."""
        payload = {
            'facetType': facet_type,
            'value': value,
            'displayName': display_name,
            'sortOrder': sort_order,
            'isActive': True,
        }
        try:
            r = self._request('POST', '/api/facets', json=payload)
        except DuplicateRecordError:
            return False
        self._json(r, 'POST', '/api/facets')
        return True

# ============================================================================
# UPSERT GATEWAY
# ============================================================================

def display_name(value: str) -> str:
    return ' '.join(part.capitalize() for part in value.split('-'))


class UpsertGateway:
    def __init__(self, catalog, public_host: str = config.BLOB_PUBLIC_HOST,
                 clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self.catalog = catalog
        self.public_host = public_host
        self._clock = clock
        self._ensured: Set[Tuple[str, str]] = set()

    @staticmethod
    def facet_values(detail: ScrapedDetail) -> List[Tuple[str, str]]:
        values = []
        if detail.content_type:
            values.append(('contentType', detail.content_type))
        if detail.visual_style:
            values.append(('visualStyle', detail.visual_style))
        values.extend(('themes', theme) for theme in detail.themes)
        return values

    def ensure_taxonomies(self, detail: ScrapedDetail):
        for facet_type, value in self.facet_values(detail):
            if (facet_type, value) in self._ensured:
                continue
            if self.catalog.ensure_taxonomy_value(facet_type, value, display_name(value), config.FACET_SORT_ORDER):
                logger.info(f"   🏷️  New {facet_type} facet: {value}")
            self._ensured.add((facet_type, value))

    def find_duplicate(self, detail: ScrapedDetail) -> Optional[dict]:
        lookups = [{'sourceUrl': detail.source_url}]
        if detail.source_id:
            lookups.append({'source': detail.source, 'sourceId': detail.source_id})
        if detail.download_url != detail.source_url:
            lookups.append({'downloadUrl': detail.download_url})
        lookups.append({
            'title': detail.title.strip().lower(),
            'author': detail.author.strip().lower(),
            'match': 'insensitive',
        })
        for criteria in lookups:
            existing = self.catalog.find_existing(criteria)
            if existing:
                return existing
        return None

    def third_party_images(self, detail: ScrapedDetail) -> List[str]:
        urls = list(detail.images) + ([detail.thumbnail] if detail.thumbnail else [])
        return [u for u in urls if not is_first_party(u, self.public_host)]

    def upsert(self, detail: ScrapedDetail) -> UpsertResult:
        """Creates or refreshes one catalog record. CatalogError propagates to the caller."""
        offending = self.third_party_images(detail)
        if offending:
            logger.error(f"   ❌ Refusing to persist '{detail.title}': {len(offending)} image(s) not rehosted")
            return UpsertResult(UpsertAction.SKIPPED, reason="third-party image")

        self.ensure_taxonomies(detail)
        fields = fields_for_catalog(detail)
        fields['lastScraped'] = self._clock().isoformat()

        try:
            existing = self.find_duplicate(detail)
            if existing:
                for key in PRESERVED_WHEN_EMPTY:
                    if not fields.get(key):
                        fields.pop(key, None)
                for key in IDENTITY_FIELDS:
                    fields.pop(key, None)
                record_id = str(existing.get('id'))
                self.catalog.update(record_id, fields)
                return UpsertResult(UpsertAction.UPDATED, record_id=record_id)

            fields['isVerified'] = bool(detail.images)
            created = self.catalog.create(fields)
            return UpsertResult(UpsertAction.CREATED, record_id=str(created.get('id')) if created else None)
        except DuplicateRecordError:
            logger.info(f"   ⚠️  Duplicate on create, skipping: {detail.title}")
            return UpsertResult(UpsertAction.SKIPPED, reason="duplicate")
