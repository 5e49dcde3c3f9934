import json
import random

import pytest
from requests.structures import CaseInsensitiveDict

from mod_dredger.session import PROFILES, RateGovernor


class FakeResponse:
    def __init__(self, status_code=200, body=b"", headers=None, payload=None):
        self.status_code = status_code
        self.headers = CaseInsensitiveDict(headers or {})
        if payload is not None:
            body = json.dumps(payload).encode()
            self.headers.setdefault("Content-Type", "application/json")
        self.content = body.encode() if isinstance(body, str) else body
        self._payload = payload

    @property
    def text(self):
        return self.content.decode("utf-8", errors="replace")

    def json(self):
        if self._payload is None:
            return json.loads(self.text)
        return self._payload


def html(body, status_code=200):
    return FakeResponse(status_code, body, {"Content-Type": "text/html; charset=utf-8"})


def xml(body, status_code=200):
    return FakeResponse(status_code, body, {"Content-Type": "application/xml"})


def image(data=b"\x89PNG....", content_type="image/png", status_code=200):
    return FakeResponse(status_code, data, {"Content-Type": content_type})


class FakeHTTP:
    """URL -> response table; an Exception value is raised instead of returned."""

    def __init__(self, routes=None, default=None):
        self.routes = dict(routes or {})
        self.default = default or FakeResponse(404)
        self.calls = []
        self.headers = {}
        self.closed = False

    def _respond(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        response = self.routes.get(url, self.default)
        if callable(response) and not isinstance(response, FakeResponse):
            response = response(method, url, **kwargs)
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url, **kwargs):
        return self._respond("GET", url, **kwargs)

    def put(self, url, **kwargs):
        return self._respond("PUT", url, **kwargs)

    def request(self, method, url, **kwargs):
        return self._respond(method, url, **kwargs)

    def close(self):
        self.closed = True

    def urls(self, method="GET"):
        return [url for m, url, _ in self.calls if m == method]


class FakeBlobStore:
    public_host = "public.blob.vercel-storage.com"

    def __init__(self, fail_paths=()):
        self.fail_paths = set(fail_paths)
        self.uploads = []

    def put(self, data, content_type, path):
        from mod_dredger.blob import BlobUploadError

        if path in self.fail_paths:
            raise BlobUploadError(f"upload failed for {path}")
        self.uploads.append((path, content_type, len(data)))
        return f"https://store1.{self.public_host}/{path}"


class FakeCatalog:
    """In-memory stand-in for CatalogClient."""

    def __init__(self):
        self.records = {}
        self.facets = set()
        self.lookups = []
        self.next_id = 1

    def find_existing(self, criteria):
        self.lookups.append(dict(criteria))
        insensitive = criteria.get("match") == "insensitive"
        for record in self.records.values():
            matched = True
            for key, value in criteria.items():
                if key == "match":
                    continue
                actual = record.get(key)
                if insensitive and isinstance(actual, str):
                    actual = actual.lower()
                if actual != value:
                    matched = False
                    break
            if matched:
                return record
        return None

    def create(self, fields):
        record = dict(fields, id=str(self.next_id))
        self.records[record["id"]] = record
        self.next_id += 1
        return record

    def update(self, record_id, fields):
        self.records[record_id].update(fields)
        return self.records[record_id]

    def ensure_taxonomy_value(self, facet_type, value, display_name, sort_order=100):
        if (facet_type, value) in self.facets:
            return False
        self.facets.add((facet_type, value))
        return True


@pytest.fixture
def http():
    return FakeHTTP()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def governor(http, sleeps):
    return RateGovernor(
        PROFILES["default"],
        session_factory=lambda identity, referer: http,
        sleep=sleeps.append,
        rng=random.Random(7),
    )
