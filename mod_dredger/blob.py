"""
Object storage client. Uploads image bytes and returns their public URL.
"""

import logging
from typing import Optional
from urllib.parse import urlparse

import requests

from . import config

logger = logging.getLogger("dredger.blob")

BLOB_API_VERSION = '7'


class BlobUploadError(Exception):
    pass


def is_first_party(url: Optional[str], public_host: str = config.BLOB_PUBLIC_HOST) -> bool:
    if not url or not public_host:
        return False
    host = urlparse(url).netloc.lower()
    return host == public_host or host.endswith('.' + public_host)


class BlobStore:
    def __init__(self, token: str = config.BLOB_READ_WRITE_TOKEN, api_url: str = config.BLOB_API_URL,
                 public_host: str = config.BLOB_PUBLIC_HOST, http: Optional[requests.Session] = None,
                 timeout: float = config.IMAGE_TIMEOUT):
        self.token = token
        self.api_url = api_url.rstrip('/')
        self.public_host = public_host
        self.http = http or requests.Session()
        self.timeout = timeout

    def put(self, data: bytes, content_type: str, path: str) -> str:
        headers = {
            'Authorization': f'Bearer {self.token}',
            'x-api-version': BLOB_API_VERSION,
            'x-content-type': content_type,
            'x-add-random-suffix': '0',
        }
        try:
            r = self.http.put(f"{self.api_url}/{path.lstrip('/')}", data=data, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise BlobUploadError(f"upload failed for {path}: {e}") from e

        if r.status_code not in (200, 201):
            raise BlobUploadError(f"upload failed for {path}: HTTP {r.status_code}")
        try:
            url = r.json().get('url')
        except ValueError as e:
            raise BlobUploadError(f"unreadable upload response for {path}") from e
        if not url:
            raise BlobUploadError(f"upload response for {path} carried no url")

        logger.debug(f"      ☁️  Stored {path}")
        return url

    def is_first_party(self, url: Optional[str]) -> bool:
        return is_first_party(url, self.public_host)
