"""
Identity pool, privacy profiles and the rate governor.

Every request to a third-party host goes through RateGovernor.fetch(), which
sleeps a randomized delay, rotates the client identity when a session is worn
out or was blocked, and turns the response into a FetchResult.
"""

import logging
import random
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from . import config
from .models import FetchResult, FetchStatus

logger = logging.getLogger("dredger.session")

# --- IDENTITY TABLES ---
USER_AGENTS = [
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36',
    'Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:122.0) Gecko/20100101 Firefox/122.0',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:122.0) Gecko/20100101 Firefox/122.0',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36 Edg/121.0.0.0',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.2 Safari/605.1.15',
]

ACCEPT_HEADERS = [
    'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
    'text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8',
    'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
]

ACCEPT_LANGUAGES = [
    'en-US,en;q=0.9',
    'en-GB,en;q=0.9',
    'en-CA,en;q=0.9',
    'en-AU,en;q=0.9',
]

REFERERS = [
    'https://www.google.com/',
    'https://www.bing.com/',
    'https://duckduckgo.com/',
    'https://www.reddit.com/r/Sims4/',
    'https://www.pinterest.com/',
]
REFERER_PROBABILITY = 0.3

BROWSER_HEADERS = {
    'DNT': '1',
    'Upgrade-Insecure-Requests': '1',
    'Sec-Fetch-Dest': 'document',
    'Sec-Fetch-Mode': 'navigate',
    'Sec-Fetch-User': '?1',
    'Cache-Control': 'max-age=0',
}

BLOCKED_STATUSES = {403, 429}
CHALLENGE_MARKERS = (
    'cf-chl-opt',
    '<title>Just a moment...</title>',
    '/cdn-cgi/challenge-platform/',
    'Attention Required! | Cloudflare',
)

# ============================================================================
# PRIVACY PROFILES
# ============================================================================

@dataclass(frozen=True)
class PrivacyProfile:
    name: str
    min_delay_ms: int
    max_delay_ms: int
    jitter_ms: int
    max_requests_per_session: int
    session_timeout_s: int
    random_referers: bool = True


PROFILES: Dict[str, PrivacyProfile] = {
    'default': PrivacyProfile('default', 3000, 8000, 2000, 50, 30 * 60),
    'stealth': PrivacyProfile('stealth', 5000, 15000, 5000, 25, 15 * 60),
    'conservative': PrivacyProfile('conservative', 10000, 30000, 10000, 20, 10 * 60),
}


def get_profile(name: Optional[str] = None) -> PrivacyProfile:
    name = (name or config.PRIVACY_LEVEL or 'default').lower()
    if name not in PROFILES:
        logger.warning(f"⚠️  Unknown privacy level '{name}', using 'default'")
        return PROFILES['default']
    return PROFILES[name]

# ============================================================================
# IDENTITIES & SESSIONS
# ============================================================================

@dataclass(frozen=True)
class Identity:
    user_agent: str
    accept: str
    accept_language: str

    def headers(self) -> Dict[str, str]:
        return {
            'User-Agent': self.user_agent,
            'Accept': self.accept,
            'Accept-Language': self.accept_language,
        }


class IdentityPool:
    """A fixed set of client identities drawn once at construction."""

    def __init__(self, size: int = config.IDENTITY_POOL_SIZE, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.identities = [
            Identity(
                user_agent=self.rng.choice(USER_AGENTS),
                accept=self.rng.choice(ACCEPT_HEADERS),
                accept_language=self.rng.choice(ACCEPT_LANGUAGES),
            )
            for _ in range(max(1, size))
        ]

    def pick(self, exclude: Optional[Identity] = None) -> Identity:
        choices = [i for i in self.identities if i != exclude] or self.identities
        return self.rng.choice(choices)


def build_http_session(identity: Identity, referer: Optional[str] = None) -> requests.Session:
    """A requests session wearing one identity, with retries disabled."""
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=Retry(total=0, raise_on_status=False))
    session.mount('http://', adapter)
    session.mount('https://', adapter)
    session.headers.update(BROWSER_HEADERS)
    session.headers.update(identity.headers())
    if referer:
        session.headers['Referer'] = referer
        session.headers['Sec-Fetch-Site'] = 'cross-site'
    else:
        session.headers['Sec-Fetch-Site'] = 'none'
    return session


@dataclass
class Session:
    identity: Identity
    client: requests.Session
    referer: Optional[str] = None
    request_count: int = 0
    started_at: float = 0.0


def looks_like_challenge(response) -> bool:
    content_type = response.headers.get('Content-Type', '') if response.headers else ''
    if 'html' not in content_type.lower():
        return False
    text = response.text or ''
    return any(marker in text for marker in CHALLENGE_MARKERS)

# ============================================================================
# RATE GOVERNOR
# ============================================================================

class RateGovernor:
    def __init__(
        self,
        profile: PrivacyProfile,
        pool: Optional[IdentityPool] = None,
        session_factory: Callable[[Identity, Optional[str]], requests.Session] = build_http_session,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
    ):
        self.profile = profile
        self.rng = rng or random.Random()
        self.pool = pool or IdentityPool(rng=self.rng)
        self._session_factory = session_factory
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.RLock()
        self._blocked = False
        self._backoff_pending = False
        self.session: Optional[Session] = None
        self.rotations = 0

    def _open_session(self, exclude: Optional[Identity] = None) -> Session:
        identity = self.pool.pick(exclude=exclude)
        referer = None
        if self.profile.random_referers and self.rng.random() < REFERER_PROBABILITY:
            referer = self.rng.choice(REFERERS)
        client = self._session_factory(identity, referer)
        return Session(identity=identity, client=client, referer=referer, started_at=self._clock())

    def current_client(self) -> Session:
        with self._lock:
            if self.session is None:
                self.session = self._open_session()
            elif self.should_rotate():
                self.rotate()
            return self.session

    def record_request(self):
        with self._lock:
            if self.session is not None:
                self.session.request_count += 1

    def should_rotate(self) -> bool:
        with self._lock:
            if self.session is None:
                return False
            if self._blocked:
                return True
            if self.session.request_count >= self.profile.max_requests_per_session:
                return True
            return self._clock() - self.session.started_at >= self.profile.session_timeout_s

    def rotate(self):
        with self._lock:
            previous = self.session
            if previous is not None:
                previous.client.close()
            self.session = self._open_session(exclude=previous.identity if previous else None)
            self._blocked = False
            self.rotations += 1
            logger.debug(f"   🔄 Rotated client identity (#{self.rotations})")

    def mark_blocked(self):
        """The next request gets a fresh identity and a longer pause."""
        with self._lock:
            self._blocked = True
            self._backoff_pending = True

    def sample_delay_ms(self) -> float:
        p = self.profile
        return self.rng.uniform(p.min_delay_ms, p.max_delay_ms) + self.rng.uniform(0, p.jitter_ms)

    def delay(self) -> float:
        delay_ms = self.sample_delay_ms()
        with self._lock:
            if self._backoff_pending:
                delay_ms *= config.BLOCKED_BACKOFF_MULTIPLIER
                self._backoff_pending = False
        self._sleep(delay_ms / 1000.0)
        return delay_ms

    def fetch(self, url: str, timeout: float = config.PAGE_TIMEOUT, accept: Optional[str] = None) -> FetchResult:
        self.delay()
        session = self.current_client()
        headers = {'Accept': accept} if accept else None
        try:
            response = session.client.get(url, timeout=timeout, headers=headers)
        except requests.RequestException as e:
            logger.warning(f"   ⚠️  Request failed for {url}: {e}")
            return FetchResult(url=url, status=FetchStatus.TRANSPORT_ERROR, error=str(e))
        finally:
            self.record_request()
        return self._classify(url, response)

    def _classify(self, url: str, response) -> FetchResult:
        code = response.status_code
        if code in BLOCKED_STATUSES or looks_like_challenge(response):
            self.mark_blocked()
            logger.warning(f"   🚧 Blocked (HTTP {code}) at {url} - rotating before the next request")
            return FetchResult(url=url, status=FetchStatus.BLOCKED, response=response)
        if code >= 500:
            return FetchResult(url=url, status=FetchStatus.SERVER_ERROR, response=response, error=f"HTTP {code}")
        if code >= 400:
            return FetchResult(url=url, status=FetchStatus.CLIENT_ERROR, response=response, error=f"HTTP {code}")
        return FetchResult(url=url, status=FetchStatus.OK, response=response)

    def close(self):
        with self._lock:
            if self.session is not None:
                self.session.client.close()
                self.session = None
