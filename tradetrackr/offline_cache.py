"""Cache-first offline copy of the app shell.

Responses are kept in named cache generations in the database. A generation
is never revalidated: bumping CACHE_NAME in a new release is the only way to
refresh what is stored.
"""
import logging
import os
from dataclasses import dataclass, field
from urllib.parse import urljoin

import requests

from .db import SessionLocal
from .models import CacheEntry, CacheGeneration

logger = logging.getLogger(__name__)

CACHE_NAME = 'tradetrackr-v1'
ASSETS_TO_CACHE = [
    '/',
    '/index.html',
    '/manifest.json',
    '/src/css/styles.css',
    '/src/js/app.js',
    '/icons/icon-192.svg',
    '/icons/icon-512.svg',
]
OFFLINE_SHELL = '/index.html'

# Headers worth replaying from a stored response
_KEPT_HEADERS = ('Content-Type', 'Cache-Control', 'Last-Modified', 'ETag')


@dataclass
class CachedResponse:
    status_code: int
    body: bytes
    headers: dict = field(default_factory=dict)
    from_cache: bool = False

    @property
    def content_type(self):
        return self.headers.get('Content-Type', 'application/octet-stream')

    @classmethod
    def from_network(cls, resp):
        headers = {k: resp.headers[k] for k in _KEPT_HEADERS if k in resp.headers}
        return cls(status_code=resp.status_code, body=resp.content, headers=headers)

    @classmethod
    def from_entry(cls, entry):
        return cls(
            status_code=entry.status_code,
            body=entry.body,
            headers=dict(entry.headers or {}),
            from_cache=True,
        )


class OfflineCache:
    """Install / activate / fetch, the three triggers of the offline cache."""

    def __init__(self, origin=None, cache_name=CACHE_NAME, assets=None,
                 http=None, session_factory=None, timeout=None):
        self.origin = origin or os.getenv('ASSET_ORIGIN', 'http://127.0.0.1:8000')
        self.cache_name = cache_name
        self.assets = list(assets if assets is not None else ASSETS_TO_CACHE)
        self.http = http or requests.Session()
        self.timeout = timeout if timeout is not None else float(os.getenv('REQUEST_TIMEOUT', '10'))
        self.session_factory = session_factory
        self.state = 'parsed'

    def _session(self):
        return (self.session_factory or SessionLocal)()

    def url_for(self, path):
        return urljoin(self.origin, path)

    # ------------------------------------------------------------------
    # Cache storage
    # ------------------------------------------------------------------

    def keys(self):
        """Names of every stored cache generation."""
        session = self._session()
        try:
            return [g.name for g in session.query(CacheGeneration).order_by(CacheGeneration.created_at).all()]
        finally:
            session.close()

    def match(self, path):
        """Stored response for `path` in the current generation, or None."""
        session = self._session()
        try:
            entry = session.query(CacheEntry).filter_by(
                generation_name=self.cache_name,
                url=self.url_for(path)
            ).first()
            return CachedResponse.from_entry(entry) if entry else None
        finally:
            session.close()

    def put(self, path, response):
        """Store `response` under `path`, replacing any earlier copy."""
        self._put_many([(path, response)])

    def _put_many(self, items):
        session = self._session()
        try:
            if session.get(CacheGeneration, self.cache_name) is None:
                session.add(CacheGeneration(name=self.cache_name))
                session.flush()
            for path, response in items:
                url = self.url_for(path)
                session.query(CacheEntry).filter_by(
                    generation_name=self.cache_name, url=url
                ).delete(synchronize_session=False)
                session.add(CacheEntry(
                    generation_name=self.cache_name,
                    url=url,
                    status_code=response.status_code,
                    headers=response.headers,
                    body=response.body,
                ))
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def delete(self, name):
        session = self._session()
        try:
            generation = session.get(CacheGeneration, name)
            if generation is None:
                return False
            session.delete(generation)
            session.commit()
            return True
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    def _network(self, method, path, **kwargs):
        resp = self.http.request(method, self.url_for(path), timeout=self.timeout, **kwargs)
        return CachedResponse.from_network(resp)

    def install(self):
        """Fetch the whole asset list into the current generation.

        All or nothing: any network error or non-2xx answer raises and
        leaves the cache untouched.
        """
        fetched = []
        for path in self.assets:
            resp = self.http.get(self.url_for(path), timeout=self.timeout)
            resp.raise_for_status()
            fetched.append((path, CachedResponse.from_network(resp)))

        self._put_many(fetched)
        # Skip waiting: ready as soon as the assets are stored
        self.state = 'installed'
        logger.info("Installed %d assets into %s", len(fetched), self.cache_name)
        return len(fetched)

    def activate(self):
        """Delete every generation except the current one and take control."""
        deleted = []
        for name in self.keys():
            if name != self.cache_name and self.delete(name):
                deleted.append(name)
        self.state = 'activated'
        if deleted:
            logger.info("Deleted stale cache generations: %s", ", ".join(deleted))
        return deleted

    def fetch(self, method, path, navigate=False, **kwargs):
        """Answer a request cache-first.

        Non-GET requests go straight to the network and are never stored
        (their network errors propagate). For GET, a network failure on a
        miss yields the offline shell for navigations and None otherwise.
        """
        if method.upper() != 'GET':
            return self._network(method, path, **kwargs)

        cached = self.match(path)
        if cached is not None:
            return cached

        try:
            response = self._network('GET', path, **kwargs)
        except requests.RequestException as e:
            logger.warning("Network fetch failed for %s: %s", path, e)
            if navigate:
                return self.match(OFFLINE_SHELL)
            return None

        self.put(path, response)
        return response
