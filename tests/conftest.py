# tests/conftest.py
import pytest
import requests

from tradetrackr.app import create_app
from tradetrackr.offline_cache import OfflineCache

ORIGIN = 'http://assets.test'
TEST_PIN = '1234'


class FakeResponse:
    def __init__(self, status_code=200, content=b'', content_type='text/html'):
        self.status_code = status_code
        self.content = content
        self.headers = {'Content-Type': content_type}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeHTTP:
    """Stands in for requests.Session; unknown URLs behave like a dead network."""

    def __init__(self):
        self.responses = {}
        self.calls = []

    def serve(self, path, body, status=200, content_type='text/html'):
        self.responses[ORIGIN + path] = FakeResponse(status, body, content_type)

    def go_offline(self):
        self.responses.clear()

    def request(self, method, url, timeout=None, **kwargs):
        self.calls.append((method, url))
        resp = self.responses.get(url)
        if resp is None:
            raise requests.ConnectionError(f"offline: {url}")
        return resp

    def get(self, url, **kwargs):
        return self.request('GET', url, **kwargs)


@pytest.fixture
def http():
    fake = FakeHTTP()
    fake.serve('/', b'<html>shell</html>')
    fake.serve('/index.html', b'<html>shell</html>')
    fake.serve('/manifest.json', b'{}', content_type='application/json')
    fake.serve('/src/css/styles.css', b'body{}', content_type='text/css')
    fake.serve('/src/js/app.js', b'console.log(1)', content_type='application/javascript')
    fake.serve('/icons/icon-192.svg', b'<svg/>', content_type='image/svg+xml')
    fake.serve('/icons/icon-512.svg', b'<svg/>', content_type='image/svg+xml')
    return fake


@pytest.fixture
def app(tmp_path, http):
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'DATABASE_URL': f"sqlite:///{tmp_path / 'test.db'}",
        'OFFLINE_CACHE': OfflineCache(origin=ORIGIN, http=http, timeout=1),
    })
    yield app


@pytest.fixture
def store(app):
    return app.extensions['document_store']


@pytest.fixture
def gate(app):
    return app.extensions['credential_gate']


@pytest.fixture
def cache(app):
    return app.extensions['offline_cache']


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    """A test client that has set the PIN and signed in."""
    resp = client.post('/auth/pin', json={'pin': TEST_PIN, 'confirm': TEST_PIN})
    assert resp.status_code == 200
    resp = client.post('/auth/login', json={'pin': TEST_PIN})
    assert resp.status_code == 200
    return client
