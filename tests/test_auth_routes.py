from conftest import TEST_PIN


def test_health_is_open(client):
    assert client.get('/health').status_code == 200


def test_status_on_first_run(client):
    assert client.get('/auth/status').get_json() == {'configured': False, 'authenticated': False}


def test_gated_endpoints_refuse_before_login(client):
    for path in ('/dashboard', '/jobs', '/clients', '/materials', '/settings', '/export'):
        resp = client.get(path)
        assert resp.status_code == 401, path
        assert resp.get_json() == {'error': 'PIN required'}


def test_set_pin_validation(client):
    assert client.post('/auth/pin', json={'pin': '1234'}).status_code == 400
    resp = client.post('/auth/pin', json={'pin': '1234', 'confirm': '1235'})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'PINs do not match'
    resp = client.post('/auth/pin', json={'pin': '12', 'confirm': '12'})
    assert resp.get_json()['error'] == 'PIN should be 4-6 digits'
    assert client.get('/auth/status').get_json()['configured'] is False


def test_set_pin_then_login(client):
    assert client.post('/auth/pin', json={'pin': '4321', 'confirm': '4321'}).status_code == 200
    status = client.get('/auth/status').get_json()
    assert status == {'configured': True, 'authenticated': False}

    resp = client.post('/auth/login', json={'pin': '0000'})
    assert resp.status_code == 401
    assert resp.get_json()['error'] == 'Wrong PIN'

    assert client.post('/auth/login', json={'pin': ''}).status_code == 400

    assert client.post('/auth/login', json={'pin': '4321'}).status_code == 200
    assert client.get('/auth/status').get_json()['authenticated'] is True
    assert client.get('/jobs').status_code == 200


def test_changing_pin_needs_login(client, auth_client):
    auth_client.post('/auth/logout')
    resp = client.post('/auth/pin', json={'pin': '5555', 'confirm': '5555'})
    assert resp.status_code == 403


def test_changing_pin_from_unlocked_session(auth_client, gate):
    resp = auth_client.post('/auth/pin', json={'pin': '5555', 'confirm': '5555'})
    assert resp.status_code == 200
    assert gate.verify('5555') is True
    assert gate.verify(TEST_PIN) is False


def test_logout_clears_session(auth_client):
    assert auth_client.post('/auth/logout').status_code == 200
    assert auth_client.get('/jobs').status_code == 401
    assert auth_client.post('/auth/logout').status_code == 401


def test_reset_requires_confirmation(client, auth_client, gate):
    assert client.post('/auth/reset', json={}).status_code == 400
    assert gate.is_configured() is True


def test_reset_erases_pin_and_data(auth_client, gate, store):
    auth_client.post('/clients', json={'name': 'Extra Client'})
    assert len(store.load()['clients']) == 2

    resp = auth_client.post('/auth/reset', json={'confirm': True})

    assert resp.status_code == 200
    assert gate.is_configured() is False
    assert auth_client.get('/auth/status').get_json() == {'configured': False, 'authenticated': False}
    assert [c['name'] for c in store.load()['clients']] == ['John Smith']


def test_login_cookie_ends_with_browser_session(client):
    client.post('/auth/pin', json={'pin': TEST_PIN, 'confirm': TEST_PIN})

    resp = client.post('/auth/login', json={'pin': TEST_PIN})

    cookie = resp.headers['Set-Cookie']
    assert cookie.startswith('session=')
    assert 'Expires' not in cookie
    assert 'Max-Age' not in cookie
