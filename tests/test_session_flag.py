from tradetrackr.session_flag import AUTH_SESSION_KEY, SessionFlag


def test_fresh_session_is_inactive():
    assert SessionFlag({}).is_active() is False


def test_set_active_true_then_false():
    session = {}
    flag = SessionFlag(session)

    flag.set_active(True)
    assert flag.is_active() is True
    assert session[AUTH_SESSION_KEY] == '1'

    flag.set_active(False)
    assert flag.is_active() is False
    assert AUTH_SESSION_KEY not in session


def test_only_the_string_one_counts_as_active():
    assert SessionFlag({AUTH_SESSION_KEY: 'yes'}).is_active() is False


def test_flag_survives_requests_in_same_browser_session(auth_client):
    assert auth_client.get('/auth/status').get_json()['authenticated'] is True
    assert auth_client.get('/clients').status_code == 200
