import hashlib

import pytest

from tradetrackr.credentials import PIN_HASH_KEY, validate_pin
from tradetrackr.store import STORAGE_KEY


def test_fresh_gate_is_not_configured(gate):
    assert gate.is_configured() is False
    assert gate.verify('1234') is False


def test_verify_accepts_only_the_latest_pin(gate):
    gate.set_pin('1234')
    assert gate.is_configured() is True
    assert gate.verify('1234') is True
    assert gate.verify('4321') is False
    assert gate.verify('') is False

    gate.set_pin('987654')
    assert gate.verify('987654') is True
    assert gate.verify('1234') is False


def test_digest_is_not_the_pin(gate):
    gate.set_pin('1234')
    stored = gate.storage.get_item(PIN_HASH_KEY)
    assert '1234' not in stored
    assert stored != hashlib.sha256(b'1234').hexdigest()


def test_legacy_sha256_digest_is_accepted_and_upgraded(gate):
    legacy = hashlib.sha256(b'2468').hexdigest()
    gate.storage.set_item(PIN_HASH_KEY, legacy)

    assert gate.verify('1357') is False
    assert gate.storage.get_item(PIN_HASH_KEY) == legacy

    assert gate.verify('2468') is True
    assert gate.storage.get_item(PIN_HASH_KEY) != legacy
    assert gate.verify('2468') is True


def test_reset_clears_pin_and_reseeds_document(gate, store):
    gate.set_pin('1234')
    store.update(lambda doc: doc['clients'].clear())

    gate.reset()

    assert gate.is_configured() is False
    assert gate.verify('1234') is False
    assert gate.storage.get_item(STORAGE_KEY) is not None
    assert store.load()['clients'][0]['name'] == 'John Smith'


@pytest.mark.parametrize('pin,ok', [
    ('1234', True),
    ('123456', True),
    ('123', False),
    ('1234567', False),
    ('12a4', False),
    ('', False),
    ('1234\n', False),
])
def test_validate_pin(pin, ok):
    assert validate_pin(pin)[0] is ok
