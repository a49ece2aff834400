"""PIN gate for the local app.

This is a screen lock for one device, not a security boundary: a 4-6 digit
PIN has at most a million values. Digests are still salted and iterated via
werkzeug so that a copied database does not hand out the PIN instantly.
"""
import hashlib
import hmac
import logging
import re

from werkzeug.security import generate_password_hash, check_password_hash

from .store import DocumentStore, KeyValueStore

logger = logging.getLogger(__name__)

PIN_HASH_KEY = 'tt_pin_hash_v1'

PIN_PATTERN = re.compile(r'[0-9]{4,6}')
_LEGACY_DIGEST = re.compile(r'[0-9a-f]{64}')


def validate_pin(pin):
    """Check a new PIN: 4 to 6 ASCII digits."""
    if not pin:
        return False, "Enter and confirm PIN"
    if not PIN_PATTERN.fullmatch(pin):
        return False, "PIN should be 4-6 digits"
    return True, "PIN is valid"


class CredentialGate:
    def __init__(self, storage=None, document_store=None):
        self.storage = storage or KeyValueStore()
        self.document_store = document_store or DocumentStore(self.storage)

    def is_configured(self) -> bool:
        return bool(self.storage.get_item(PIN_HASH_KEY))

    def set_pin(self, pin: str) -> None:
        self.storage.set_item(PIN_HASH_KEY, generate_password_hash(pin))

    def verify(self, pin: str) -> bool:
        stored = self.storage.get_item(PIN_HASH_KEY)
        if not stored or pin is None:
            return False

        # Plain SHA-256 hex, as exported by earlier versions of the app
        if _LEGACY_DIGEST.fullmatch(stored):
            digest = hashlib.sha256(pin.encode('utf-8')).hexdigest()
            if not hmac.compare_digest(digest, stored):
                return False
            logger.info("Upgrading legacy PIN digest")
            self.set_pin(pin)
            return True

        return check_password_hash(stored, pin)

    def reset(self) -> None:
        """Forget the PIN and erase all app data. Irreversible."""
        self.storage.remove_item(PIN_HASH_KEY, self.document_store.key)
        self.document_store.load()
        logger.warning("PIN and app data reset")
