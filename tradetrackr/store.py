import json
import logging

from .db import SessionLocal
from .document import seed_document
from .models import KeyValue

logger = logging.getLogger(__name__)

STORAGE_KEY = 'tt_data_v1'


class KeyValueStore:
    """String values under string keys in the kv_store table.

    Every call runs in its own session and commits straight away, so
    concurrent writers simply overwrite each other.
    """

    def __init__(self, session_factory=None):
        self._session_factory = session_factory

    def _session(self):
        return (self._session_factory or SessionLocal)()

    def get_item(self, key):
        session = self._session()
        try:
            row = session.get(KeyValue, key)
            return row.value if row else None
        finally:
            session.close()

    def set_item(self, key, value):
        session = self._session()
        try:
            row = session.get(KeyValue, key)
            if row is None:
                session.add(KeyValue(key=key, value=value))
            else:
                row.value = value
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def remove_item(self, *keys):
        session = self._session()
        try:
            session.query(KeyValue).filter(KeyValue.key.in_(keys)).delete(synchronize_session=False)
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


class DocumentStore:
    """Whole-document persistence for clients, materials, jobs and settings."""

    def __init__(self, storage=None, key=STORAGE_KEY):
        self.storage = storage or KeyValueStore()
        self.key = key

    def _reseed(self):
        seed = seed_document()
        self.save(seed)
        return seed

    def load(self):
        raw = self.storage.get_item(self.key)
        if not raw:
            return self._reseed()
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Stored document under %s is unreadable; reseeding", self.key)
            return self._reseed()

    def save(self, document):
        self.storage.set_item(self.key, json.dumps(document))

    def update(self, mutate):
        """Load, apply `mutate(document)`, save, and return what `mutate` returned."""
        document = self.load()
        result = mutate(document)
        self.save(document)
        return result

    def clear(self):
        self.storage.remove_item(self.key)
