from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Text, JSON, LargeBinary
)
from sqlalchemy.orm import relationship

from .db import Base

# ----------------------------------
# Local key-value storage
# ----------------------------------

class KeyValue(Base):
    """One string value under one fixed key (document, PIN digest)."""
    __tablename__ = 'kv_store'

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<KeyValue {self.key}>'


# ----------------------------------
# Offline cache
# ----------------------------------

class CacheGeneration(Base):
    __tablename__ = 'cache_generations'

    name = Column(String(100), primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    entries = relationship('CacheEntry', back_populates='generation', lazy=True, cascade='all, delete-orphan')

    def __repr__(self):
        return f'<CacheGeneration {self.name}>'


class CacheEntry(Base):
    __tablename__ = 'cache_entries'

    id = Column(Integer, primary_key=True)
    generation_name = Column(String(100), ForeignKey('cache_generations.name'), nullable=False, index=True)
    url = Column(String(2048), nullable=False, index=True)

    status_code = Column(Integer, nullable=False)
    headers = Column(JSON)
    body = Column(LargeBinary, nullable=False)

    stored_at = Column(DateTime, default=datetime.utcnow)

    generation = relationship('CacheGeneration', back_populates='entries')

    def __repr__(self):
        return f'<CacheEntry {self.generation_name} {self.url}>'
