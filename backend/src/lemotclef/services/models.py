"""
SQLAlchemy Models — Schéma du cache Le Mot Clef.

SOURCE UNIQUE DE VÉRITÉ pour le schéma ORM.
Utilisé par services/word_store.py (WordStore).
"""

from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class WordRecord(Base):
    """Mot déjà recherché — clé : slug du terme (unique)."""
    __tablename__ = "words"

    slug = Column(String, primary_key=True)
    term = Column(String, nullable=False)
    etymology = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=func.now(), onupdate=func.now())

    def to_dict(self):
        return {
            "slug": self.slug,
            "term": self.term,
            "etymology": self.etymology,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
