"""SQLite database for commute settings and cached feed responses."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, Column, Integer, String, DateTime, Text
from sqlalchemy.orm import sessionmaker, declarative_base

from .commute import CommutePair
from .config import DB_PATH

Base = declarative_base()

COMMUTE_KEY = "commute"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class UserPreference(Base):
    """User preferences table."""
    __tablename__ = "user_preferences"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(100), default="default")
    key = Column(String(100), nullable=False)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=_utcnow)


class CachedResponse(Base):
    """Last good payload from each remote feed."""
    __tablename__ = "cached_responses"

    id = Column(Integer, primary_key=True)
    url = Column(String(500), nullable=False, unique=True)
    payload = Column(Text, nullable=False)
    fetched_at = Column(DateTime, default=_utcnow)


class Database:
    """Database manager for commute settings and the response cache."""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path or DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_engine(f"sqlite:///{self.db_path}")
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(bind=self.engine)

    def set_preference(self, key: str, value: str, user_id: str = "default"):
        """Set a user preference."""
        session = self.Session()
        try:
            pref = session.query(UserPreference).filter_by(
                user_id=user_id, key=key
            ).first()

            if pref:
                pref.value = value
                pref.updated_at = _utcnow()
            else:
                pref = UserPreference(user_id=user_id, key=key, value=value)
                session.add(pref)

            session.commit()
        finally:
            session.close()

    def get_preference(self, key: str, user_id: str = "default") -> Optional[str]:
        """Get a user preference."""
        session = self.Session()
        try:
            pref = session.query(UserPreference).filter_by(
                user_id=user_id, key=key
            ).first()
            return pref.value if pref else None
        finally:
            session.close()

    def delete_preference(self, key: str, user_id: str = "default") -> bool:
        """Remove a preference. Returns True if one existed."""
        session = self.Session()
        try:
            deleted = session.query(UserPreference).filter_by(
                user_id=user_id, key=key
            ).delete()
            session.commit()
            return deleted > 0
        finally:
            session.close()

    def get_all_preferences(self, user_id: str = "default") -> dict[str, str]:
        """Get all user preferences."""
        session = self.Session()
        try:
            prefs = session.query(UserPreference).filter_by(user_id=user_id).all()
            return {p.key: p.value for p in prefs}
        finally:
            session.close()

    def set_commute_pair(self, pair: CommutePair, user_id: str = "default"):
        self.set_preference(COMMUTE_KEY, json.dumps(pair.to_dict()), user_id)

    def get_commute_pair(self, user_id: str = "default") -> Optional[CommutePair]:
        """Saved commute pair, or None if unset or unreadable."""
        raw = self.get_preference(COMMUTE_KEY, user_id)
        if raw is None:
            return None
        try:
            return CommutePair.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError):
            return None

    def clear_commute_pair(self, user_id: str = "default") -> bool:
        return self.delete_preference(COMMUTE_KEY, user_id)

    def cache_response(self, url: str, payload: dict):
        """Store the latest payload fetched from a URL."""
        session = self.Session()
        try:
            entry = session.query(CachedResponse).filter_by(url=url).first()
            if entry:
                entry.payload = json.dumps(payload)
                entry.fetched_at = _utcnow()
            else:
                session.add(CachedResponse(url=url, payload=json.dumps(payload)))
            session.commit()
        finally:
            session.close()

    def get_cached_response(self, url: str) -> Optional[tuple[dict, datetime]]:
        """Last payload stored for a URL with its fetch time (naive UTC)."""
        session = self.Session()
        try:
            entry = session.query(CachedResponse).filter_by(url=url).first()
            if not entry:
                return None
            return json.loads(entry.payload), entry.fetched_at
        finally:
            session.close()

    def clear_cached_responses(self):
        session = self.Session()
        try:
            session.query(CachedResponse).delete()
            session.commit()
        finally:
            session.close()


# Singleton instance
db = Database()
