"""
Session context for the logged-in user
The profile snapshot is persisted to a JSON file, the way the browser kept it
in local storage: read once at startup, written on login, removed on logout.
"""

import json
import logging
import os
from typing import Optional

from pydantic import ValidationError

from app.config import SESSION_STORE_PATH, SESSION_STORAGE_KEY
from app.schemas.user import UserProfile

logger = logging.getLogger(__name__)

class ProfileStore:
    """Key/value JSON file holding the stored profile"""

    def __init__(self, path: str = SESSION_STORE_PATH, key: str = SESSION_STORAGE_KEY):
        self.path = path
        self.key = key

    def _read_all(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Session store {self.path} does not hold a JSON object")
        return data

    def _write_all(self, data: dict) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f)

    def get(self) -> Optional[dict]:
        return self._read_all().get(self.key)

    def set(self, profile: dict) -> None:
        data = self._read_all()
        data[self.key] = profile
        self._write_all(data)

    def remove(self) -> None:
        if not os.path.exists(self.path):
            return
        try:
            data = self._read_all()
        except ValueError:
            # Unreadable store; nothing else in it is worth keeping
            os.remove(self.path)
            return
        if data.pop(self.key, None) is not None:
            self._write_all(data)

class SessionContext:
    """Explicit authentication state handed to the routes"""

    def __init__(self, store: ProfileStore):
        self.store = store
        self.user: Optional[UserProfile] = None
        self.initialized = False

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def initialize(self) -> None:
        """Restore the stored profile; called once at application start"""
        try:
            stored = self.store.get()
            self.user = UserProfile(**stored) if stored else None
        except (ValueError, TypeError, ValidationError) as e:
            logger.error(f"Error parsing stored user data: {e}")
            self.store.remove()
            self.user = None
        self.initialized = True
        if self.user:
            logger.info(f"Restored session for user: {self.user.email}")

    def login(self, profile: UserProfile) -> None:
        self.user = profile
        self.store.set(profile.model_dump(by_alias=True))
        logger.info(f"User logged in: {profile.email}")

    def logout(self) -> None:
        if self.user:
            logger.info(f"User logged out: {self.user.email}")
        self.user = None
        self.store.remove()
