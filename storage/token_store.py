"""
Persisted session tokens
"""
from typing import Optional
import json
from pathlib import Path

from config import settings
from utils.logging_config import logger


class TokenStore:
    """
    Keeps the bearer token across app restarts in a small JSON file
    """

    def __init__(self, path: str = None):
        self.path = Path(path or settings.TOKEN_PATH)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f) or {}
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return {}

    def _write(self, data: dict):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f)

    def get_access_token(self) -> Optional[str]:
        return self._read().get("access_token")

    def get_refresh_token(self) -> Optional[str]:
        return self._read().get("refresh_token")

    def save(self, access_token: str, refresh_token: Optional[str] = None):
        """Persist tokens after a successful login"""
        data = {"access_token": access_token}
        if refresh_token:
            data["refresh_token"] = refresh_token
        self._write(data)

    def clear(self):
        """Remove both tokens"""
        if self.path.exists():
            self.path.unlink()

    def is_authenticated(self) -> bool:
        return bool(self.get_access_token())
