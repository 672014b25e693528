"""
Client Session Store

Holds the bearer token and public profile of the signed-in user. The session
is an explicit object: load() reads the persisted copy once at startup,
save() and clear() always update the in-memory and on-disk copies together.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_SESSION_PATH = Path(
    os.getenv("KIIT_RENTALS_SESSION", str(Path.home() / ".kiit_rentals" / "session.json"))
)

TOKEN_KEY = "token"
USER_KEY = "user"


class SessionStore:
    def __init__(self, path: str | Path = DEFAULT_SESSION_PATH) -> None:
        self.path = Path(path)
        self.token: Optional[str] = None
        self.user: Optional[dict] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def load(self) -> "SessionStore":
        """Read the persisted session. A missing or unreadable file means signed out."""
        self.token, self.user = None, None
        if not self.path.exists():
            return self
        try:
            stored = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return self
        if not isinstance(stored, dict):
            logger.warning(f"Ignoring session file {self.path}: not a JSON object")
            return self

        token, user = stored.get(TOKEN_KEY), stored.get(USER_KEY)
        # Both keys or neither
        if isinstance(token, str) and token and isinstance(user, dict):
            self.token, self.user = token, user
        return self

    def save(self, token: str, user: dict) -> None:
        self.token, self.user = token, dict(user)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({TOKEN_KEY: self.token, USER_KEY: self.user}), encoding="utf-8")

    def clear(self) -> None:
        self.token, self.user = None, None
        self.path.unlink(missing_ok=True)

    def auth_header(self) -> dict:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}
