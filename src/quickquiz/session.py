"""
Session context for remote store access

The credential and base endpoint are sourced once (by whoever handles login)
and passed explicitly to everything that talks to the remote store.
"""

import os
from dataclasses import dataclass
from typing import Optional

from .config import config
from .errors import MissingCredential


@dataclass(frozen=True)
class SessionContext:
    """Authentication credential plus the store's base endpoint."""
    credential: Optional[str]
    base_url: str = ""

    @property
    def has_credential(self) -> bool:
        return bool(self.credential and self.credential.strip())

    def require_credential(self) -> str:
        """
        Return the credential, or raise if there is none.

        Raises:
            MissingCredential: When the credential is missing or blank
        """
        if not self.has_credential:
            raise MissingCredential("No session credential available. Log in before creating a quiz.")
        return self.credential.strip()

    @property
    def endpoint(self) -> str:
        """Base URL without trailing slashes, falling back to config."""
        url = (self.base_url or config.store.base_url).strip()
        return url.rstrip("/")

    @classmethod
    def from_env(cls) -> "SessionContext":
        """Build a session from QUICKQUIZ_TOKEN / QUICKQUIZ_API_URL."""
        return cls(
            credential=os.getenv("QUICKQUIZ_TOKEN"),
            base_url=os.getenv("QUICKQUIZ_API_URL", config.store.base_url),
        )
