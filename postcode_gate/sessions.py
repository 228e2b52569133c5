"""
Session Store Classes for Postal Code Gate Application

This module puts an explicit issue/verify interface in front of the
session cookie so the signing scheme can be swapped without touching
validation logic. The default store keeps all state inside the signed
cookie; nothing is stored on the server.
"""

import logging
import secrets
import time
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

from itsdangerous import BadData, SignatureExpired, URLSafeTimedSerializer

from .exceptions import SessionInvalidException
from .models import SessionData

logger = logging.getLogger(__name__)


class SessionStore(ABC):
    """
    Abstract base class for session stores

    A store turns SessionData into an opaque token and back.
    """

    def __init__(self, max_age: int):
        """
        Args:
            max_age: Seconds a token stays valid after issuance
        """
        self.max_age = max_age

    @abstractmethod
    def issue(self, data: SessionData) -> str:
        """
        Serialize session data into a token

        Args:
            data: Session payload

        Returns:
            Token suitable for a cookie value
        """
        pass

    @abstractmethod
    def verify_or_raise(self, token: str) -> SessionData:
        """
        Decode a token issued by this store

        Raises:
            SessionInvalidException: If the token is tampered, malformed or expired
        """
        pass

    def verify(self, token: Optional[str]) -> Optional[SessionData]:
        """
        Decode a token, returning None for anything unusable

        Args:
            token: Cookie value, possibly None

        Returns:
            SessionData or None if the token is missing or invalid
        """
        if not token:
            return None
        try:
            return self.verify_or_raise(token)
        except SessionInvalidException as e:
            logger.debug("Rejected session token: %s", e.reason)
            return None


class SignedCookieSessionStore(SessionStore):
    """
    Session store backed by itsdangerous timed signatures

    The payload is JSON, signed with the configured secret key and
    timestamped so tokens older than max_age are refused.
    """

    def __init__(self, secret_key: str, max_age: int, salt: str = "__session"):
        """
        Initialize signed cookie store

        Args:
            secret_key: Key used to sign tokens
            max_age: Seconds a token stays valid after issuance
            salt: Namespace for the signature, normally the cookie name
        """
        super().__init__(max_age)
        self._serializer = URLSafeTimedSerializer(secret_key, salt=salt)

    def issue(self, data: SessionData) -> str:
        return self._serializer.dumps(data.to_dict())

    def verify_or_raise(self, token: str) -> SessionData:
        try:
            payload = self._serializer.loads(token, max_age=self.max_age)
        except SignatureExpired:
            raise SessionInvalidException("expired")
        except BadData:
            raise SessionInvalidException("bad signature or payload")

        if not isinstance(payload, dict):
            raise SessionInvalidException("payload is not an object")
        return SessionData.from_dict(payload)


class InMemorySessionStore(SessionStore):
    """
    In-memory session store for testing

    Tokens are random handles into a dictionary, so the store only
    works within a single process. Expired entries are dropped whenever
    a new session is issued.
    """

    def __init__(self, max_age: int):
        super().__init__(max_age)
        self._sessions: Dict[str, Tuple[SessionData, float]] = {}

    def issue(self, data: SessionData) -> str:
        now = time.time()
        self._prune(now)
        token = secrets.token_urlsafe(16)
        self._sessions[token] = (SessionData(**data.to_dict()), now)
        return token

    def verify_or_raise(self, token: str) -> SessionData:
        if token not in self._sessions:
            raise SessionInvalidException("unknown token")

        data, issued_at = self._sessions[token]
        if time.time() - issued_at > self.max_age:
            del self._sessions[token]
            raise SessionInvalidException("expired")
        return data

    def _prune(self, now: float) -> None:
        expired = [
            token for token, (_, issued_at) in self._sessions.items()
            if now - issued_at > self.max_age
        ]
        for token in expired:
            del self._sessions[token]

    def clear(self) -> None:
        """Forget every issued session"""
        self._sessions.clear()
