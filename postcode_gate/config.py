"""
Configuration for Postal Code Gate Application

GateConfig is built once at process start and handed to the application;
nothing else in the package reads the environment.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .exceptions import ConfigurationException
from .models import POST_CODE_LENGTH

logger = logging.getLogger(__name__)

DEFAULT_POST_CODE = "1111111"
DEFAULT_SECRET_KEY = "secretkey"
DEFAULT_SESSION_MAX_AGE = 60
SESSION_COOKIE_NAME = "__session"

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off")


@dataclass(frozen=True)
class GateConfig:
    """
    Immutable process-wide settings

    Attributes:
        post_code: The secret code a visitor must enter
        secret_key: Key used to sign the session cookie
        session_max_age: Lifetime of an issued session, in seconds
        cookie_name: Name of the session cookie
        cookie_secure: Whether the cookie carries the Secure attribute
        debug: Flask debug mode
        insecure_defaults: Settings that fell back to built-in placeholders
    """
    post_code: str = DEFAULT_POST_CODE
    secret_key: str = DEFAULT_SECRET_KEY
    session_max_age: int = DEFAULT_SESSION_MAX_AGE
    cookie_name: str = SESSION_COOKIE_NAME
    cookie_secure: bool = True
    debug: bool = False
    insecure_defaults: Tuple[str, ...] = ()

    def __post_init__(self):
        code = self.post_code
        if len(code) != POST_CODE_LENGTH or not all("0" <= ch <= "9" for ch in code):
            raise ConfigurationException(
                "POST_CODE", f"must be exactly {POST_CODE_LENGTH} ASCII digits"
            )
        if not self.secret_key:
            raise ConfigurationException("SECRET_KEY", "must not be empty")
        if self.session_max_age <= 0:
            raise ConfigurationException("SESSION_MAX_AGE", "must be a positive integer")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None,
                 strict: Optional[bool] = None) -> 'GateConfig':
        """
        Build configuration from environment variables

        Args:
            environ: Mapping to read from, defaults to os.environ
            strict: Fail instead of falling back to placeholder secrets;
                defaults to the GATE_STRICT_CONFIG variable

        Returns:
            GateConfig instance

        Raises:
            ConfigurationException: If a value is malformed, or missing in strict mode
        """
        if environ is None:
            environ = os.environ
        if strict is None:
            strict = _parse_bool(environ, "GATE_STRICT_CONFIG", False)

        insecure = []
        post_code = environ.get("POST_CODE") or None
        secret_key = environ.get("SECRET_KEY") or None

        if post_code is None:
            insecure.append("POST_CODE")
            post_code = DEFAULT_POST_CODE
        if secret_key is None:
            insecure.append("SECRET_KEY")
            secret_key = DEFAULT_SECRET_KEY

        if insecure:
            if strict:
                raise ConfigurationException(
                    insecure[0], "is not set and strict configuration is enabled"
                )
            logger.warning(
                "Using insecure default value for %s; set it in the environment",
                ", ".join(insecure),
            )

        raw_age = environ.get("SESSION_MAX_AGE", str(DEFAULT_SESSION_MAX_AGE))
        try:
            session_max_age = int(raw_age)
        except ValueError:
            raise ConfigurationException("SESSION_MAX_AGE", f"not an integer: {raw_age!r}")

        return cls(
            post_code=post_code,
            secret_key=secret_key,
            session_max_age=session_max_age,
            cookie_secure=_parse_bool(environ, "SESSION_COOKIE_SECURE", True),
            debug=_parse_bool(environ, "FLASK_DEBUG", False),
            insecure_defaults=tuple(insecure),
        )


def _parse_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    value = environ.get(name)
    if value is None or value == "":
        return default
    value = value.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigurationException(name, f"not a boolean: {value!r}")
