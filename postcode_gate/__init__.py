"""
Postal Code Gate Package

A single-page access gate built with Flask. A visitor enters a postal
code; when it matches the configured secret the server issues a
short-lived signed session cookie that unlocks a protected page.

Main Components:
- models: Value types for normalized codes, validation results and sessions
- services: Input normalization, validation and the credential check
- sessions: Session store interface with a signed-cookie implementation
- config: Immutable configuration read once from the environment
- exceptions: Custom exception classes for error handling
- app: Main Flask application class

Usage:
    from postcode_gate import create_app

    gate = create_app()
    gate.run()
"""

__version__ = "1.0.0"

from .app import create_app, create_development_app, create_production_app, PostCodeGateApp
from .config import GateConfig
from .models import NormalizedPostCode, ValidationResult, SessionData
from .services import PostCodeService, VerificationService
from .sessions import SessionStore, SignedCookieSessionStore, InMemorySessionStore
from .exceptions import (
    PostCodeGateException,
    InvalidPostCodeFormatException,
    PostCodeMismatchException,
    ConfigurationException,
    SessionInvalidException
)

__all__ = [
    # App factory functions
    'create_app',
    'create_development_app',
    'create_production_app',
    'PostCodeGateApp',

    # Configuration
    'GateConfig',

    # Data models
    'NormalizedPostCode',
    'ValidationResult',
    'SessionData',

    # Services
    'PostCodeService',
    'VerificationService',

    # Session stores
    'SessionStore',
    'SignedCookieSessionStore',
    'InMemorySessionStore',

    # Exceptions
    'PostCodeGateException',
    'InvalidPostCodeFormatException',
    'PostCodeMismatchException',
    'ConfigurationException',
    'SessionInvalidException'
]
