"""
Main Application Module for Postal Code Gate

This module contains the Flask application class that wires configuration,
services and the session store together and handles HTTP requests. It
serves as the entry point for the gate web application.
"""

from flask import Flask, request, render_template, redirect, url_for
from dataclasses import replace
from typing import Optional

from .config import GateConfig
from .models import SessionData
from .services import PostCodeService, VerificationService
from .sessions import SessionStore, SignedCookieSessionStore
from .exceptions import (
    PostCodeGateException,
    InvalidPostCodeFormatException,
    PostCodeMismatchException,
)


class PostCodeGateApp:
    """
    Main Flask application class for the postal code gate

    A visitor enters a postal code on the index page; a matching code
    earns a short-lived signed cookie that unlocks the info page.
    """

    def __init__(self, config: Optional[GateConfig] = None,
                 session_store: Optional[SessionStore] = None):
        """
        Initialize the gate application

        Args:
            config: Configuration; read from the environment when omitted
            session_store: Optional store replacing the signed cookie store
        """
        self.app = Flask(__name__)
        self.config = config if config is not None else GateConfig.from_env()
        self._configure_app()

        self.post_code_service = PostCodeService()
        self.verification_service = VerificationService(self.config.post_code)
        if session_store is None:
            session_store = SignedCookieSessionStore(
                self.config.secret_key,
                self.config.session_max_age,
                salt=self.config.cookie_name,
            )
        self.session_store = session_store

        self._register_routes()
        self._register_error_handlers()

    def _configure_app(self) -> None:
        """Apply gate configuration to Flask"""
        self.app.config['DEBUG'] = self.config.debug
        self.app.config['GATE'] = self.config

    def _register_routes(self) -> None:
        """Register all Flask routes"""
        self.app.add_url_rule("/", "index", self.index, methods=["GET", "POST"])
        self.app.add_url_rule("/info", "info", self.info)
        self.app.add_url_rule("/logout", "logout", self.logout)

    def _register_error_handlers(self) -> None:
        """Register error handlers for custom exceptions"""

        @self.app.errorhandler(PostCodeGateException)
        def handle_gate_exception(e):
            return render_template("index.html", error=e.message)

    def index(self):
        """
        Gate form route

        GET renders the form. POST validates the submitted code and either
        redirects to the info page with a fresh session cookie or renders
        the form again with an error message.
        """
        if request.method == "GET":
            return render_template("index.html", error=None)

        raw = self.post_code_service.coerce_submission(request.form.get("post_code"))
        error = None

        try:
            code = self.post_code_service.validate_or_raise(raw)
            self.verification_service.check(code)
        except InvalidPostCodeFormatException as e:
            self.app.logger.debug("Rejected post code submission: bad format")
            error = e.message
        except PostCodeMismatchException as e:
            self.app.logger.debug("Rejected post code submission: mismatch")
            error = e.message
        else:
            self.app.logger.info("Post code verified; issuing session")
            return self._grant_access()

        return render_template("index.html", error=error)

    def info(self):
        """
        Protected route - only reachable with a verified session cookie
        """
        if not self._is_verified():
            return redirect(url_for("index"))
        return render_template("info.html")

    def logout(self):
        """
        Logout route - drops the session cookie
        """
        response = redirect(url_for("index"))
        response.delete_cookie(
            self.config.cookie_name,
            path="/",
            secure=self.config.cookie_secure,
            httponly=True,
            samesite="Lax",
        )
        return response

    def _grant_access(self):
        token = self.session_store.issue(SessionData(verified=True))
        response = redirect(url_for("info"))
        response.set_cookie(
            self.config.cookie_name,
            token,
            max_age=self.config.session_max_age,
            path="/",
            secure=self.config.cookie_secure,
            httponly=True,
            samesite="Lax",
        )
        return response

    def _is_verified(self) -> bool:
        """
        Check if the current request carries a verified session

        Returns:
            True if the session cookie is valid, unexpired and verified
        """
        session = self.session_store.verify(request.cookies.get(self.config.cookie_name))
        return session is not None and session.verified

    def run(self, host: str = '127.0.0.1', port: int = 5000, debug: bool = None) -> None:
        """
        Run the Flask development server

        Args:
            host: Host address to bind to
            port: Port number to listen on
            debug: Debug mode (overrides config if provided)
        """
        if debug is not None:
            self.app.config['DEBUG'] = debug

        self.app.run(host=host, port=port, debug=self.app.config['DEBUG'])


def create_app(config: Optional[GateConfig] = None,
               session_store: Optional[SessionStore] = None) -> PostCodeGateApp:
    """
    Factory function to create and configure the application

    Args:
        config: Optional configuration; read from the environment when omitted
        session_store: Optional session store

    Returns:
        Configured PostCodeGateApp instance
    """
    return PostCodeGateApp(config, session_store)


def create_development_app() -> PostCodeGateApp:
    """
    Create application configured for local development

    The Secure cookie flag is dropped so the session works over plain HTTP.

    Returns:
        PostCodeGateApp configured for development
    """
    dev_config = replace(GateConfig.from_env(strict=False), cookie_secure=False, debug=True)
    return create_app(dev_config)


def create_production_app() -> PostCodeGateApp:
    """
    Create application configured for production

    Missing POST_CODE or SECRET_KEY fails startup.

    Returns:
        PostCodeGateApp configured for production
    """
    return create_app(GateConfig.from_env(strict=True))


def create_wsgi_app():
    """Entry point for WSGI servers, e.g. ``gunicorn "postcode_gate.app:create_wsgi_app()"``"""
    return create_production_app().app
