"""flask_zuora – Flask/Quart extension fronting Zuora payment sessions."""

from __future__ import annotations

from loguru import logger

from flask_zuora.billing import ZuoraClient
from flask_zuora.exceptions import (
    MalformedInputError,
    RemoteAPIError,
    StartupConfigError,
    ZuoraError,
)
from flask_zuora.models import PaymentSessionRequest, Settings, ZuoraEnv
from flask_zuora.settings import DEFAULT_PROFILE_ID, load_settings
from flask_zuora.version import __version__
from flask_zuora.views import create_blueprint

__all__ = [
    "FlaskZuora",
    "MalformedInputError",
    "PaymentSessionRequest",
    "RemoteAPIError",
    "Settings",
    "StartupConfigError",
    "ZuoraClient",
    "ZuoraEnv",
    "ZuoraError",
    "load_settings",
]

# Used when no PAYMENT_GATEWAY_ID is configured, whatever the payment method.
DEFAULT_PAYMENT_GATEWAY_ID = "8a8aa26697aeaa8b0197b17b1cde6ed6"


def _is_quart_app(app) -> bool:
    """Return ``True`` when *app* is a :class:`quart.Quart` instance."""
    try:
        from quart import Quart

        return isinstance(app, Quart)
    except ImportError:
        return False


class FlaskZuora:
    """Flask/Quart extension that wires a Zuora client into an application.

    Usage – application factory pattern::

        from flask import Flask
        from flask_zuora import FlaskZuora

        zuora_ext = FlaskZuora()

        def create_app():
            app = Flask(__name__)
            zuora_ext.init_app(app)
            return app

    Usage – direct initialisation with explicit settings::

        from flask_zuora import FlaskZuora, load_settings

        app = Flask(__name__)
        ext = FlaskZuora(app, settings=load_settings())

    Usage – with Quart (async)::

        from quart import Quart
        from flask_zuora import FlaskZuora

        app = Quart(__name__)
        ext = FlaskZuora(app)   # async blueprint selected automatically

    When *settings* is omitted they are read from the environment and the
    ``.env`` file with :func:`~flask_zuora.settings.load_settings`. When
    *billing* is omitted a :class:`~flask_zuora.billing.ZuoraClient` is built
    from the settings and initialized, which talks to Zuora. Tests pass their
    own *billing* object exposing ``create_account`` and
    ``create_payment_session``.

    Configuration keys (set on ``app.config``):

    ``ZUORA_URL_PREFIX``
        URL prefix for the blueprint (default: ``""``).
    ``ZUORA_DEBUG``
        Log Zuora request and response bodies (default: ``True``).
    """

    def __init__(self, app=None, *, settings=None, billing=None) -> None:
        self._settings: Settings | None = settings
        self._billing = billing

        if app is not None:
            self.init_app(app)

    # ------------------------------------------------------------------
    # Initialisation
    # ------------------------------------------------------------------

    def init_app(self, app, *, settings=None, billing=None) -> None:
        """Initialise the extension against *app* (Flask or Quart).

        Keyword arguments override the values given to the constructor.

        Raises:
            StartupConfigError: If settings have to be loaded and are invalid.
            RemoteAPIError: If a new client cannot authenticate with Zuora.
        """
        if settings is not None:
            self._settings = settings
        if billing is not None:
            self._billing = billing

        app.config.setdefault("ZUORA_URL_PREFIX", "")
        app.config.setdefault("ZUORA_DEBUG", True)

        if self._settings is None:
            self._settings = load_settings()
        if self._billing is None:
            self._billing = self._build_client(self._settings, app.config["ZUORA_DEBUG"])

        if _is_quart_app(app):
            from flask_zuora.quart_views import create_async_blueprint

            blueprint = create_async_blueprint(self)
        else:
            blueprint = create_blueprint(self)

        url_prefix = app.config["ZUORA_URL_PREFIX"] or None
        app.register_blueprint(blueprint, url_prefix=url_prefix)

        app.extensions["zuora"] = self

    @staticmethod
    def _build_client(settings: Settings, debugging: bool) -> ZuoraClient:
        client = ZuoraClient(settings.client_id, settings.client_secret, settings.environment)
        client.set_org_ids(settings.org_ids)
        client.initialize()
        client.set_debugging(debugging)
        return client

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def settings(self) -> Settings:
        """The validated :class:`~flask_zuora.models.Settings`."""
        if self._settings is None:
            raise RuntimeError(
                "FlaskZuora extension not initialised. Call init_app(app) first."
            )
        return self._settings

    @property
    def billing(self):
        """The shared billing client (a :class:`ZuoraClient` unless injected)."""
        if self._billing is None:
            raise RuntimeError(
                "FlaskZuora extension not initialised. Call init_app(app) first."
            )
        return self._billing

    def public_config(self) -> dict[str, str]:
        """Return the publishable values served by ``GET /config``."""
        return {
            "publishableKey": self.settings.publishable_key or "",
            "profile": self.settings.profile_id or DEFAULT_PROFILE_ID,
        }

    def gateway_id_for(self, payment_method_type: str | None) -> str:
        """Return the payment gateway to use for *payment_method_type*.

        The configured ``PAYMENT_GATEWAY_ID`` always wins. Without one every
        payment method type, ``creditcard`` included, maps to
        :data:`DEFAULT_PAYMENT_GATEWAY_ID`.
        """
        configured = self.settings.payment_gateway_id
        if configured:
            return configured
        return DEFAULT_PAYMENT_GATEWAY_ID

    def create_payment_session(self, request: PaymentSessionRequest) -> str:
        """Create an account for *request*, then a payment session on it.

        Returns the session token. An account created before a failing
        session call is left in place on the Zuora side.

        Raises:
            RemoteAPIError: If either Zuora call fails.
        """
        gateway_id = self.gateway_id_for(request.payment_method_type)
        account = self.billing.create_account(request)
        session = self.billing.create_payment_session(
            account.account_id, request.currency, gateway_id
        )
        logger.info("Payment session response: {}", session.raw)
        return session.token
