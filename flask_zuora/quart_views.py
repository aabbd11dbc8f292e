"""Async blueprint for Quart applications.

This module mirrors :mod:`flask_zuora.views` but uses ``async def`` view
functions and awaits Quart's coroutine-based request helpers. The Zuora
client is blocking, so its calls run in a worker thread through
``quart.utils.run_sync``.

It is selected automatically by :meth:`~flask_zuora.FlaskZuora.init_app`
when the application is a :class:`quart.Quart` instance.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger
from werkzeug.exceptions import InternalServerError

from flask_zuora.exceptions import ZuoraError
from flask_zuora.views import parse_session_request

if TYPE_CHECKING:
    from flask_zuora import FlaskZuora


def create_async_blueprint(ext: "FlaskZuora"):
    """Return a Quart Blueprint pre-configured with the extension instance."""
    try:
        from quart import Blueprint, jsonify, request
        from quart.utils import run_sync
    except ImportError as exc:  # pragma: no cover
        raise ImportError(
            "quart is required for flask_zuora.quart_views. "
            "Install it with: pip install 'flask-zuora[quart]'"
        ) from exc

    bp = Blueprint("zuora", __name__)

    @bp.errorhandler(ZuoraError)
    async def handle_zuora_error(exc: ZuoraError):
        logger.opt(exception=exc).error("Request failed: {}", exc)
        return InternalServerError.description, InternalServerError.code

    @bp.route("/config", methods=["GET"])
    async def config():
        """Return the publishable key and profile the frontend needs."""
        return jsonify(ext.public_config())

    @bp.route("/create-payment-session", methods=["POST"])
    async def create_payment_session():
        """Create a Zuora account and a payment session for it."""
        session_request = parse_session_request(await request.get_data())
        token = await run_sync(ext.create_payment_session)(session_request)
        return jsonify(token)

    return bp
