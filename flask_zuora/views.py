"""Blueprint with the config and payment-session routes."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from flask import Blueprint, jsonify, request
from loguru import logger
from werkzeug.exceptions import InternalServerError

from flask_zuora.exceptions import MalformedInputError, ZuoraError
from flask_zuora.models import PaymentSessionRequest

if TYPE_CHECKING:
    from flask_zuora import FlaskZuora


def parse_session_request(raw: bytes) -> PaymentSessionRequest:
    """Decode a ``/create-payment-session`` body.

    Raises:
        MalformedInputError: If *raw* is not a JSON object of strings.
    """
    try:
        data = json.loads(raw)
    except (ValueError, TypeError) as exc:
        raise MalformedInputError(f"Request body is not valid JSON: {exc}") from exc
    return PaymentSessionRequest.from_json(data)


def handle_zuora_error(exc: ZuoraError):
    """Log *exc* and answer with the stock 500 page."""
    logger.opt(exception=exc).error("Request failed: {}", exc)
    return InternalServerError()


def create_blueprint(ext: "FlaskZuora") -> Blueprint:
    """Return a Blueprint pre-configured with the extension instance."""

    bp = Blueprint("zuora", __name__)
    bp.register_error_handler(ZuoraError, handle_zuora_error)

    # ------------------------------------------------------------------
    # Publishable configuration for the payment form
    # ------------------------------------------------------------------

    @bp.route("/config", methods=["GET"])
    def config():
        """Return the publishable key and profile the frontend needs."""
        return jsonify(ext.public_config())

    # ------------------------------------------------------------------
    # Payment session
    # ------------------------------------------------------------------

    @bp.route("/create-payment-session", methods=["POST"])
    def create_payment_session():
        """Create a Zuora account and a payment session for it.

        Accepts a JSON object with string fields ``firstName``, ``lastName``,
        ``address``, ``city``, ``state``, ``zip``, ``country``, ``email``,
        ``currency`` and ``paymentMethodType``. Responds with the session
        token as a bare JSON string.
        """
        session_request = parse_session_request(request.get_data())
        token = ext.create_payment_session(session_request)
        return jsonify(token)

    return bp
