"""Standalone demo server: static checkout page plus the Zuora routes.

Run with::

    flask-zuora-server

or::

    python -m flask_zuora.server

Configuration comes from the environment, optionally completed by a
``.env`` file in the working directory (real environment variables win)::

    CLIENT_ID=...
    CLIENT_SECRET=...
    ZUORA_ENV=CSBX
    ORG_IDS=...
    PAYMENT_GATEWAY_ID=...
    PUBLISHABLE_KEY=...
    PROFILE_ID=...

Then open http://localhost:8888/ in a browser, or use curl::

    curl http://localhost:8888/config

    curl -X POST http://localhost:8888/create-payment-session \\
         -H "Content-Type: application/json" \\
         -d '{"firstName": "John", "lastName": "Doe", "currency": "USD"}'
"""

from __future__ import annotations

import sys
from pathlib import Path

from flask import Flask
from loguru import logger

from flask_zuora import FlaskZuora
from flask_zuora.exceptions import StartupConfigError
from flask_zuora.settings import load_settings

PORT = 8888
PUBLIC_DIR = "public"


def create_app(settings=None, billing=None, static_folder=None) -> Flask:
    """Build the demo application.

    *static_folder* defaults to ``public/`` under the current working
    directory. Its files are served at the root of the URL space.
    """
    if static_folder is None:
        static_folder = Path(PUBLIC_DIR).resolve()

    app = Flask(__name__, static_folder=str(static_folder), static_url_path="")
    FlaskZuora(app, settings=settings, billing=billing)

    @app.route("/")
    def index():
        return app.send_static_file("index.html")

    return app


def main() -> None:
    """Load configuration, connect to Zuora and serve on :data:`PORT`."""
    try:
        settings = load_settings()
    except StartupConfigError as exc:
        print(exc, file=sys.stderr)
        if exc.missing:
            print(
                "Please provide them via environment variables or a .env file. Aborting startup.",
                file=sys.stderr,
            )
        sys.exit(1)

    app = create_app(settings)
    logger.info("Serving on port {} ({})", PORT, settings.environment.name)
    app.run(host="0.0.0.0", port=PORT, threaded=True)


if __name__ == "__main__":
    main()
