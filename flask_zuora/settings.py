"""Layered configuration loading.

Values are looked up in an ordered list of sources and the first non-empty
value wins::

    real environment  >  .env file  >  hard-coded defaults

The process environment is only read, never written. Values coming from the
``.env`` file are kept in their own source instead of being injected into
``os.environ``.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import dotenv_values
from loguru import logger

from flask_zuora.exceptions import StartupConfigError
from flask_zuora.models import Settings, ZuoraEnv

REQUIRED_KEYS = (
    "CLIENT_ID",
    "CLIENT_SECRET",
    "ZUORA_ENV",
    "ORG_IDS",
    "PAYMENT_GATEWAY_ID",
    "PUBLISHABLE_KEY",
    "PROFILE_ID",
)

DEFAULT_ORG_IDS = "817afbb4-2a9a-4d83-bf35-5eeb3b6a6b25"
DEFAULT_PROFILE_ID = "PF-00000002"


class EnvironSource:
    """Values from the real process environment."""

    name = "environment"

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def get(self, key: str) -> str | None:
        return self._environ.get(key)


class DotenvSource:
    """Values from a ``KEY=VALUE`` file.

    Blank lines and ``#`` comments are skipped and one layer of matching
    quotes is stripped from values. ``${VAR}`` references are kept as
    written. A missing or unreadable file contributes nothing.
    """

    name = "dotenv"

    def __init__(self, path: str | os.PathLike = ".env") -> None:
        self.path = Path(path)
        self._values: dict[str, str | None] = {}
        if self.path.is_file():
            try:
                self._values = dotenv_values(self.path, encoding="utf-8", interpolate=False)
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Could not load {} file: {}", self.path, exc)

    def get(self, key: str) -> str | None:
        return self._values.get(key)


class DefaultsSource:
    """Hard-coded fallbacks, consulted last."""

    name = "defaults"

    def __init__(self, defaults: Mapping[str, str]) -> None:
        self._defaults = dict(defaults)

    def get(self, key: str) -> str | None:
        return self._defaults.get(key)


class LayeredConfig:
    """Query *sources* in order; the first non-blank value wins."""

    def __init__(self, sources) -> None:
        self.sources = list(sources)

    def get(self, key: str, default: str | None = None) -> str | None:
        for source in self.sources:
            value = source.get(key)
            if value is not None and value.strip():
                return value
        return default

    def source_of(self, key: str) -> str | None:
        """Return the name of the source that supplies *key*, if any."""
        for source in self.sources:
            value = source.get(key)
            if value is not None and value.strip():
                return source.name
        return None

    def missing(self, keys) -> list[str]:
        return [key for key in keys if self.get(key) is None]


def load_settings(
    environ: Mapping[str, str] | None = None,
    dotenv_path: str | os.PathLike = ".env",
) -> Settings:
    """Resolve, validate and return the server configuration.

    Raises:
        StartupConfigError: If a required key is missing or blank, or if
            ``ZUORA_ENV`` names an unsupported environment.
    """
    sources = [EnvironSource(environ), DotenvSource(dotenv_path)]

    # Defaults must not satisfy the required-key check.
    missing = LayeredConfig(sources).missing(REQUIRED_KEYS)
    if missing:
        raise StartupConfigError(missing=missing)

    config = LayeredConfig(
        sources
        + [DefaultsSource({"ORG_IDS": DEFAULT_ORG_IDS, "PROFILE_ID": DEFAULT_PROFILE_ID})]
    )
    environment = ZuoraEnv.parse(config.get("ZUORA_ENV"))

    if config.source_of("ORG_IDS") == DefaultsSource.name:
        logger.warning("ORG_IDS not set in environment; using default org id")

    return Settings(
        client_id=config.get("CLIENT_ID"),
        client_secret=config.get("CLIENT_SECRET"),
        environment=environment,
        org_ids=config.get("ORG_IDS"),
        payment_gateway_id=config.get("PAYMENT_GATEWAY_ID", ""),
        publishable_key=config.get("PUBLISHABLE_KEY", ""),
        profile_id=config.get("PROFILE_ID"),
    )
