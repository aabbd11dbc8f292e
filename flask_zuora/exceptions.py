"""Exceptions raised by flask_zuora."""

from __future__ import annotations


class ZuoraError(Exception):
    """Base class for every error raised by this package."""


class StartupConfigError(ZuoraError):
    """Configuration is incomplete or invalid; the server must not start."""

    def __init__(self, message: str | None = None, *, missing: list[str] | None = None) -> None:
        self.missing: list[str] = list(missing or [])
        if message is None:
            message = "Missing required configuration variables: " + ", ".join(self.missing)
        super().__init__(message)


class RemoteAPIError(ZuoraError):
    """Zuora rejected a request, or the request never reached it.

    Attributes:
        status_code: HTTP status of the response, ``None`` for network failures.
        reasons: The ``reasons`` list from the Zuora error body (``code`` /
            ``message`` dicts), empty when the body carried none.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        reasons: list[dict] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reasons: list[dict] = list(reasons or [])

    def __str__(self) -> str:
        text = super().__str__()
        if self.reasons:
            details = "; ".join(
                f"{r.get('code', '?')}: {r.get('message', '')}" for r in self.reasons
            )
            text = f"{text} ({details})"
        return text


class MalformedInputError(ZuoraError):
    """The request body is not a flat JSON object of strings."""
