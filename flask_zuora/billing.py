"""Thin client for the parts of the Zuora REST API the server needs.

Usage::

    from flask_zuora.billing import ZuoraClient
    from flask_zuora.models import PaymentSessionRequest, ZuoraEnv

    client = ZuoraClient("client-id", "client-secret", ZuoraEnv.CSBX)
    client.set_org_ids("817afbb4-...")
    client.initialize()

    account = client.create_account(PaymentSessionRequest(first_name="Ada"))
    session = client.create_payment_session(account.account_id, "USD", "8a8a...")
    session.token

One instance is shared by all request threads. Per-request data only ever
travels in arguments; the bearer token is the one piece of state refreshed
after startup and is guarded by a lock.
"""

from __future__ import annotations

import json
import threading
import time
from typing import Any

import requests
from loguru import logger

from flask_zuora.exceptions import RemoteAPIError
from flask_zuora.models import (
    AccountCreationResult,
    PaymentSessionRequest,
    PaymentSessionResult,
    ZuoraEnv,
)

# Nominal amount for a session that only stores the payment method.
SESSION_AMOUNT = 0.01

# Refresh the bearer token this many seconds before Zuora expires it.
TOKEN_EXPIRY_MARGIN = 60


class ZuoraClient:
    """Synchronous Zuora REST client.

    Args:
        client_id: OAuth client id.
        client_secret: OAuth client secret.
        env: The Zuora environment to call.
        session: Optional :class:`requests.Session` (tests inject a fake).
        timeout: Per-request timeout passed to *requests*; ``None`` waits
            forever.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        env: ZuoraEnv,
        *,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.env = env
        self.timeout = timeout
        self._session = session if session is not None else requests.Session()
        self._org_ids: str | None = None
        self._debugging = False
        self._access_token: str | None = None
        self._token_expires_at = 0.0
        self._token_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    @property
    def base_url(self) -> str:
        return self.env.base_url

    @property
    def org_ids(self) -> str | None:
        return self._org_ids

    @property
    def debugging(self) -> bool:
        return self._debugging

    def set_org_ids(self, org_ids: str) -> None:
        """Send *org_ids* in the ``Zuora-Org-Ids`` header of every call."""
        self._org_ids = org_ids

    def set_debugging(self, debugging: bool) -> None:
        """Log request and response bodies at debug level when *debugging*."""
        self._debugging = bool(debugging)

    def initialize(self) -> None:
        """Exchange the client credentials for a bearer token.

        Raises:
            RemoteAPIError: If Zuora refuses the credentials.
        """
        with self._token_lock:
            self._fetch_token()

    def _fetch_token(self) -> None:
        url = f"{self.base_url}/oauth/token"
        try:
            resp = self._session.post(
                url,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "grant_type": "client_credentials",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise RemoteAPIError(f"OAuth token request failed: {exc}") from exc

        body = _decode(resp)
        if resp.status_code >= 400 or "access_token" not in body:
            raise RemoteAPIError(
                "OAuth token request rejected",
                status_code=resp.status_code,
                reasons=_reasons(body),
            )
        self._access_token = body["access_token"]
        self._token_expires_at = time.monotonic() + float(body.get("expires_in", 3600))
        logger.info("Obtained Zuora access token for {}", self.env.name)

    def _bearer_token(self) -> str:
        with self._token_lock:
            if (
                self._access_token is None
                or time.monotonic() >= self._token_expires_at - TOKEN_EXPIRY_MARGIN
            ):
                self._fetch_token()
            return self._access_token

    # ------------------------------------------------------------------
    # Remote operations
    # ------------------------------------------------------------------

    def create_account(self, request: PaymentSessionRequest) -> AccountCreationResult:
        """Create a billing account for the customer in *request*.

        Raises:
            RemoteAPIError: If Zuora rejects the account.
        """
        body = self._post("/v1/accounts", request.to_account_payload())
        account_id = body.get("accountId")
        if not account_id:
            raise RemoteAPIError("Account creation returned no accountId", reasons=_reasons(body))
        logger.info("Created Zuora account {}", account_id)
        return AccountCreationResult(
            account_id=account_id,
            account_number=body.get("accountNumber"),
            raw=body,
        )

    def create_payment_session(
        self,
        account_id: str,
        currency: str | None,
        gateway_id: str | None = None,
    ) -> PaymentSessionResult:
        """Create a payment session that stores a payment method on *account_id*.

        The session never charges: the amount is nominal and
        ``processPayment`` is off. *gateway_id* overrides the default gateway
        when it is not blank.

        Raises:
            RemoteAPIError: If Zuora rejects the session.
        """
        payload: dict[str, Any] = {
            "accountId": account_id,
            "currency": currency,
            "amount": SESSION_AMOUNT,
            "processPayment": False,
            "storePaymentMethod": True,
        }
        if gateway_id and gateway_id.strip():
            payload["paymentGateway"] = gateway_id

        body = self._post("/web-payments/sessions", payload)
        token = body.get("token")
        if not token:
            raise RemoteAPIError("Payment session returned no token", reasons=_reasons(body))
        return PaymentSessionResult(token=token, raw=body)

    def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        headers = {
            "Authorization": f"Bearer {self._bearer_token()}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self._org_ids:
            headers["Zuora-Org-Ids"] = self._org_ids

        if self._debugging:
            logger.debug("POST {} {}", url, json.dumps(payload))
        try:
            resp = self._session.post(url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RemoteAPIError(f"POST {path} failed: {exc}") from exc

        body = _decode(resp)
        if self._debugging:
            logger.debug("{} {} -> {}", path, resp.status_code, json.dumps(body))

        if resp.status_code >= 400 or body.get("success") is False:
            raise RemoteAPIError(
                f"POST {path} rejected by Zuora",
                status_code=resp.status_code,
                reasons=_reasons(body),
            )
        return body


def _decode(resp) -> dict[str, Any]:
    """Return the JSON object in *resp*, or an empty dict."""
    try:
        body = resp.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _reasons(body: dict[str, Any]) -> list[dict]:
    reasons = body.get("reasons")
    if isinstance(reasons, list):
        return [r for r in reasons if isinstance(r, dict)]
    # OAuth errors use a different shape.
    if "error" in body:
        return [{"code": body.get("error"), "message": body.get("error_description", "")}]
    return []
