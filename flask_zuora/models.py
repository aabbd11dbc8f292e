"""Value objects passed between the config loader, the views and Zuora.

Nothing here is persisted; every request builds fresh instances and drops
them once the response is written.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from flask_zuora.exceptions import MalformedInputError, StartupConfigError


class ZuoraEnv(enum.Enum):
    """Zuora environments the server can talk to."""

    CSBX = "https://rest.test.zuora.com"

    @property
    def base_url(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> "ZuoraEnv":
        """Return the member named *name* (case-insensitive).

        Raises:
            StartupConfigError: If *name* is not a supported environment.
        """
        try:
            return cls[name.upper()]
        except KeyError:
            raise StartupConfigError(
                f"Unsupported ZUORA_ENV: {name}. Only 'CSBX' is supported."
            ) from None


@dataclass(frozen=True)
class Settings:
    """Validated process configuration."""

    client_id: str
    client_secret: str
    environment: ZuoraEnv
    org_ids: str
    payment_gateway_id: str
    publishable_key: str
    profile_id: str


# JSON field name -> PaymentSessionRequest attribute
_REQUEST_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "address": "address",
    "city": "city",
    "state": "state",
    "zip": "zip",
    "country": "country",
    "email": "email",
    "currency": "currency",
    "paymentMethodType": "payment_method_type",
}


@dataclass
class PaymentSessionRequest:
    """Inbound body of ``POST /create-payment-session``.

    Every field is optional. Absent fields stay ``None`` and are forwarded to
    Zuora as-is; no validation happens here.
    """

    first_name: str | None = None
    last_name: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None
    email: str | None = None
    currency: str | None = None
    payment_method_type: str | None = None

    @classmethod
    def from_json(cls, data: Any) -> "PaymentSessionRequest":
        """Build a request from a decoded JSON body.

        Unknown keys are ignored.

        Raises:
            MalformedInputError: If *data* is not an object, or a known field
                holds something other than a string or ``null``.
        """
        if not isinstance(data, dict):
            raise MalformedInputError(
                f"Expected a JSON object, got {type(data).__name__}"
            )
        kwargs: dict[str, str | None] = {}
        for json_name, attr in _REQUEST_FIELDS.items():
            value = data.get(json_name)
            if value is not None and not isinstance(value, str):
                raise MalformedInputError(
                    f"Field {json_name!r} must be a string, got {type(value).__name__}"
                )
            kwargs[attr] = value
        return cls(**kwargs)

    @property
    def name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def to_account_payload(self) -> dict[str, Any]:
        """Return the body of a Zuora ``POST /v1/accounts`` call."""
        contact = {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "address1": self.address,
            "city": self.city,
            "state": self.state,
            "zipCode": self.zip,
            "workEmail": self.email,
            "country": self.country,
        }
        payload: dict[str, Any] = {
            "name": self.name,
            "billToContact": {k: v for k, v in contact.items() if v is not None},
            "billCycleDay": 0,
            "soldToSameAsBillTo": True,
            "autoPay": False,
        }
        if self.currency is not None:
            payload["currency"] = self.currency
        return payload


@dataclass
class AccountCreationResult:
    account_id: str
    account_number: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class PaymentSessionResult:
    token: str
    raw: dict[str, Any] = field(default_factory=dict, repr=False)
