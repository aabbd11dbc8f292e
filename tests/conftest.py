"""Shared pytest fixtures for flask-zuora tests."""

import pytest

from flask_zuora.exceptions import RemoteAPIError
from flask_zuora.models import (
    AccountCreationResult,
    PaymentSessionResult,
    Settings,
    ZuoraEnv,
)
from flask_zuora.server import create_app


class FakeBilling:
    """Stand-in for ZuoraClient that records every call.

    *fail_on* names the method that raises :class:`RemoteAPIError`.
    """

    def __init__(self, account_id="A-1", token="tok_abc", fail_on=None):
        self.account_id = account_id
        self.token = token
        self.fail_on = fail_on
        self.calls = []

    def create_account(self, request):
        self.calls.append(("create_account", request))
        if self.fail_on == "create_account":
            raise RemoteAPIError("account rejected", status_code=400)
        return AccountCreationResult(account_id=self.account_id)

    def create_payment_session(self, account_id, currency, gateway_id):
        self.calls.append(("create_payment_session", account_id, currency, gateway_id))
        if self.fail_on == "create_payment_session":
            raise RemoteAPIError("session rejected", status_code=400)
        return PaymentSessionResult(token=self.token, raw={"token": self.token})


def make_settings(**overrides):
    values = {
        "client_id": "client-id",
        "client_secret": "client-secret",
        "environment": ZuoraEnv.CSBX,
        "org_ids": "org-1",
        "payment_gateway_id": "gw-configured",
        "publishable_key": "pk_test_123",
        "profile_id": "PF-1",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def billing():
    return FakeBilling()


@pytest.fixture
def public_dir(tmp_path):
    """A static folder with an index page and one asset."""
    folder = tmp_path / "public"
    folder.mkdir()
    (folder / "index.html").write_text("<h1>Checkout</h1>")
    (folder / "checkout.js").write_text("console.log('checkout');")
    return folder


@pytest.fixture
def app(settings, billing, public_dir):
    """Demo app wired to a FakeBilling client."""
    application = create_app(settings=settings, billing=billing, static_folder=public_dir)
    application.config["TESTING"] = True
    yield application


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def ext(app):
    """The FlaskZuora extension instance."""
    return app.extensions["zuora"]
