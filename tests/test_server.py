"""Tests for the standalone server entry point."""

import pytest
from flask import Flask

from flask_zuora import ZuoraClient
from flask_zuora.server import PORT, create_app, main
from flask_zuora.settings import REQUIRED_KEYS

FULL_ENV = {
    "CLIENT_ID": "client-id",
    "CLIENT_SECRET": "client-secret",
    "ZUORA_ENV": "csbx",
    "ORG_IDS": "org-1",
    "PAYMENT_GATEWAY_ID": "gw-1",
    "PUBLISHABLE_KEY": "pk_test_123",
    "PROFILE_ID": "PF-1",
}


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    """Empty working directory and no Zuora variables in the environment."""
    monkeypatch.chdir(tmp_path)
    for key in REQUIRED_KEYS:
        monkeypatch.delenv(key, raising=False)
    return tmp_path


@pytest.fixture
def run_calls(monkeypatch):
    """Record Flask.run calls instead of binding a port."""
    calls = []
    monkeypatch.setattr(Flask, "run", lambda self, **kwargs: calls.append(kwargs))
    return calls


@pytest.fixture
def no_zuora_handshake(monkeypatch):
    monkeypatch.setattr(ZuoraClient, "initialize", lambda self: None)


def test_port_is_fixed():
    assert PORT == 8888


def test_main_serves_with_valid_config(clean_env, monkeypatch, run_calls, no_zuora_handshake):
    for key, value in FULL_ENV.items():
        monkeypatch.setenv(key, value)

    main()

    assert len(run_calls) == 1
    assert run_calls[0]["port"] == 8888


@pytest.mark.parametrize("key", REQUIRED_KEYS)
def test_main_exits_when_key_missing(clean_env, monkeypatch, run_calls, capsys, key):
    for name, value in FULL_ENV.items():
        if name != key:
            monkeypatch.setenv(name, value)

    with pytest.raises(SystemExit) as info:
        main()

    assert info.value.code == 1
    assert run_calls == []
    err = capsys.readouterr().err
    assert key in err
    assert "Aborting startup" in err


def test_main_exits_on_unsupported_environment(clean_env, monkeypatch, run_calls, capsys):
    for key, value in FULL_ENV.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setenv("ZUORA_ENV", "PROD")

    with pytest.raises(SystemExit) as info:
        main()

    assert info.value.code == 1
    assert run_calls == []
    assert "Unsupported ZUORA_ENV: PROD" in capsys.readouterr().err


def test_main_reads_dotenv(clean_env, monkeypatch, run_calls, no_zuora_handshake):
    (clean_env / ".env").write_text(
        "\n".join(f"{key}={value}" for key, value in FULL_ENV.items()) + "\n"
    )

    main()

    assert len(run_calls) == 1


def test_env_wins_over_dotenv_at_startup(clean_env, monkeypatch, run_calls):
    (clean_env / ".env").write_text(
        "\n".join(f"{key}={value}" for key, value in FULL_ENV.items()) + "\n"
    )
    monkeypatch.setenv("CLIENT_ID", "from-env")
    built = []
    monkeypatch.setattr(ZuoraClient, "initialize", lambda self: built.append(self))

    main()

    assert built[0].client_id == "from-env"


def test_create_app_defaults_to_public_dir(clean_env, settings, billing):
    public = clean_env / "public"
    public.mkdir()
    (public / "index.html").write_text("hello")

    app = create_app(settings=settings, billing=billing)

    assert app.static_folder == str(public.resolve())
    assert app.test_client().get("/").data == b"hello"
