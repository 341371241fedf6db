"""Shared fixtures: fixture credentials and a fake requests session."""

from unittest.mock import MagicMock

import pytest

from paga_payments import PagaClient, PagaConfig


def make_response(payload=None, status_code=200, text=None):
    response = MagicMock()
    response.status_code = status_code
    response.text = text if text is not None else str(payload)
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def config():
    return PagaConfig(
        base_url="https://beta.mypaga.com",
        principal="principal-123",
        secret="secret-456",
        hash_key="hash-key-789",
    )


@pytest.fixture
def session():
    session = MagicMock()
    session.post.return_value = make_response({"responseCode": 0, "message": "ok"})
    return session


@pytest.fixture
def client(config, session):
    return PagaClient(config, session=session)


@pytest.fixture
def clean_env(monkeypatch):
    for key in (
        "PAGA_BASE_URL",
        "PAGA_PRINCIPAL",
        "PAGA_CREDENTIALS",
        "PAGA_HASH_KEY",
        "PAGA_LOCALE",
        "PAGA_SOURCE_OF_FUNDS",
        "PAGA_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(key, raising=False)
