import hashlib
import re

import pytest

from paga_payments import (
    InvalidOperation,
    MissingCredential,
    Operation,
    PagaConfig,
    SignedRequestBuilder,
    build_envelope,
    compute_signature,
    new_reference_number,
)
from paga_payments.core import signing
from paga_payments.core.signing import RECIPES, signature_input


def test_compute_signature_matches_reference_sha512():
    expected = hashlib.sha512(b"balance-test-1700000000000abc").hexdigest()
    digest = compute_signature("abc", ["balance-test-1700000000000"])
    assert digest == expected
    assert len(digest) == 128
    assert digest == digest.lower()


def test_signature_input_appends_key_after_parts():
    assert signature_input("k", ["r1", "p", "c"]) == "r1pck"
    assert signature_input("k", []) == "k"


def test_reference_number_format():
    ref = new_reference_number("balance")
    assert ref.startswith("balance-")
    assert re.fullmatch(r"balance-\d{13,}-[0-9a-z]{9}", ref)


def test_reference_numbers_are_unique():
    refs = {new_reference_number("balance") for _ in range(10000)}
    assert len(refs) == 10000


def test_reference_number_default_prefix():
    assert new_reference_number().startswith("paga-api-")


def test_funding_sources_signs_reference_principal_credentials():
    cfg = PagaConfig(
        base_url="https://beta.mypaga.com",
        principal="biz",
        secret="pw",
        hash_key="k",
    )
    envelope = build_envelope(
        "getFundingSources",
        cfg,
        "r1",
        {"accountPrincipal": "p", "accountCredentials": "c"},
    )
    assert envelope.signature_input == "r1pck"
    assert envelope.signature == hashlib.sha512(b"r1pck").hexdigest()
    assert envelope.headers["hash"] == envelope.signature


def test_account_balance_body_order_and_empty_fields(config):
    envelope = build_envelope(Operation.ACCOUNT_BALANCE, config, "ref-1")
    assert list(envelope.body) == [
        "referenceNumber",
        "accountPrincipal",
        "sourceOfFunds",
        "accountCredentials",
        "locale",
    ]
    assert envelope.body == {
        "referenceNumber": "ref-1",
        "accountPrincipal": "",
        "sourceOfFunds": "",
        "accountCredentials": "",
        "locale": "en",
    }
    assert envelope.signature_input == "ref-1" + config.hash_key


def test_account_balance_signature_ignores_account_fields(config):
    plain = build_envelope("accountBalance", config, "ref-1")
    filled = build_envelope(
        "accountBalance",
        config,
        "ref-1",
        {"accountPrincipal": "a", "accountCredentials": "b", "sourceOfFunds": "PAGA"},
    )
    assert plain.signature == filled.signature
    assert filled.body["sourceOfFunds"] == "PAGA"


def test_get_banks_envelope(config):
    envelope = build_envelope("getBanks", config, "ref-2", {"locale": "fr"})
    assert envelope.body == {"referenceNumber": "ref-2", "locale": "fr"}
    assert envelope.url_path == "/paga-webservices/business-rest/secured/getBanks"


def test_headers(config):
    envelope = build_envelope("getBanks", config, "ref-3")
    assert envelope.headers == {
        "principal": "principal-123",
        "credentials": "secret-456",
        "hash": envelope.signature,
        "Content-Type": "application/json",
    }
    assert config.hash_key not in envelope.headers.values()
    assert config.hash_key not in repr(envelope)


@pytest.mark.parametrize("operation", list(RECIPES))
def test_every_operation_carries_all_body_fields(config, operation):
    envelope = build_envelope(operation, config, "ref-x")
    assert tuple(envelope.body) == RECIPES[operation].body_fields
    assert all(isinstance(value, str) for value in envelope.body.values())


def test_envelope_is_deterministic_for_same_reference(config):
    first = build_envelope("getFundingSources", config, "same", {"accountPrincipal": "p"})
    second = build_envelope("getFundingSources", config, "same", {"accountPrincipal": "p"})
    assert first.body == second.body
    assert first.headers == second.headers


def test_locale_falls_back_to_config_locale():
    cfg = PagaConfig(
        base_url="https://beta.mypaga.com",
        principal="p",
        secret="s",
        hash_key="k",
        locale="fr",
    )
    assert build_envelope("getBanks", cfg, "r").body["locale"] == "fr"
    assert build_envelope("getBanks", cfg, "r", {"locale": None}).body["locale"] == "fr"


def test_none_field_sent_as_empty_string(config):
    envelope = build_envelope(
        "getFundingSources", config, "r", {"accountPrincipal": None}
    )
    assert envelope.body["accountPrincipal"] == ""


def test_unknown_operation_fails_before_hashing(config, monkeypatch):
    def _boom(*args, **kwargs):
        raise AssertionError("hash must not be computed")

    monkeypatch.setattr(signing, "compute_signature", _boom)
    monkeypatch.setattr(signing, "signature_input", _boom)
    with pytest.raises(InvalidOperation):
        build_envelope("transferFunds", config, "r1")


def test_field_not_in_recipe_is_rejected(config):
    with pytest.raises(InvalidOperation):
        build_envelope("getBanks", config, "r1", {"accountPrincipal": "p"})


def test_missing_credentials_rejected():
    cfg = PagaConfig(base_url="https://beta.mypaga.com", principal="p", secret="", hash_key="")
    with pytest.raises(MissingCredential) as excinfo:
        build_envelope("getBanks", cfg, "r1")
    assert excinfo.value.missing == ("PAGA_CREDENTIALS", "PAGA_HASH_KEY")

    with pytest.raises(MissingCredential):
        SignedRequestBuilder(cfg)


def test_builder_generates_fresh_reference_numbers(config):
    builder = SignedRequestBuilder(config)
    first = builder.build("accountBalance")
    second = builder.build("accountBalance")
    assert first.reference_number.startswith("balance-")
    assert first.reference_number != second.reference_number
    assert first.signature != second.signature


def test_builder_uses_explicit_reference_and_prefix(config):
    builder = SignedRequestBuilder(config)
    assert builder.build("getBanks", reference_number="fixed").reference_number == "fixed"
    assert builder.build("getBanks", prefix="check").reference_number.startswith("check-")
    assert builder.new_reference_number("getFundingSources").startswith("funding-sources-")


def test_explicit_empty_locale_is_sent_as_empty(config):
    assert build_envelope("getBanks", config, "r", {"locale": ""}).body["locale"] == ""
    balance = build_envelope("accountBalance", config, "r", {"locale": ""})
    assert balance.body["locale"] == ""
