"""
Request signing for the Paga business REST API.

Each operation signs a fixed, ordered subset of its body fields followed by the
account hash key (SHA-512, lowercase hex). The recipes live in :data:`RECIPES`
and nowhere else.
"""

from __future__ import annotations

import enum
import hashlib
import secrets
import string
import time
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from .config import PagaConfig
from .errors import InvalidOperation, MissingCredential

__all__ = [
    "Operation",
    "RECIPES",
    "Recipe",
    "SignedEnvelope",
    "SignedRequestBuilder",
    "build_envelope",
    "compute_signature",
    "new_reference_number",
    "resolve_operation",
    "signature_input",
]

API_PATH = "/paga-webservices/business-rest/secured"

_SUFFIX_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH = 9


class Operation(str, enum.Enum):
    ACCOUNT_BALANCE = "accountBalance"
    GET_FUNDING_SOURCES = "getFundingSources"
    GET_BANKS = "getBanks"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Recipe:
    signature_fields: Tuple[str, ...]
    body_fields: Tuple[str, ...]
    reference_prefix: str


RECIPES: Mapping[Operation, Recipe] = {
    Operation.ACCOUNT_BALANCE: Recipe(
        signature_fields=("referenceNumber",),
        body_fields=(
            "referenceNumber",
            "accountPrincipal",
            "sourceOfFunds",
            "accountCredentials",
            "locale",
        ),
        reference_prefix="balance",
    ),
    Operation.GET_FUNDING_SOURCES: Recipe(
        signature_fields=("referenceNumber", "accountPrincipal", "accountCredentials"),
        body_fields=(
            "referenceNumber",
            "accountPrincipal",
            "accountCredentials",
            "locale",
        ),
        reference_prefix="funding-sources",
    ),
    Operation.GET_BANKS: Recipe(
        signature_fields=("referenceNumber",),
        body_fields=("referenceNumber", "locale"),
        reference_prefix="banks",
    ),
}


def new_reference_number(prefix: str = "paga-api") -> str:
    """
    Return ``<prefix>-<unix millis>-<9 random [0-9a-z] chars>``.
    """
    millis = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"{prefix}-{millis}-{suffix}"


def signature_input(hash_key: str, parts: Sequence[str]) -> str:
    return "".join(parts) + hash_key


def compute_signature(hash_key: str, parts: Sequence[str]) -> str:
    """SHA-512 hex digest of ``parts`` concatenated in order, then ``hash_key``."""
    data = signature_input(hash_key, parts).encode("utf-8")
    return hashlib.sha512(data).hexdigest()


def resolve_operation(operation: Union[Operation, str]) -> Operation:
    if isinstance(operation, Operation):
        return operation
    try:
        return Operation(operation)
    except ValueError as exc:
        known = ", ".join(op.value for op in Operation)
        raise InvalidOperation(
            f"Unknown operation '{operation}' (expected one of: {known})"
        ) from exc


@dataclass(frozen=True)
class SignedEnvelope:
    operation: Operation
    reference_number: str
    headers: Dict[str, str]
    body: Dict[str, str]
    signature: str
    signature_input: str

    @property
    def url_path(self) -> str:
        return f"{API_PATH}/{self.operation.value}"

    def __repr__(self) -> str:
        # signature_input ends with the hash key
        return (
            f"SignedEnvelope(operation={self.operation.value!r}, "
            f"reference_number={self.reference_number!r}, "
            f"signature={self.signature[:20]!r}...)"
        )


def _field_value(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def build_envelope(
    operation: Union[Operation, str],
    credentials: PagaConfig,
    reference_number: str,
    fields: Optional[Mapping[str, Any]] = None,
) -> SignedEnvelope:
    """
    Assemble the signed headers and body for ``operation``.

    Body fields the caller leaves out (or passes as ``None``) are sent as empty
    strings, except ``locale``, which falls back to the credentials' locale.
    An explicit ``""`` is always sent as-is. The signature is computed from the
    values that end up in the body.
    """
    op = resolve_operation(operation)
    recipe = RECIPES[op]
    credentials.ensure_complete()

    supplied = dict(fields or {})
    unknown = sorted(set(supplied) - set(recipe.body_fields))
    if unknown:
        raise InvalidOperation(
            f"{op.value} does not accept field(s): {', '.join(unknown)}"
        )

    supplied["referenceNumber"] = reference_number
    if supplied.get("locale") is None:
        supplied["locale"] = credentials.locale or "en"

    body = {name: _field_value(supplied.get(name)) for name in recipe.body_fields}
    parts = [body[name] for name in recipe.signature_fields]
    raw_input = signature_input(credentials.hash_key, parts)
    signature = compute_signature(credentials.hash_key, parts)

    headers = {
        "principal": credentials.principal,
        "credentials": credentials.secret,
        "hash": signature,
        "Content-Type": "application/json",
    }
    return SignedEnvelope(
        operation=op,
        reference_number=reference_number,
        headers=headers,
        body=body,
        signature=signature,
        signature_input=raw_input,
    )


class SignedRequestBuilder:
    """
    Builds envelopes for a single credential set, with a fresh reference
    number per request.
    """

    def __init__(self, credentials: PagaConfig) -> None:
        missing = credentials.missing_credentials()
        if missing:
            raise MissingCredential(missing)
        self.credentials = credentials

    def new_reference_number(self, operation: Union[Operation, str]) -> str:
        op = resolve_operation(operation)
        return new_reference_number(RECIPES[op].reference_prefix)

    def build(
        self,
        operation: Union[Operation, str],
        fields: Optional[Mapping[str, Any]] = None,
        *,
        reference_number: Optional[str] = None,
        prefix: Optional[str] = None,
    ) -> SignedEnvelope:
        op = resolve_operation(operation)
        if reference_number is None:
            reference_number = new_reference_number(
                prefix or RECIPES[op].reference_prefix
            )
        return build_envelope(op, self.credentials, reference_number, fields)
