"""
HTTP client helpers for the Paga business REST API.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

import requests

from .config import PagaConfig
from .errors import BusinessError, ProtocolError, TransportError
from .signing import Operation, SignedEnvelope, SignedRequestBuilder

__all__ = [
    "Bank",
    "OperationResult",
    "PagaClient",
    "post_envelope",
]


def _post_json(
    session: requests.Session,
    url: str,
    body: Dict[str, Any],
    headers: Dict[str, str],
    timeout: float,
) -> Dict[str, Any]:
    try:
        response = session.post(url, json=body, headers=headers, timeout=timeout)
    except requests.RequestException as exc:
        raise TransportError(f"Request to {url} failed: {exc}") from exc

    if not 200 <= response.status_code < 300:
        raise ProtocolError(
            f"Paga responded with {response.status_code}: {response.text}",
            status_code=response.status_code,
            payload=response.text,
        )
    try:
        payload = response.json()
    except (json.JSONDecodeError, ValueError) as exc:
        raise ProtocolError(
            f"Failed to parse JSON from Paga at {url}: {response.text}",
            status_code=response.status_code,
            payload=response.text,
        ) from exc

    if not isinstance(payload, dict):
        raise ProtocolError(
            f"Expected a JSON object from Paga at {url}, got {type(payload).__name__}",
            status_code=response.status_code,
            payload=payload,
        )
    return payload


@dataclass(frozen=True)
class Bank:
    name: Optional[str]
    uuid: Optional[str]


@dataclass(frozen=True)
class OperationResult:
    """
    Decoded provider response. ``raw`` is the payload exactly as received.
    """

    operation: Operation
    reference_number: str
    response_code: int
    message: Optional[str]
    raw: Dict[str, Any]

    @classmethod
    def from_response(
        cls,
        operation: Operation,
        reference_number: str,
        payload: Dict[str, Any],
    ) -> "OperationResult":
        code = payload.get("responseCode")
        if isinstance(code, bool) or code is None:
            raise ProtocolError(
                f"{operation.value} response has no usable responseCode",
                payload=payload,
            )
        try:
            response_code = int(code)
        except (TypeError, ValueError) as exc:
            raise ProtocolError(
                f"{operation.value} response has a non-integer responseCode: {code!r}",
                payload=payload,
            ) from exc
        return cls(
            operation=operation,
            reference_number=reference_number,
            response_code=response_code,
            message=payload.get("message"),
            raw=payload,
        )

    @property
    def succeeded(self) -> bool:
        return self.response_code == 0

    def raise_for_code(self) -> "OperationResult":
        if not self.succeeded:
            raise BusinessError(
                self.operation.value,
                self.response_code,
                self.message,
                payload=self.raw,
            )
        return self

    @property
    def total_balance(self) -> Any:
        return self.raw.get("totalBalance")

    @property
    def available_balance(self) -> Any:
        return self.raw.get("availableBalance")

    @property
    def currency(self) -> Optional[str]:
        return self.raw.get("currency")

    @property
    def balance_datetime_utc(self) -> Optional[str]:
        return self.raw.get("balanceDateTimeUTC")

    @property
    def sources(self) -> Any:
        return self.raw.get("sources")

    @property
    def banks(self) -> List[Bank]:
        return [
            Bank(name=entry.get("name"), uuid=entry.get("uuid"))
            for entry in self.raw.get("banks") or []
            if isinstance(entry, dict)
        ]


def post_envelope(
    session: requests.Session,
    config: PagaConfig,
    envelope: SignedEnvelope,
) -> OperationResult:
    url = f"{config.base_url}{envelope.url_path}"
    logging.info(
        "Calling %s (reference %s) at %s",
        envelope.operation.value,
        envelope.reference_number,
        url,
    )
    logging.debug("Request hash %s...", envelope.signature[:20])
    payload = _post_json(
        session, url, envelope.body, envelope.headers, config.timeout_seconds
    )
    result = OperationResult.from_response(
        envelope.operation, envelope.reference_number, payload
    )
    logging.info(
        "%s returned code %s: %s",
        envelope.operation.value,
        result.response_code,
        result.message,
    )
    return result


class PagaClient:
    """
    Thin wrapper around the secured business endpoints.

    Non-zero response codes are returned to the caller unless ``check=True``,
    in which case they raise :class:`BusinessError`.
    """

    def __init__(
        self,
        config: PagaConfig,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.builder = SignedRequestBuilder(config)
        self.session = session or requests.Session()

    def build(
        self,
        operation: Union[Operation, str],
        fields: Optional[Mapping[str, Any]] = None,
        *,
        reference_number: Optional[str] = None,
    ) -> SignedEnvelope:
        return self.builder.build(operation, fields, reference_number=reference_number)

    def send(self, envelope: SignedEnvelope, *, check: bool = False) -> OperationResult:
        result = post_envelope(self.session, self.config, envelope)
        if check:
            result.raise_for_code()
        return result

    def call(
        self,
        operation: Union[Operation, str],
        fields: Optional[Mapping[str, Any]] = None,
        *,
        check: bool = False,
    ) -> OperationResult:
        return self.send(self.build(operation, fields), check=check)

    def account_balance(
        self,
        *,
        account_principal: str = "",
        account_credentials: str = "",
        source_of_funds: Optional[str] = None,
        locale: Optional[str] = None,
        check: bool = False,
    ) -> OperationResult:
        if source_of_funds is None:
            source_of_funds = self.config.source_of_funds
        fields = {
            "accountPrincipal": account_principal,
            "sourceOfFunds": source_of_funds,
            "accountCredentials": account_credentials,
            "locale": locale,
        }
        return self.call(Operation.ACCOUNT_BALANCE, fields, check=check)

    def get_funding_sources(
        self,
        *,
        account_principal: str = "",
        account_credentials: str = "",
        locale: Optional[str] = None,
        check: bool = False,
    ) -> OperationResult:
        fields = {
            "accountPrincipal": account_principal,
            "accountCredentials": account_credentials,
            "locale": locale,
        }
        return self.call(Operation.GET_FUNDING_SOURCES, fields, check=check)

    def get_banks(
        self,
        *,
        locale: Optional[str] = None,
        check: bool = False,
    ) -> OperationResult:
        return self.call(Operation.GET_BANKS, {"locale": locale}, check=check)
