"""
Public, high-level helpers for calling the Paga business API.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import requests

from .core.client import OperationResult, PagaClient
from .core.config import PagaConfig, PagaParameters, load_paga_config

__all__ = [
    "check_balance",
    "create_paga_client",
    "get_banks",
    "get_funding_sources",
]


def _resolve_config(
    config: Optional[PagaConfig],
    *,
    env_file: Optional[str],
    overrides: Optional[Mapping[str, str]],
    base: Optional[Mapping[str, str]],
    parameters: Optional[PagaParameters],
    params: Dict[str, Any],
) -> PagaConfig:
    if config is not None:
        extras = (overrides, base, parameters, *params.values())
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built PagaConfig or individual parameters, not both."
            )
        return config
    return load_paga_config(
        env_file=env_file,
        overrides=overrides,
        base=base,
        parameters=parameters,
        **params,
    )


def create_paga_client(
    *,
    config: Optional[PagaConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[PagaParameters] = None,
    base_url: Optional[str] = None,
    principal: Optional[str] = None,
    secret: Optional[str] = None,
    hash_key: Optional[str] = None,
    locale: Optional[str] = None,
    source_of_funds: Optional[str] = None,
    timeout_seconds: Optional[int | str] = None,
) -> PagaClient:
    """
    Construct a :class:`PagaClient`.

    Callers can either supply a ready-made :class:`PagaConfig` or let the
    helper assemble one from environment data.
    """
    cfg = _resolve_config(
        config,
        env_file=env_file,
        overrides=overrides,
        base=base,
        parameters=parameters,
        params={
            "base_url": base_url,
            "principal": principal,
            "secret": secret,
            "hash_key": hash_key,
            "locale": locale,
            "source_of_funds": source_of_funds,
            "timeout_seconds": timeout_seconds,
        },
    )
    return PagaClient(cfg, session=session)


def check_balance(
    *,
    config: Optional[PagaConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    account_principal: str = "",
    account_credentials: str = "",
    source_of_funds: Optional[str] = None,
    locale: Optional[str] = None,
    check: bool = False,
) -> OperationResult:
    """One ``accountBalance`` round trip."""
    client = create_paga_client(config=config, session=session, env_file=env_file)
    return client.account_balance(
        account_principal=account_principal,
        account_credentials=account_credentials,
        source_of_funds=source_of_funds,
        locale=locale,
        check=check,
    )


def get_funding_sources(
    *,
    config: Optional[PagaConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    account_principal: str = "",
    account_credentials: str = "",
    locale: Optional[str] = None,
    check: bool = False,
) -> OperationResult:
    client = create_paga_client(config=config, session=session, env_file=env_file)
    return client.get_funding_sources(
        account_principal=account_principal,
        account_credentials=account_credentials,
        locale=locale,
        check=check,
    )


def get_banks(
    *,
    config: Optional[PagaConfig] = None,
    session: Optional[requests.Session] = None,
    env_file: Optional[str] = ".env",
    locale: Optional[str] = None,
    check: bool = False,
) -> OperationResult:
    client = create_paga_client(config=config, session=session, env_file=env_file)
    return client.get_banks(locale=locale, check=check)
