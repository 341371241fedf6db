"""
Configuration objects and helpers for the Paga business API.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

from .environment import build_environment
from .errors import ConfigurationError, MissingCredential

__all__ = [
    "ConfigurationError",
    "MissingCredential",
    "PagaConfig",
    "PagaParameters",
    "REQUIRED_ENV_KEYS",
    "load_paga_config",
]

_PARAMETER_TO_ENV_KEY = {
    "base_url": "PAGA_BASE_URL",
    "principal": "PAGA_PRINCIPAL",
    "secret": "PAGA_CREDENTIALS",
    "hash_key": "PAGA_HASH_KEY",
    "locale": "PAGA_LOCALE",
    "source_of_funds": "PAGA_SOURCE_OF_FUNDS",
    "timeout_seconds": "PAGA_TIMEOUT_SECONDS",
}

REQUIRED_ENV_KEYS = (
    "PAGA_BASE_URL",
    "PAGA_PRINCIPAL",
    "PAGA_CREDENTIALS",
    "PAGA_HASH_KEY",
)

LIVE_HOSTS = frozenset({"www.mypaga.com", "mypaga.com"})
SANDBOX_HOSTS = frozenset({"beta.mypaga.com", "qa1.mypaga.com"})
SANDBOX_BASE_URL = "https://beta.mypaga.com"

_HIDDEN = "***HIDDEN***"


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class PagaParameters:
    """
    Explicit parameter bundle for constructing :class:`PagaConfig`.

    Callers can either instantiate this helper or pass the individual keyword
    arguments directly to :func:`load_paga_config`.
    """

    base_url: Optional[str] = None
    principal: Optional[str] = None
    secret: Optional[str] = None
    hash_key: Optional[str] = None
    locale: Optional[str] = None
    source_of_funds: Optional[str] = None
    timeout_seconds: Optional[int | str] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = _stringify(value)
        return overrides


def _collect_parameter_overrides(
    parameters: Optional[PagaParameters],
    explicit: Mapping[str, Any],
) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    if parameters is not None:
        overrides.update(parameters.as_overrides())

    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:
            raise TypeError(f"Unknown Paga parameter '{key}'") from exc
        overrides[env_key] = _stringify(value)
    return overrides


def _parse_timeout(raw: str) -> float:
    try:
        timeout = float(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"PAGA_TIMEOUT_SECONDS must be a number, got '{raw}'"
        ) from exc
    if not math.isfinite(timeout) or timeout <= 0:
        raise ConfigurationError(
            f"PAGA_TIMEOUT_SECONDS must be a positive finite number, got '{raw}'"
        )
    return timeout


@dataclass(frozen=True)
class PagaConfig:
    """
    Account credentials for one Paga business integration.

    ``secret`` and ``hash_key`` are excluded from ``repr`` so a config can be
    logged without leaking them.
    """

    base_url: str
    principal: str
    secret: str = field(repr=False)
    hash_key: str = field(repr=False)
    locale: str = "en"
    source_of_funds: str = ""
    timeout_seconds: float = 30.0

    def __post_init__(self) -> None:
        if self.base_url:
            object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    def missing_credentials(self) -> tuple:
        values = {
            "PAGA_BASE_URL": self.base_url,
            "PAGA_PRINCIPAL": self.principal,
            "PAGA_CREDENTIALS": self.secret,
            "PAGA_HASH_KEY": self.hash_key,
        }
        return tuple(key for key in REQUIRED_ENV_KEYS if not values[key])

    def ensure_complete(self) -> None:
        missing = self.missing_credentials()
        if missing:
            raise MissingCredential(missing)

    @property
    def environment_type(self) -> str:
        host = (urlparse(self.base_url).hostname or "").lower()
        if host in LIVE_HOSTS:
            return "live"
        if host in SANDBOX_HOSTS:
            return "sandbox"
        return "unknown"

    @property
    def is_live(self) -> bool:
        return self.environment_type == "live"

    def with_base_url(self, base_url: str) -> "PagaConfig":
        return replace(self, base_url=base_url)

    def describe(self) -> Dict[str, Any]:
        """Return a display-safe view of the configuration."""
        return {
            "base_url": self.base_url,
            "principal": self.principal,
            "credentials": _HIDDEN if self.secret else "NOT SET",
            "hash_key": _HIDDEN if self.hash_key else "NOT SET",
            "locale": self.locale,
            "source_of_funds": self.source_of_funds,
            "timeout_seconds": self.timeout_seconds,
            "environment": self.environment_type,
        }

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "PagaConfig":
        missing = [key for key in REQUIRED_ENV_KEYS if not (values.get(key) or "").strip()]
        if missing:
            raise MissingCredential(missing)

        base_url = values["PAGA_BASE_URL"].strip().rstrip("/")
        parsed = urlparse(base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError(
                f"PAGA_BASE_URL must be an http(s) URL, got '{base_url}'"
            )

        locale = (values.get("PAGA_LOCALE") or "").strip() or "en"
        source_of_funds = values.get("PAGA_SOURCE_OF_FUNDS", "")
        timeout_seconds = _parse_timeout(values.get("PAGA_TIMEOUT_SECONDS", "30"))

        return cls(
            base_url=base_url,
            principal=values["PAGA_PRINCIPAL"].strip(),
            secret=values["PAGA_CREDENTIALS"].strip(),
            hash_key=values["PAGA_HASH_KEY"].strip(),
            locale=locale,
            source_of_funds=source_of_funds,
            timeout_seconds=timeout_seconds,
        )

    @classmethod
    def from_env(
        cls,
        *,
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
    ) -> "PagaConfig":
        parameter_overrides = _collect_parameter_overrides(
            parameters,
            {
                "base_url": base_url,
                "principal": principal,
                "secret": secret,
                "hash_key": hash_key,
                "locale": locale,
                "source_of_funds": source_of_funds,
                "timeout_seconds": timeout_seconds,
            },
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment.variables)


def load_paga_config(
    *,
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
) -> PagaConfig:
    """
    Convenience wrapper that mirrors :meth:`PagaConfig.from_env`.

    Credentials can be provided through environment variables, a ``.env``
    file, keyword arguments, or any combination of the three.
    """
    return PagaConfig.from_env(
        env_file=env_file,
        overrides=overrides,
        base=base,
        parameters=parameters,
        base_url=base_url,
        principal=principal,
        secret=secret,
        hash_key=hash_key,
        locale=locale,
        source_of_funds=source_of_funds,
        timeout_seconds=timeout_seconds,
    )
