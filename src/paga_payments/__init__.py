"""
Public facade for the Paga business API helper package.

Re-exports the pieces integrators need so they can
``from paga_payments import ...`` without navigating the package.
"""

from .api import check_balance, create_paga_client, get_banks, get_funding_sources
from .core import (
    Bank,
    BusinessError,
    ConfigurationError,
    InvalidOperation,
    MissingCredential,
    Operation,
    OperationResult,
    PagaClient,
    PagaConfig,
    PagaEnvironment,
    PagaError,
    PagaParameters,
    ProtocolError,
    SignedEnvelope,
    SignedRequestBuilder,
    TransportError,
    build_envelope,
    build_environment,
    compute_signature,
    load_paga_config,
    new_reference_number,
    run_diagnostics,
)

__all__ = (
    "Bank",
    "BusinessError",
    "ConfigurationError",
    "InvalidOperation",
    "MissingCredential",
    "Operation",
    "OperationResult",
    "PagaClient",
    "PagaConfig",
    "PagaEnvironment",
    "PagaError",
    "PagaParameters",
    "ProtocolError",
    "SignedEnvelope",
    "SignedRequestBuilder",
    "TransportError",
    "build_envelope",
    "build_environment",
    "check_balance",
    "compute_signature",
    "create_paga_client",
    "get_banks",
    "get_funding_sources",
    "load_paga_config",
    "new_reference_number",
    "run_diagnostics",
)
