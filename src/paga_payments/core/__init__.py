"""
Core primitives for signing and sending Paga business API requests.
"""

from .client import Bank, OperationResult, PagaClient, post_envelope
from .config import PagaConfig, PagaParameters, load_paga_config
from .diagnostics import DiagnosticOutcome, DiagnosticReport, run_diagnostics
from .environment import PagaEnvironment, build_environment
from .errors import (
    BusinessError,
    ConfigurationError,
    InvalidOperation,
    MissingCredential,
    PagaError,
    ProtocolError,
    TransportError,
)
from .signing import (
    Operation,
    RECIPES,
    SignedEnvelope,
    SignedRequestBuilder,
    build_envelope,
    compute_signature,
    new_reference_number,
)

__all__ = [
    "Bank",
    "BusinessError",
    "ConfigurationError",
    "DiagnosticOutcome",
    "DiagnosticReport",
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
    "RECIPES",
    "SignedEnvelope",
    "SignedRequestBuilder",
    "TransportError",
    "build_envelope",
    "build_environment",
    "compute_signature",
    "load_paga_config",
    "new_reference_number",
    "post_envelope",
    "run_diagnostics",
]
