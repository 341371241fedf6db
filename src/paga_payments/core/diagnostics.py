"""
Connectivity checks that try a few known-good request shapes in turn.

Useful when an account is freshly provisioned and it is unclear whether a
rejection comes from signing or from account setup.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from .client import OperationResult, PagaClient
from .config import SANDBOX_BASE_URL
from .errors import PagaError

__all__ = [
    "Attempt",
    "DiagnosticOutcome",
    "DiagnosticReport",
    "default_attempts",
    "run_diagnostics",
]

Attempt = Tuple[str, Callable[[], OperationResult]]


@dataclass(frozen=True)
class DiagnosticOutcome:
    name: str
    result: Optional[OperationResult] = None
    error: Optional[PagaError] = None

    @property
    def succeeded(self) -> bool:
        return self.result is not None and self.result.succeeded


@dataclass
class DiagnosticReport:
    outcomes: List[DiagnosticOutcome] = field(default_factory=list)

    @property
    def successful(self) -> List[str]:
        return [outcome.name for outcome in self.outcomes if outcome.succeeded]

    @property
    def any_succeeded(self) -> bool:
        return bool(self.successful)


def default_attempts(client: PagaClient, *, include_sandbox: bool = True) -> List[Attempt]:
    config = client.config
    attempts: List[Attempt] = [
        ("Balance with empty account fields", client.account_balance),
        (
            "Balance with business principal as account",
            lambda: client.account_balance(
                account_principal=config.principal,
                account_credentials=config.secret,
                source_of_funds="PAGA",
            ),
        ),
        ("Funding sources with empty account fields", client.get_funding_sources),
    ]
    if include_sandbox and config.environment_type != "sandbox":
        sandbox = PagaClient(
            config.with_base_url(SANDBOX_BASE_URL), session=client.session
        )
        attempts.append(("Balance against sandbox", sandbox.account_balance))
    return attempts


def run_diagnostics(
    client: PagaClient,
    attempts: Optional[Sequence[Attempt]] = None,
    *,
    delay_seconds: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
) -> DiagnosticReport:
    """
    Run each attempt once, in order, recording results and errors.
    """
    if attempts is None:
        attempts = default_attempts(client)

    report = DiagnosticReport()
    for index, (name, attempt) in enumerate(attempts):
        logging.info("Attempt %d: %s", index + 1, name)
        try:
            result = attempt()
        except PagaError as exc:
            logging.warning("%s failed: %s", name, exc)
            report.outcomes.append(DiagnosticOutcome(name=name, error=exc))
        else:
            if result.succeeded:
                logging.info("%s succeeded", name)
            else:
                logging.warning(
                    "%s returned code %s: %s", name, result.response_code, result.message
                )
            report.outcomes.append(DiagnosticOutcome(name=name, result=result))

        if index < len(attempts) - 1 and delay_seconds > 0:
            sleep(delay_seconds)
    return report
