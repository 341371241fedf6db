"""
Command-line interface for exercising the Paga business API.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Callable, Iterable, Sequence, Tuple

import requests

from .api import create_paga_client
from .core.client import OperationResult, PagaClient
from .core.config import SANDBOX_BASE_URL, PagaConfig, load_paga_config
from .core.diagnostics import default_attempts, run_diagnostics
from .core.errors import ConfigurationError, MissingCredential, PagaError


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def _add_account_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--account-principal",
        default="",
        help="accountPrincipal body field (default: empty string)",
    )
    parser.add_argument(
        "--account-credentials",
        default="",
        help="accountCredentials body field (default: empty string)",
    )


def _add_locale_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--locale",
        default=None,
        help="Response locale (default: PAGA_LOCALE or 'en')",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="paga-payments",
        description="Call the Paga business REST API with signed requests",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing PAGA_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Override PAGA_BASE_URL (e.g. https://beta.mypaga.com)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    balance = commands.add_parser("balance", help="Query the account balance")
    _add_account_arguments(balance)
    balance.add_argument(
        "--source-of-funds",
        default=None,
        help="sourceOfFunds body field (default: PAGA_SOURCE_OF_FUNDS or empty)",
    )
    _add_locale_argument(balance)

    funding = commands.add_parser("funding-sources", help="List funding sources")
    _add_account_arguments(funding)
    _add_locale_argument(funding)

    banks = commands.add_parser("banks", help="List banks")
    _add_locale_argument(banks)

    diagnose = commands.add_parser(
        "diagnose", help="Try several request shapes and summarise which succeed"
    )
    diagnose.add_argument(
        "--delay",
        type=float,
        default=2.0,
        help="Seconds to wait between attempts (default: 2)",
    )
    diagnose.add_argument(
        "--no-sandbox",
        action="store_true",
        help="Skip the extra attempt against the sandbox endpoint",
    )

    commands.add_parser("env", help="Show the resolved configuration (secrets masked)")
    return parser


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=False, default=str))


def _report_result(result: OperationResult) -> int:
    _print_json(result.raw)
    if not result.succeeded:
        logging.error(
            "%s returned code %s: %s",
            result.operation.value,
            result.response_code,
            result.message,
        )
        return 1
    return 0


def _warn_environment(config: PagaConfig) -> None:
    environment = config.environment_type
    if environment == "live":
        logging.warning("Using the LIVE environment: real money transactions")
    elif environment == "unknown":
        logging.warning("Environment type cannot be determined from %s", config.base_url)


def _show_environment(config: PagaConfig) -> int:
    _print_json(config.describe())
    _warn_environment(config)
    return 0


def _diagnose(client: PagaClient, args: argparse.Namespace) -> int:
    config = client.config
    logging.info(
        "Diagnosing %s environment at %s (principal %s)",
        config.environment_type.upper(),
        config.base_url,
        config.principal,
    )
    _warn_environment(config)

    attempts = default_attempts(client, include_sandbox=not args.no_sandbox)
    report = run_diagnostics(client, attempts, delay_seconds=args.delay)

    summary = []
    for outcome in report.outcomes:
        entry = {"name": outcome.name, "succeeded": outcome.succeeded}
        if outcome.result is not None:
            entry["responseCode"] = outcome.result.response_code
            entry["message"] = outcome.result.message
        if outcome.error is not None:
            entry["error"] = str(outcome.error)
        summary.append(entry)
    _print_json(summary)

    if report.any_succeeded:
        logging.info("Successful attempts: %s", ", ".join(report.successful))
        return 0
    logging.error("No attempts were successful")
    if config.environment_type != "sandbox":
        logging.info(
            "Try the sandbox first: --base-url %s (or PAGA_BASE_URL=%s)",
            SANDBOX_BASE_URL,
            SANDBOX_BASE_URL,
        )
    logging.info(
        "If signing is accepted but calls still fail, ask Paga support to verify "
        "the account setup and linking for balance inquiries"
    )
    return 1


def run_cli(
    argv: Sequence[str] | None = None,
    *,
    session_factory: Callable[[], requests.Session] = requests.Session,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect_overrides(args.set or ())
    if args.base_url:
        overrides["PAGA_BASE_URL"] = args.base_url

    try:
        config = load_paga_config(env_file=args.env_file, overrides=overrides)
    except MissingCredential as exc:
        logging.error("Missing required environment variables:")
        for name in exc.missing:
            logging.error("   - %s", name)
        return 1
    except ConfigurationError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    if args.command == "env":
        return _show_environment(config)

    client = create_paga_client(config=config, session=session_factory())

    try:
        if args.command == "diagnose":
            return _diagnose(client, args)
        if args.command == "balance":
            result = client.account_balance(
                account_principal=args.account_principal,
                account_credentials=args.account_credentials,
                source_of_funds=args.source_of_funds,
                locale=args.locale,
            )
        elif args.command == "funding-sources":
            result = client.get_funding_sources(
                account_principal=args.account_principal,
                account_credentials=args.account_credentials,
                locale=args.locale,
            )
        else:
            result = client.get_banks(locale=args.locale)
    except PagaError as exc:
        logging.error("%s request failed: %s", args.command, exc)
        if exc.payload is not None:
            logging.error("Provider payload: %s", exc.payload)
        return 1

    return _report_result(result)


def main() -> None:
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
