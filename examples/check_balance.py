"""
Minimal script that uses the public API to query the account balance.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Tuple

from paga_payments import (
    ConfigurationError,
    PagaError,
    create_paga_client,
    load_paga_config,
)


def _override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _build_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    return {key: value for key, value in pairs}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check a Paga account balance")
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing PAGA_* settings",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument(
        "--use-business-account",
        action="store_true",
        help="Send the business principal/credentials as the account fields",
    )
    parser.add_argument(
        "--source-of-funds",
        help="Override the sourceOfFunds field (default: PAGA_SOURCE_OF_FUNDS)",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        config = load_paga_config(
            env_file=args.env_file,
            overrides=_build_overrides(args.set or ()),
        )
    except ConfigurationError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    client = create_paga_client(config=config)
    logging.info("Checking balance against %s (%s)", config.base_url, config.environment_type)

    account_principal = config.principal if args.use_business_account else ""
    account_credentials = config.secret if args.use_business_account else ""

    try:
        result = client.account_balance(
            account_principal=account_principal,
            account_credentials=account_credentials,
            source_of_funds=args.source_of_funds,
        )
    except PagaError as exc:
        logging.error("Balance request failed: %s", exc)
        return 1

    if not result.succeeded:
        logging.error("Balance rejected with code %s: %s", result.response_code, result.message)
        return 1

    logging.info(
        "Total %s, available %s %s (as of %s)",
        result.total_balance,
        result.available_balance,
        result.currency,
        result.balance_datetime_utc,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
