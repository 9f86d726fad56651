"""
spl-balance: print the balance of one SPL token account.

Usage:
    spl-balance <TOKEN_ACCOUNT_ADDRESS>
    spl-balance <TOKEN_ACCOUNT_ADDRESS> --url http://localhost:8899 --commitment confirmed

Exit codes: 0 on success, 1 on any lookup failure, 2 on bad usage.
"""

from __future__ import annotations

import argparse
import logging
import sys

from spl_balance.config import ConfigError, RpcConfig
from spl_balance.core.fetcher import BalanceFetcher
from spl_balance.core.rpc import COMMITMENT_LEVELS

EXIT_OK = 0
EXIT_FETCH_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spl-balance",
        description="Print the balance of an SPL token account.",
    )
    parser.add_argument("address", help="Base58 address of the token account")
    parser.add_argument("--url", help="RPC endpoint (overrides SOLANA_RPC_URL)")
    parser.add_argument(
        "--commitment",
        choices=COMMITMENT_LEVELS,
        help="Commitment level (overrides SOLANA_COMMITMENT)",
    )
    parser.add_argument(
        "--timeout", type=float, help="Request timeout in seconds (overrides SOLANA_RPC_TIMEOUT)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = RpcConfig.from_env()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        fetcher = BalanceFetcher(
            args.url or config.endpoint,
            commitment=args.commitment or config.commitment,
            timeout=args.timeout if args.timeout is not None else config.timeout,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    with fetcher:
        result = fetcher.fetch(args.address)

    if not result.ok:
        hint = " (retryable)" if result.error.retryable else ""
        print(f"Error [{result.error.kind.value}]{hint}: {result.error}", file=sys.stderr)
        return EXIT_FETCH_FAILED

    print(result.balance.to_display())
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
