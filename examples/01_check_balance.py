#!/usr/bin/env python3
"""
Example 01: Check a token account balance.

Reads the balance of one SPL token account from a Solana RPC node.
No wallet keys required.

Usage:
    python examples/01_check_balance.py <TOKEN_ACCOUNT_ADDRESS>
    SOLANA_RPC_URL=http://localhost:8899 python examples/01_check_balance.py <TOKEN_ACCOUNT_ADDRESS>
"""

import sys

from spl_balance import BalanceFetcher
from spl_balance.config import RpcConfig

if len(sys.argv) < 2:
    print("Usage: python examples/01_check_balance.py <TOKEN_ACCOUNT_ADDRESS>")
    sys.exit(2)

address = sys.argv[1]
config = RpcConfig.from_env()

with BalanceFetcher(config.endpoint, commitment=config.commitment, timeout=config.timeout) as fetcher:
    result = fetcher.fetch(address)

if not result.ok:
    print(f"Lookup failed ({result.error.kind.value}): {result.error}")
    if result.error.retryable:
        print("The node could not be reached; try again later.")
    sys.exit(1)

balance = result.balance
print(f"Account:  {address}")
print(f"Raw:      {balance.amount} (decimals={balance.decimals})")
print(f"Slot:     {balance.context_slot}")
print(balance.to_display())
