"""
spl-balance: Python SDK for reading SPL token account balances from a Solana RPC node.

Usage:
    from spl_balance import BalanceFetcher, fetch_token_balance
"""

from spl_balance.core.errors import FetchError, FetchErrorKind
from spl_balance.core.fetcher import (
    AsyncBalanceFetcher,
    BalanceFetcher,
    FetchResult,
    fetch_token_balance,
)
from spl_balance.core.models import TokenBalance
from spl_balance.core.rpc import AsyncSolanaRpc, SolanaRpc

__version__ = "0.1.0"
__all__ = [
    "AsyncBalanceFetcher",
    "AsyncSolanaRpc",
    "BalanceFetcher",
    "FetchError",
    "FetchErrorKind",
    "FetchResult",
    "SolanaRpc",
    "TokenBalance",
    "fetch_token_balance",
]
