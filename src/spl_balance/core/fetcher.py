"""
BalanceFetcher: one token account in, one balance (or one typed failure) out.

The fetcher never raises for a failed lookup. Every outcome comes back as a
FetchResult so a caller can decide on retries, formatting and exit codes.

Usage:
    with BalanceFetcher("https://api.mainnet-beta.solana.com") as fetcher:
        result = fetcher.fetch("4k3Dyjzvzp8eMZWUXbBCjEvwSkkk59S5iCNLY3QrkX6R")
        if result.ok:
            print(result.balance.ui_amount_string)
        elif result.error.retryable:
            ...
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from spl_balance.core.address import PublicKey
from spl_balance.core.errors import FetchError
from spl_balance.core.models import TokenBalance
from spl_balance.core.rpc import DEFAULT_TIMEOUT, AsyncSolanaRpc, SolanaRpc

logger = logging.getLogger("spl_balance.fetcher")


@dataclass(frozen=True)
class FetchResult:
    """Outcome of a single balance lookup: exactly one of balance / error is set."""
    address: str
    balance: TokenBalance | None = None
    error: FetchError | None = None

    def __post_init__(self) -> None:
        if (self.balance is None) == (self.error is None):
            raise ValueError("FetchResult needs exactly one of balance or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> TokenBalance:
        """Return the balance or raise the carried FetchError."""
        if self.error is not None:
            raise self.error
        return self.balance


class BalanceFetcher:
    """
    Synchronous balance fetcher bound to one RPC endpoint.

    Args:
        endpoint:   RPC node URL
        commitment: optional commitment level (processed, confirmed, finalized)
        timeout:    per-request timeout in seconds
        transport:  optional httpx transport, e.g. httpx.MockTransport in tests
    """

    def __init__(
        self,
        endpoint: str,
        commitment: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.rpc = SolanaRpc(endpoint, commitment=commitment, timeout=timeout, transport=transport)

    def fetch(self, address: str | PublicKey, timeout: float | None = None) -> FetchResult:
        try:
            balance = self.rpc.get_token_account_balance(address, timeout=timeout)
        except FetchError as e:
            logger.debug(f"Fetch failed for {address}: {e.kind.value}: {e}")
            return FetchResult(address=str(address), error=e)
        logger.debug(f"Fetched {address}: {balance.ui_amount_string}")
        return FetchResult(address=str(address), balance=balance)

    def fetch_or_raise(self, address: str | PublicKey, timeout: float | None = None) -> TokenBalance:
        """Like fetch(), but raises the FetchError instead of returning it."""
        return self.rpc.get_token_account_balance(address, timeout=timeout)

    def close(self) -> None:
        self.rpc.close()

    def __enter__(self) -> BalanceFetcher:
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()


class AsyncBalanceFetcher:
    """asyncio counterpart of BalanceFetcher; fetches may run concurrently."""

    def __init__(
        self,
        endpoint: str,
        commitment: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.rpc = AsyncSolanaRpc(endpoint, commitment=commitment, timeout=timeout, transport=transport)

    async def fetch(self, address: str | PublicKey, timeout: float | None = None) -> FetchResult:
        try:
            balance = await self.rpc.get_token_account_balance(address, timeout=timeout)
        except FetchError as e:
            logger.debug(f"Fetch failed for {address}: {e.kind.value}: {e}")
            return FetchResult(address=str(address), error=e)
        logger.debug(f"Fetched {address}: {balance.ui_amount_string}")
        return FetchResult(address=str(address), balance=balance)

    async def fetch_or_raise(self, address: str | PublicKey, timeout: float | None = None) -> TokenBalance:
        return await self.rpc.get_token_account_balance(address, timeout=timeout)

    async def close(self) -> None:
        await self.rpc.close()

    async def __aenter__(self) -> AsyncBalanceFetcher:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()


def fetch_token_balance(
    address: str,
    endpoint: str,
    commitment: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> FetchResult:
    """One-shot lookup: open a connection, fetch one balance, release the connection."""
    with BalanceFetcher(endpoint, commitment=commitment, timeout=timeout) as fetcher:
        return fetcher.fetch(address)
