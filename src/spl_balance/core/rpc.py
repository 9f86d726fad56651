"""
SolanaRpc: JSON-RPC client for the token balance query of a Solana node.

Docs: https://solana.com/docs/rpc/http/gettokenaccountbalance
"""

from __future__ import annotations

import asyncio
import itertools
import json
import logging
import threading
import time
from concurrent import futures
from typing import Any

import httpx
from pydantic import ValidationError

from spl_balance.core.address import AddressError, PublicKey
from spl_balance.core.errors import (
    AccountNotFoundError,
    FetchError,
    InvalidAddressError,
    MalformedResponseError,
    NotATokenAccountError,
    TransportError,
)
from spl_balance.core.models import MAX_DECIMALS, TokenBalance, format_ui_amount

logger = logging.getLogger("spl_balance.rpc")

# Public mainnet endpoint
PUBLIC_RPC_URL = "https://api.mainnet-beta.solana.com"
DEFAULT_TIMEOUT = 15.0

GET_TOKEN_ACCOUNT_BALANCE = "getTokenAccountBalance"
COMMITMENT_LEVELS = ("processed", "confirmed", "finalized")

# JSON-RPC server error codes that mean "node not able to answer right now"
_NODE_UNAVAILABLE_CODES = {-32603, -32005, -32004, -32014, -32016}

# Client-side HTTP statuses that are still worth retrying
_RETRYABLE_CLIENT_STATUSES = {408, 425, 429}

# SPL token amounts are u64
_MAX_AMOUNT = 2**64 - 1
_MAX_AMOUNT_DIGITS = len(str(_MAX_AMOUNT))


class _RequestIds:
    """Thread-safe JSON-RPC id counter, shared by every call on one client."""

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            return next(self._counter)


class _BaseSolanaRpc:
    def __init__(
        self,
        endpoint: str,
        commitment: str | None,
        timeout: float,
    ) -> None:
        self.endpoint = _check_endpoint(endpoint)
        self.commitment = _check_commitment(commitment)
        self.timeout = timeout
        self._ids = _RequestIds()

    def _prepare(self, address: str | PublicKey) -> tuple[str, dict[str, Any]]:
        """Parse the address and build the request body. No network access."""
        if isinstance(address, PublicKey):
            key = address
        else:
            try:
                key = PublicKey.from_string(address)
            except AddressError as e:
                raise InvalidAddressError(str(e), address=str(address)) from None
        encoded = str(key)
        return encoded, build_balance_request(self._ids.next(), encoded, self.commitment)


class SolanaRpc(_BaseSolanaRpc):
    """
    Synchronous client for a Solana JSON-RPC node.
    The underlying httpx connection pool may be shared by several threads.

    Usage:
        rpc = SolanaRpc()  # public mainnet endpoint
        rpc = SolanaRpc("http://localhost:8899", commitment="confirmed")
        balance = rpc.get_token_account_balance("4k3Dyjzv...")
    """

    def __init__(
        self,
        endpoint: str = PUBLIC_RPC_URL,
        commitment: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        super().__init__(endpoint, commitment, timeout)
        self._client = httpx.Client(
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )
        self._executor = futures.ThreadPoolExecutor(thread_name_prefix="spl-balance-rpc")

    def get_token_account_balance(
        self, address: str | PublicKey, timeout: float | None = None
    ) -> TokenBalance:
        """
        Return the balance of an SPL token account.

        The whole round trip, body included, is bounded by `timeout`. A node
        that stalls or trickles bytes is abandoned once the bound is reached.

        Args:
            address: Base58 token account address
            timeout: overall timeout in seconds (defaults to the client timeout)

        Raises:
            FetchError: one of its subclasses, see spl_balance.core.errors
        """
        encoded, body = self._prepare(address)
        bound = timeout if timeout is not None else self.timeout
        deadline = time.monotonic() + bound
        logger.debug(f"{GET_TOKEN_ACCOUNT_BALANCE} id={body['id']} address={encoded}")
        future = self._executor.submit(self._post, body, bound, deadline, encoded)
        try:
            status_code, content = future.result(timeout=bound)
        except futures.TimeoutError:
            future.cancel()
            raise _deadline_exceeded(self.endpoint, encoded, bound) from None
        return parse_balance_response(status_code, content, body["id"], encoded)

    def _post(
        self, body: dict[str, Any], bound: float, deadline: float, address: str
    ) -> tuple[int, bytes]:
        chunks: list[bytes] = []
        try:
            with self._client.stream("POST", self.endpoint, json=body, timeout=bound) as response:
                for chunk in response.iter_bytes():
                    if time.monotonic() > deadline:
                        raise _deadline_exceeded(self.endpoint, address, bound)
                    chunks.append(chunk)
                return response.status_code, b"".join(chunks)
        except httpx.TransportError as e:
            raise _transport_failure(e, address) from e
        except httpx.RequestError as e:
            raise _undecodable_body(e, address) from e

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._executor.shutdown(wait=False, cancel_futures=True)
        self._client.close()

    def __enter__(self) -> SolanaRpc:
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()


class AsyncSolanaRpc(_BaseSolanaRpc):
    """
    asyncio client for a Solana JSON-RPC node.
    Safe to use from many concurrent tasks on the same event loop.

    Usage:
        async with AsyncSolanaRpc("http://localhost:8899") as rpc:
            balance = await rpc.get_token_account_balance("4k3Dyjzv...", timeout=5)
    """

    def __init__(
        self,
        endpoint: str = PUBLIC_RPC_URL,
        commitment: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(endpoint, commitment, timeout)
        self._client = httpx.AsyncClient(
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def get_token_account_balance(
        self, address: str | PublicKey, timeout: float | None = None
    ) -> TokenBalance:
        """
        Return the balance of an SPL token account.

        The whole round trip is bounded by `timeout` (or the client timeout),
        so a stalled node never blocks the caller past it. Task cancellation
        propagates as asyncio.CancelledError.

        Raises:
            FetchError: one of its subclasses, see spl_balance.core.errors
        """
        encoded, body = self._prepare(address)
        bound = timeout if timeout is not None else self.timeout
        logger.debug(f"{GET_TOKEN_ACCOUNT_BALANCE} id={body['id']} address={encoded}")
        try:
            response = await asyncio.wait_for(
                self._client.post(self.endpoint, json=body, timeout=bound),
                timeout=bound,
            )
        except asyncio.TimeoutError:
            raise _deadline_exceeded(self.endpoint, encoded, bound) from None
        except httpx.TransportError as e:
            raise _transport_failure(e, encoded) from e
        except httpx.RequestError as e:
            raise _undecodable_body(e, encoded) from e
        return parse_balance_response(response.status_code, response.content, body["id"], encoded)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncSolanaRpc:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()


# ------------------------------------------------------------------
# Wire format
# ------------------------------------------------------------------


def build_balance_request(
    request_id: int, address: str, commitment: str | None = None
) -> dict[str, Any]:
    """Build the JSON-RPC body for getTokenAccountBalance."""
    params: list[Any] = [address]
    if commitment:
        params.append({"commitment": commitment})
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "method": GET_TOKEN_ACCOUNT_BALANCE,
        "params": params,
    }


def parse_balance_response(
    status_code: int, content: bytes, request_id: int, address: str
) -> TokenBalance:
    """
    Turn an HTTP status and body into a TokenBalance or raise the matching FetchError.
    """
    text = content.decode("utf-8", errors="replace")
    if status_code == 404:
        raise AccountNotFoundError(
            f"Endpoint returned 404 for account {address}", address=address
        )
    if status_code != 200:
        logger.warning(f"RPC HTTP {status_code} for {address}")
        raise TransportError(
            f"RPC error {status_code}: {text[:200]}",
            address=address,
            status_code=status_code,
            retryable=status_code in _RETRYABLE_CLIENT_STATUSES or status_code >= 500,
        )

    try:
        payload = json.loads(content)
    except ValueError:
        raise MalformedResponseError(
            f"Response is not JSON: {text[:200]!r}", address=address
        ) from None
    if not isinstance(payload, dict):
        raise MalformedResponseError("Response is not a JSON-RPC object", address=address)
    if payload.get("id") != request_id:
        raise MalformedResponseError(
            f"Response id {payload.get('id')!r} does not match request id {request_id}",
            address=address,
        )

    if payload.get("error") is not None:
        raise _rpc_error(payload["error"], address)
    if "result" not in payload:
        raise MalformedResponseError("Response has neither result nor error", address=address)

    return _parse_result(payload["result"], address)


def _parse_result(result: Any, address: str) -> TokenBalance:
    if not isinstance(result, dict):
        raise MalformedResponseError("result is not an object", address=address)
    value = result.get("value")
    if value is None:
        raise AccountNotFoundError(f"Account {address} not found", address=address)
    if not isinstance(value, dict):
        raise MalformedResponseError("result.value is not an object", address=address)

    raw_amount = value.get("amount")
    decimals = value.get("decimals")
    if not isinstance(raw_amount, str) or not _is_u64_string(raw_amount):
        shown = raw_amount[:40] if isinstance(raw_amount, str) else raw_amount
        raise MalformedResponseError(f"Invalid amount: {shown!r}", address=address)
    if isinstance(decimals, bool) or not isinstance(decimals, int) or not 0 <= decimals <= MAX_DECIMALS:
        raise MalformedResponseError(f"Invalid decimals: {decimals!r}", address=address)

    amount = int(raw_amount)
    ui_amount_string = value.get("uiAmountString")
    if ui_amount_string is None:
        ui_amount_string = format_ui_amount(amount, decimals)
    elif not isinstance(ui_amount_string, str):
        raise MalformedResponseError(
            f"Invalid uiAmountString: {ui_amount_string!r}", address=address
        )

    ui_amount = value.get("uiAmount")
    if ui_amount is not None and (isinstance(ui_amount, bool) or not isinstance(ui_amount, (int, float))):
        raise MalformedResponseError(f"Invalid uiAmount: {ui_amount!r}", address=address)

    context = result.get("context")
    slot = context.get("slot") if isinstance(context, dict) else None

    try:
        return TokenBalance(
            amount=amount,
            decimals=decimals,
            ui_amount_string=ui_amount_string,
            ui_amount=ui_amount,
            context_slot=slot if isinstance(slot, int) and not isinstance(slot, bool) else None,
        )
    except ValidationError as e:
        raise MalformedResponseError(
            f"Balance fields rejected: {e.error_count()} invalid value(s)", address=address
        ) from e


def _is_u64_string(raw: str) -> bool:
    return (
        raw.isascii()
        and raw.isdigit()
        and len(raw) <= _MAX_AMOUNT_DIGITS
        and int(raw) <= _MAX_AMOUNT
    )


def _rpc_error(error: Any, address: str) -> FetchError:
    if not isinstance(error, dict):
        return MalformedResponseError(f"Invalid error object: {error!r}", address=address)
    code = error.get("code")
    message = str(error.get("message", ""))
    lowered = message.lower()

    if "could not find account" in lowered:
        return AccountNotFoundError(f"Account {address} not found", address=address)
    if "not a token account" in lowered:
        return NotATokenAccountError(
            f"Account {address} is not a token account", address=address
        )
    if code in _NODE_UNAVAILABLE_CODES:
        logger.warning(f"Node unavailable ({code}): {message}")
        return TransportError(f"Node unavailable: {message}", address=address)
    return MalformedResponseError(f"RPC error {code}: {message}", address=address)


def _transport_failure(exc: httpx.TransportError, address: str) -> TransportError:
    timed_out = isinstance(exc, httpx.TimeoutException)
    logger.warning(f"Transport failure for {address}: {type(exc).__name__}: {exc}")
    return TransportError(
        f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__,
        address=address,
        timed_out=timed_out,
    )


def _deadline_exceeded(endpoint: str, address: str, bound: float) -> TransportError:
    logger.warning(f"Request for {address} exceeded {bound}s")
    return TransportError(
        f"Request to {endpoint} timed out after {bound}s",
        address=address,
        timed_out=True,
    )


def _undecodable_body(exc: httpx.RequestError, address: str) -> MalformedResponseError:
    return MalformedResponseError(
        f"Response body could not be read: {type(exc).__name__}: {exc}", address=address
    )


def _check_endpoint(endpoint: str) -> str:
    if not endpoint or not endpoint.strip():
        raise ValueError("RPC endpoint must be a non-empty URL")
    try:
        url = httpx.URL(endpoint.strip())
    except httpx.InvalidURL as e:
        raise ValueError(f"Invalid RPC endpoint {endpoint!r}: {e}") from None
    if url.scheme not in ("http", "https") or not url.host:
        raise ValueError(f"RPC endpoint must be an http(s) URL, got {endpoint!r}")
    return str(url)


def _check_commitment(commitment: str | None) -> str | None:
    if commitment is not None and commitment not in COMMITMENT_LEVELS:
        raise ValueError(
            f"Unknown commitment {commitment!r}, expected one of {', '.join(COMMITMENT_LEVELS)}"
        )
    return commitment
