"""core module init"""
from spl_balance.core.address import (
    AddressError,
    PublicKey,
    is_valid_address,
    validate_address,
)
from spl_balance.core.errors import (
    AccountNotFoundError,
    FetchError,
    FetchErrorKind,
    InvalidAddressError,
    MalformedResponseError,
    NotATokenAccountError,
    TransportError,
)
from spl_balance.core.fetcher import (
    AsyncBalanceFetcher,
    BalanceFetcher,
    FetchResult,
    fetch_token_balance,
)
from spl_balance.core.models import TokenBalance, format_ui_amount
from spl_balance.core.rpc import PUBLIC_RPC_URL, AsyncSolanaRpc, SolanaRpc

__all__ = [
    "AccountNotFoundError",
    "AddressError",
    "AsyncBalanceFetcher",
    "AsyncSolanaRpc",
    "BalanceFetcher",
    "FetchError",
    "FetchErrorKind",
    "FetchResult",
    "InvalidAddressError",
    "MalformedResponseError",
    "NotATokenAccountError",
    "PUBLIC_RPC_URL",
    "PublicKey",
    "SolanaRpc",
    "TokenBalance",
    "TransportError",
    "fetch_token_balance",
    "format_ui_amount",
    "is_valid_address",
    "validate_address",
]
