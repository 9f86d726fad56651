"""
Failure taxonomy for balance lookups.

Every error carries a FetchErrorKind and whether retrying the same call could
succeed. Only transport failures can be retryable, and client-side HTTP errors
such as 401 or 403 are not. The SDK itself never retries.
"""

from __future__ import annotations

from enum import Enum


class FetchErrorKind(str, Enum):
    INVALID_ADDRESS = "invalid_address"
    NOT_FOUND = "not_found"
    NOT_A_TOKEN_ACCOUNT = "not_a_token_account"
    TRANSPORT = "transport"
    MALFORMED_RESPONSE = "malformed_response"


class FetchError(Exception):
    """Base class for every failure a balance lookup can report."""

    kind: FetchErrorKind
    retryable: bool = False

    def __init__(self, message: str, *, address: str | None = None) -> None:
        super().__init__(message)
        self.address = address


class InvalidAddressError(FetchError):
    """The input does not decode to a 32-byte account address."""
    kind = FetchErrorKind.INVALID_ADDRESS


class AccountNotFoundError(FetchError):
    """No account exists at the address."""
    kind = FetchErrorKind.NOT_FOUND


class NotATokenAccountError(FetchError):
    """The account exists but holds no SPL token balance."""
    kind = FetchErrorKind.NOT_A_TOKEN_ACCOUNT


class TransportError(FetchError):
    """Connection, DNS, timeout or HTTP-level failure talking to the node."""
    kind = FetchErrorKind.TRANSPORT
    retryable = True

    def __init__(
        self,
        message: str,
        *,
        address: str | None = None,
        status_code: int | None = None,
        timed_out: bool = False,
        retryable: bool = True,
    ) -> None:
        super().__init__(message, address=address)
        self.status_code = status_code
        self.timed_out = timed_out
        self.retryable = retryable


class MalformedResponseError(FetchError):
    """The node answered with something that is not a valid balance response."""
    kind = FetchErrorKind.MALFORMED_RESPONSE
