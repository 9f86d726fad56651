"""
Solana address utilities: Base58 decoding and validation of account public keys.

A Solana account address is a 32-byte ed25519 public key rendered as Base58
(Bitcoin alphabet, no checksum). Anything that does not decode to exactly
32 bytes is not an address.

Reference: https://solana.com/docs/core/accounts
"""

from __future__ import annotations

# Base58 alphabet (same as Bitcoin)
_ALPHABET = b"123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_ALPHABET_MAP = {char: i for i, char in enumerate(_ALPHABET)}

PUBLIC_KEY_LENGTH = 32
# 32 zero bytes encode to 32 characters, the longest valid key to 44
_MAX_ENCODED_LENGTH = 44


class AddressError(ValueError):
    """Raised for strings that are not valid Solana account addresses."""

    pass


class PublicKey:
    """
    A 32-byte Solana account address.

    Usage:
        key = PublicKey.from_string("4k3Dyjzvzp8eMZWUXbBCjEvwSkkk59S5iCNLY3QrkX6R")
        key.to_bytes()  # 32 raw bytes
        str(key)        # canonical Base58 form
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: bytes) -> None:
        if len(raw) != PUBLIC_KEY_LENGTH:
            raise AddressError(
                f"Public key must be {PUBLIC_KEY_LENGTH} bytes, got {len(raw)}"
            )
        self._raw = bytes(raw)

    @classmethod
    def from_string(cls, address: str) -> PublicKey:
        """
        Parse a Base58 address string.

        Raises:
            AddressError: if the string is empty, too long, uses characters
                outside the Base58 alphabet, or does not decode to 32 bytes
        """
        if not isinstance(address, str):
            raise AddressError(f"Address must be a string, got {type(address).__name__}")
        address = address.strip()
        if not address:
            raise AddressError("Address is empty")
        if len(address) > _MAX_ENCODED_LENGTH:
            raise AddressError(f"Address too long: {len(address)} characters")
        try:
            raw = _base58_decode(address)
        except (KeyError, UnicodeEncodeError) as e:
            raise AddressError(f"Invalid Base58 encoding: {e}") from None
        return cls(raw)

    def to_bytes(self) -> bytes:
        return self._raw

    def __str__(self) -> str:
        return _base58_encode(self._raw)

    def __repr__(self) -> str:
        return f"PublicKey({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash(self._raw)


def validate_address(address: str) -> bool:
    """
    Validate a Solana account address.

    Returns:
        True if valid

    Raises:
        AddressError: if the address is malformed
    """
    PublicKey.from_string(address)
    return True


def is_valid_address(address: str) -> bool:
    """Check if an address is valid without raising exceptions."""
    try:
        return validate_address(address)
    except AddressError:
        return False


# ------------------------------------------------------------------
# Internal helpers
# ------------------------------------------------------------------


def _base58_decode(s: str) -> bytes:
    """Decode a Base58-encoded string to bytes."""
    n = 0
    for char in s.encode("ascii"):
        n = n * 58 + _ALPHABET_MAP[char]

    if n == 0:
        result = b""
    else:
        byte_length = (n.bit_length() + 7) // 8
        result = n.to_bytes(byte_length, "big")

    # Each leading '1' in Base58 is a 0x00 byte
    pad_size = 0
    for char in s.encode("ascii"):
        if char == _ALPHABET[0]:
            pad_size += 1
        else:
            break

    return b"\x00" * pad_size + result


def _base58_encode(data: bytes) -> str:
    """Encode bytes to a Base58 string."""
    n = int.from_bytes(data, "big")
    result = []
    while n > 0:
        n, remainder = divmod(n, 58)
        result.append(_ALPHABET[remainder:remainder + 1])
    result.reverse()

    pad_size = 0
    for byte in data:
        if byte == 0:
            pad_size += 1
        else:
            break

    return (b"1" * pad_size + b"".join(result)).decode("ascii")
