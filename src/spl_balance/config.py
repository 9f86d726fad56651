"""
Runtime configuration read from the environment.

    SOLANA_RPC_URL      RPC node URL (default: public mainnet endpoint)
    SOLANA_COMMITMENT   processed | confirmed | finalized (default: node default)
    SOLANA_RPC_TIMEOUT  request timeout in seconds (default: 15)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from spl_balance.core.rpc import COMMITMENT_LEVELS, DEFAULT_TIMEOUT, PUBLIC_RPC_URL


class ConfigError(ValueError):
    """Raised when an environment setting cannot be used."""
    pass


@dataclass(frozen=True)
class RpcConfig:
    endpoint: str = PUBLIC_RPC_URL
    commitment: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> RpcConfig:
        env = os.environ if environ is None else environ

        endpoint = env.get("SOLANA_RPC_URL", "").strip() or PUBLIC_RPC_URL

        commitment = env.get("SOLANA_COMMITMENT", "").strip().lower() or None
        if commitment is not None and commitment not in COMMITMENT_LEVELS:
            raise ConfigError(
                f"SOLANA_COMMITMENT must be one of {', '.join(COMMITMENT_LEVELS)}, got {commitment!r}"
            )

        raw_timeout = env.get("SOLANA_RPC_TIMEOUT", "").strip()
        timeout = DEFAULT_TIMEOUT
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ConfigError(f"SOLANA_RPC_TIMEOUT is not a number: {raw_timeout!r}") from None
            if timeout <= 0:
                raise ConfigError(f"SOLANA_RPC_TIMEOUT must be positive, got {timeout}")

        return cls(endpoint=endpoint, commitment=commitment, timeout=timeout)
