"""
Unit tests for environment configuration.
"""

import pytest

from spl_balance.config import ConfigError, RpcConfig
from spl_balance.core.rpc import DEFAULT_TIMEOUT, PUBLIC_RPC_URL


def test_defaults_from_empty_env():
    cfg = RpcConfig.from_env({})
    assert cfg.endpoint == PUBLIC_RPC_URL
    assert cfg.commitment is None
    assert cfg.timeout == DEFAULT_TIMEOUT


def test_values_from_env():
    cfg = RpcConfig.from_env({
        "SOLANA_RPC_URL": "http://localhost:8899",
        "SOLANA_COMMITMENT": "Confirmed",
        "SOLANA_RPC_TIMEOUT": "2.5",
    })
    assert cfg.endpoint == "http://localhost:8899"
    assert cfg.commitment == "confirmed"
    assert cfg.timeout == pytest.approx(2.5)


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("SOLANA_RPC_URL", "http://node.internal:8899")
    monkeypatch.delenv("SOLANA_COMMITMENT", raising=False)
    monkeypatch.delenv("SOLANA_RPC_TIMEOUT", raising=False)
    assert RpcConfig.from_env().endpoint == "http://node.internal:8899"


@pytest.mark.parametrize(
    "env, match",
    [
        ({"SOLANA_COMMITMENT": "max"}, "SOLANA_COMMITMENT"),
        ({"SOLANA_RPC_TIMEOUT": "soon"}, "not a number"),
        ({"SOLANA_RPC_TIMEOUT": "0"}, "positive"),
    ],
)
def test_bad_values(env, match):
    with pytest.raises(ConfigError, match=match):
        RpcConfig.from_env(env)
