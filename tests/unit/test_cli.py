"""
Unit tests for the spl-balance command line.
"""

from unittest.mock import patch

import pytest

from spl_balance import cli
from spl_balance.core.fetcher import BalanceFetcher

from .stubs import USDC_ACCOUNT, balance_result


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SOLANA_RPC_URL", "SOLANA_COMMITMENT", "SOLANA_RPC_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fetchers(node):
    """Route every BalanceFetcher the CLI builds through the scripted node."""
    created = []

    def build(endpoint, **kwargs):
        fetcher = BalanceFetcher(endpoint, transport=node.transport, **kwargs)
        created.append((endpoint, kwargs))
        return fetcher

    with patch("spl_balance.cli.BalanceFetcher", side_effect=build):
        yield created


def test_prints_balance(node, fetchers, capsys):
    node.script[USDC_ACCOUNT] = balance_result("1500000", 6, "1.5")
    assert cli.main([USDC_ACCOUNT]) == cli.EXIT_OK
    assert capsys.readouterr().out.strip() == "Token Balance: 1.5"


def test_flags_override_env(node, fetchers, monkeypatch):
    monkeypatch.setenv("SOLANA_RPC_URL", "http://from-env:8899")
    monkeypatch.setenv("SOLANA_COMMITMENT", "processed")
    node.script[USDC_ACCOUNT] = balance_result("1", 0, "1")

    cli.main([USDC_ACCOUNT, "--url", "http://from-flag:8899", "--commitment", "finalized", "--timeout", "3"])

    endpoint, kwargs = fetchers[0]
    assert endpoint == "http://from-flag:8899"
    assert kwargs == {"commitment": "finalized", "timeout": 3.0}
    assert node.requests[0]["params"][1] == {"commitment": "finalized"}


def test_env_endpoint_used_without_flag(node, fetchers, monkeypatch):
    monkeypatch.setenv("SOLANA_RPC_URL", "http://from-env:8899")
    node.script[USDC_ACCOUNT] = balance_result("1", 0, "1")
    cli.main([USDC_ACCOUNT])
    assert fetchers[0][0] == "http://from-env:8899"


def test_invalid_address_exits_nonzero(node, fetchers, capsys):
    assert cli.main(["Token address"]) == cli.EXIT_FETCH_FAILED
    err = capsys.readouterr().err
    assert "invalid_address" in err
    assert node.requests == []


def test_not_found_exits_nonzero(node, fetchers, capsys):
    node.script[USDC_ACCOUNT] = {"error": {"code": -32602, "message": "Invalid param: could not find account"}}
    assert cli.main([USDC_ACCOUNT]) == cli.EXIT_FETCH_FAILED
    assert "not_found" in capsys.readouterr().err


def test_bad_env_is_usage_error(fetchers, monkeypatch, capsys):
    monkeypatch.setenv("SOLANA_RPC_TIMEOUT", "never")
    assert cli.main([USDC_ACCOUNT]) == cli.EXIT_USAGE
    assert "SOLANA_RPC_TIMEOUT" in capsys.readouterr().err


def test_bad_endpoint_is_usage_error(fetchers, capsys):
    assert cli.main([USDC_ACCOUNT, "--url", "not a url"]) == cli.EXIT_USAGE


def test_missing_address_is_argparse_error():
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])
    assert exc_info.value.code == cli.EXIT_USAGE
