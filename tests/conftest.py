"""
Shared fixtures: a registry with API keys for every network and a stubbed
requests session, so no test ever reaches a real explorer.
"""
from unittest.mock import MagicMock

import pytest

from contract_verifier.config import load_config
from contract_verifier.models import VerificationJob, VerificationRequest

ADDRESS = "0x742d35Cc6634C0532925a3b8D82d8C20C2f84c3c"

SOURCE = """// SPDX-License-Identifier: MIT
pragma solidity ^0.8.19;

contract SimpleStorage {
    uint256 private value;

    function set(uint256 newValue) external {
        value = newValue;
    }
}
"""

API_KEYS = {
    "ETHERSCAN_API_KEY": "eth-secret",
    "POLYGONSCAN_API_KEY": "polygon-secret",
    "BSCSCAN_API_KEY": "bsc-secret",
    "ARBISCAN_API_KEY": "arb-secret",
    "OPTIMISM_API_KEY": "op-secret",
    "BASESCAN_API_KEY": "base-secret",
}


@pytest.fixture
def environ():
    return dict(API_KEYS)


@pytest.fixture
def config(environ):
    return load_config(environ=environ)


@pytest.fixture
def config_without_keys():
    return load_config(environ={})


@pytest.fixture
def make_response():
    """Build a fake requests.Response"""

    def _make(payload=None, status_code=200, reason="OK", json_error=False):
        response = MagicMock()
        response.status_code = status_code
        response.reason = reason
        if json_error:
            response.json.side_effect = ValueError("Expecting value")
        else:
            response.json.return_value = payload
        return response

    return _make


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def request_data():
    return VerificationRequest(
        network="ethereum",
        address=ADDRESS,
        source_code=SOURCE,
        contract_name="SimpleStorage",
        compiler_version="v0.8.19+commit.7dd6d404",
        optimized=True,
        runs=200,
        evm_version="paris",
        constructor_args="0x" + "0" * 62 + "64",
    )


@pytest.fixture
def job():
    return VerificationJob(guid="abc123guid", network="ethereum")


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "SimpleStorage.sol"
    path.write_text(SOURCE, encoding="utf-8")
    return path
