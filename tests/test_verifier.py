"""
Tests for the submit-then-poll workflow
"""
import pytest
import requests

from contract_verifier.config import load_config
from contract_verifier.errors import (
    EmptySource,
    MissingCredential,
    NetworkError,
    RejectedBySource,
    SourceNotFound,
    UnsupportedNetwork,
)
from contract_verifier.models import OutcomeStatus
from contract_verifier.verifier import ContractVerifier

SUBMITTED = {"status": "1", "message": "OK", "result": "guid-42"}
PENDING = {"status": "0", "message": "NOTOK", "result": "Pending in queue"}
SUCCESS = {"status": "1", "message": "OK", "result": "Pass - Verified"}


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def verifier(config, session, sleeps):
    return ContractVerifier(config, session=session, sleep=sleeps.append)


class TestReadSource:
    """Test reading single-file sources"""

    def test_read_existing_file(self, source_file):
        source = ContractVerifier.read_source(source_file)
        assert "contract SimpleStorage" in source
        assert "pragma solidity" in source

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceNotFound, match="Source file not found"):
            ContractVerifier.read_source(tmp_path / "non-existent.sol")

    def test_blank_file(self, tmp_path):
        path = tmp_path / "Blank.sol"
        path.write_text("  \n\n")
        with pytest.raises(EmptySource, match="Source file is empty"):
            ContractVerifier.read_source(path)


class TestVerify:
    """Test the full verification workflow"""

    def test_verified(self, verifier, session, sleeps, request_data, make_response):
        session.request.side_effect = [
            make_response(SUBMITTED),
            make_response(PENDING),
            make_response(SUCCESS),
        ]

        outcome = verifier.verify(request_data)

        assert outcome.status is OutcomeStatus.VERIFIED
        assert outcome.explorer_url == (
            "https://etherscan.io/address/0x742d35Cc6634C0532925a3b8D82d8C20C2f84c3c#code"
        )
        assert session.request.call_count == 3
        assert sleeps == [5.0]
        status_params = session.request.call_args.kwargs["params"]
        assert status_params["guid"] == "guid-42"

    def test_failed(self, verifier, session, request_data, make_response):
        session.request.side_effect = [
            make_response(SUBMITTED),
            make_response({"status": "0", "message": "bytecode mismatch", "result": "Fail"}),
        ]

        outcome = verifier.verify(request_data)

        assert outcome.status is OutcomeStatus.FAILED
        assert outcome.message == "bytecode mismatch"
        assert outcome.explorer_url is None

    def test_timed_out(self, verifier, session, request_data, make_response):
        session.request.side_effect = [make_response(SUBMITTED)] + [make_response(PENDING)] * 3

        outcome = verifier.verify(request_data, max_attempts=3, interval=0)

        assert outcome.status is OutcomeStatus.TIMED_OUT
        assert session.request.call_count == 4

    def test_uses_configured_poll_settings(self, environ, session, sleeps, request_data, make_response):
        environ.update({"VERIFIER_MAX_ATTEMPTS": "2", "VERIFIER_POLL_INTERVAL": "1.5"})
        verifier = ContractVerifier(load_config(environ=environ), session=session, sleep=sleeps.append)
        session.request.side_effect = [make_response(SUBMITTED)] + [make_response(PENDING)] * 2

        outcome = verifier.verify(request_data)

        assert outcome.status is OutcomeStatus.TIMED_OUT
        assert sleeps == [1.5]

    def test_already_verified(self, verifier, session, request_data, make_response):
        session.request.return_value = make_response(
            {"status": "0", "message": "NOTOK", "result": "Contract source code already verified"}
        )

        outcome = verifier.verify(request_data)

        assert outcome.status is OutcomeStatus.VERIFIED
        assert outcome.message == "Contract is already verified"
        assert outcome.explorer_url.endswith("#code")
        assert session.request.call_count == 1

    def test_rejection_propagates(self, verifier, session, request_data, make_response):
        session.request.return_value = make_response({"status": "0", "message": "NOTOK", "result": "Invalid API Key"})
        with pytest.raises(RejectedBySource, match="Invalid API Key"):
            verifier.verify(request_data)

    def test_submission_network_error_propagates(self, verifier, session, request_data):
        session.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(NetworkError):
            verifier.verify(request_data)

    def test_missing_credential_makes_no_request(self, config_without_keys, session, request_data):
        verifier = ContractVerifier(config_without_keys, session=session)
        with pytest.raises(MissingCredential):
            verifier.verify(request_data)
        assert session.request.call_count == 0


class TestLookups:
    """Test registry and explorer lookups"""

    def test_supported_networks(self, verifier):
        assert verifier.supported_networks() == ["ethereum", "polygon", "bsc", "arbitrum", "optimism", "base"]

    def test_network_info(self, verifier):
        info = verifier.network_info("bsc")
        assert info.name == "BNB Smart Chain"
        assert info.explorer_url == "https://bscscan.com"

    def test_network_info_unsupported(self, verifier):
        with pytest.raises(UnsupportedNetwork):
            verifier.network_info("solana")

    def test_verification_status(self, verifier, session, make_response):
        session.request.return_value = make_response(
            {"status": "1", "result": [{"SourceCode": "contract A {}", "ContractName": "A", "OptimizationUsed": "0"}]}
        )
        status = verifier.verification_status("base", "0x742d35Cc6634C0532925a3b8D82d8C20C2f84c3c")
        assert status.verified is True
        assert status.optimization_used is False
        assert session.request.call_args.args[1] == "https://api.basescan.org/api"

    def test_compiler_versions(self, verifier, session, make_response):
        session.request.return_value = make_response({"status": "1", "result": ["v0.8.19+commit.7dd6d404"]})
        assert verifier.compiler_versions() == ["v0.8.19+commit.7dd6d404"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
