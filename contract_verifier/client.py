"""HTTP client for Etherscan-family explorer APIs"""

import logging
from typing import Any, Dict, List, Optional

import requests

from .config import DEFAULT_STATUS_TIMEOUT, DEFAULT_SUBMIT_TIMEOUT, NetworkConfig, NetworkRegistry
from .errors import ApiError, EmptySource, InvalidRuns, NetworkError, RejectedBySource
from .models import ContractSource, VerificationJob, VerificationRequest
from .validation import normalize_address

logger = logging.getLogger(__name__)

CODE_FORMAT = "solidity-single-file"

# Etherscan answers "NOTOK" in the message field for most rejections
GENERIC_MESSAGES = ("", "NOTOK", "OK")


def _redact(text: str, secret: str) -> str:
    if secret:
        return text.replace(secret, "***")
    return text


def rejection_reason(payload: Dict[str, Any]) -> str:
    message = str(payload.get("message") or "").strip()
    result = payload.get("result")
    # a generic NOTOK/OK message is replaced by result, which carries the actual reason
    if message.upper() not in GENERIC_MESSAGES:
        return message
    if result:
        return str(result)
    return message or "Unknown error"


class ExplorerClient:
    """
    Talks to the explorer API of every network in the registry.

    All requests go through one ``requests.Session``; pass your own to share
    connection pools or to stub the transport out in tests.
    """

    def __init__(
        self,
        networks: NetworkRegistry,
        session: Optional[requests.Session] = None,
        submit_timeout: float = DEFAULT_SUBMIT_TIMEOUT,
        status_timeout: float = DEFAULT_STATUS_TIMEOUT,
    ):
        self.networks = networks
        self.session = session if session is not None else requests.Session()
        self.submit_timeout = submit_timeout
        self.status_timeout = status_timeout

    def _request(self, method: str, config: NetworkConfig, timeout: float, **kwargs) -> Any:
        try:
            response = self.session.request(method, config.api_url, timeout=timeout, **kwargs)
        except requests.Timeout as e:
            raise NetworkError(f"Network error: {config.name} API timed out after {timeout}s") from e
        except requests.ConnectionError as e:
            raise NetworkError(f"Network error: Unable to reach {config.name} API") from e
        except requests.RequestException as e:
            raise NetworkError(
                f"Request error: {_redact(str(e), config.credential)}"
            ) from e

        status_code = response.status_code
        if not 200 <= status_code < 300:
            reason = getattr(response, "reason", "") or ""
            raise ApiError(f"API request failed: {status_code} {reason}".rstrip(), status_code=status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ApiError(
                f"{config.name} API returned a non-JSON response", status_code=status_code
            ) from e

    def submit(self, request: VerificationRequest) -> VerificationJob:
        """Submit single-file source for verification and return the explorer job"""
        config = self.networks.require_credential(request.network)
        address = normalize_address(request.address)
        if not request.source_code or not request.source_code.strip():
            raise EmptySource("Source code is empty")
        if isinstance(request.runs, bool) or not isinstance(request.runs, int) or request.runs < 1:
            raise InvalidRuns(f"Optimizer runs must be a positive integer: {request.runs!r}")

        data = {
            "module": "contract",
            "action": "verifysourcecode",
            "apikey": config.credential,
            "contractaddress": address,
            "sourceCode": request.source_code,
            "codeformat": CODE_FORMAT,
            "contractname": request.contract_name,
            "compilerversion": request.compiler_version,
            "optimizationUsed": "1" if request.optimized else "0",
            "runs": str(request.runs),
            # misspelling is part of the explorer API
            "constructorArguements": request.constructor_args or "",
            "evmversion": request.evm_version,
        }

        logger.info(
            "Submitting %s at %s to %s", request.contract_name, address, config.name
        )
        payload = self._request("POST", config, self.submit_timeout, data=data)
        if not isinstance(payload, dict):
            raise ApiError(f"Unexpected verifysourcecode response: {payload!r}")

        if str(payload.get("status")) == "1":
            guid = str(payload.get("result") or "")
            if not guid:
                raise ApiError("Verification accepted without a GUID")
            logger.info("Verification submitted, GUID %s", guid)
            return VerificationJob(guid=guid, network=request.network)

        reason = rejection_reason(payload)
        logger.info("Verification rejected by %s: %s", config.name, reason)
        raise RejectedBySource(f"Verification failed: {reason}")

    def check_status(self, job: VerificationJob) -> Dict[str, Any]:
        """Fetch the raw checkverifystatus payload for a job"""
        config = self.networks.require_credential(job.network)
        params = {
            "module": "contract",
            "action": "checkverifystatus",
            "guid": job.guid,
            "apikey": config.credential,
        }
        payload = self._request("GET", config, self.status_timeout, params=params)
        if not isinstance(payload, dict):
            raise ApiError(f"Unexpected checkverifystatus response: {payload!r}")
        return payload

    def get_source(self, network: str, address: str) -> ContractSource:
        """Look up verified source for an address; non-empty SourceCode means verified"""
        config = self.networks.require_credential(network)
        address = normalize_address(address)
        params = {
            "module": "contract",
            "action": "getsourcecode",
            "address": address,
            "apikey": config.credential,
        }
        payload = self._request("GET", config, self.status_timeout, params=params)

        result = payload.get("result") if isinstance(payload, dict) else None
        record = result[0] if isinstance(result, list) and result else None
        if not isinstance(record, dict) or not (record.get("SourceCode") or "").strip():
            return ContractSource(verified=False, message="Contract source code not verified")

        return ContractSource(
            verified=True,
            contract_name=str(record.get("ContractName") or ""),
            compiler_version=str(record.get("CompilerVersion") or ""),
            optimization_used=str(record.get("OptimizationUsed")) == "1",
            runs=str(record.get("Runs") or ""),
            source_code=str(record["SourceCode"]),
        )

    def get_compiler_versions(self, network: str) -> List[str]:
        config = self.networks.require_credential(network)
        params = {
            "module": "contract",
            "action": "solcversions",
            "apikey": config.credential,
        }
        payload = self._request("GET", config, self.status_timeout, params=params)
        if isinstance(payload, dict) and str(payload.get("status")) == "1":
            result = payload.get("result")
            if isinstance(result, list):
                return [str(version) for version in result]
        raise ApiError("Failed to fetch compiler versions")
