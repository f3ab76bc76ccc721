import logging
import threading
import time
from pathlib import Path
from typing import Callable, List, Optional

import requests

from .client import ExplorerClient
from .config import NetworkConfig, VerifierConfig
from .errors import EmptySource, RejectedBySource, SourceNotFound
from .models import ContractSource, VerificationOutcome, VerificationRequest
from .poller import Poller

logger = logging.getLogger(__name__)


class ContractVerifier:
    """Handles contract verification on Etherscan-family explorers"""

    def __init__(
        self,
        config: VerifierConfig,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.client = ExplorerClient(
            config.networks,
            session=session,
            submit_timeout=config.submit_timeout,
            status_timeout=config.status_timeout,
        )
        self.poller = Poller(self.client, sleep=sleep)

    def supported_networks(self) -> List[str]:
        return self.config.networks.names()

    def network_info(self, network: str) -> NetworkConfig:
        return self.config.networks.lookup(network)

    def explorer_url(self, network: str, address: str) -> str:
        config = self.network_info(network)
        return f"{config.explorer_url}/address/{address}#code"

    @staticmethod
    def read_source(source_path) -> str:
        """Read a single-file source; missing or blank files are rejected"""
        path = Path(source_path)
        if not path.is_file():
            raise SourceNotFound(f"Source file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            source_code = f.read()

        if not source_code.strip():
            raise EmptySource(f"Source file is empty: {path}")
        return source_code

    def verify(
        self,
        request: VerificationRequest,
        max_attempts: Optional[int] = None,
        interval: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> VerificationOutcome:
        """Submit ``request`` and poll it to a terminal outcome"""
        try:
            job = self.client.submit(request)
        except RejectedBySource as e:
            if "already verified" in e.message.lower():
                logger.info("%s is already verified", request.address)
                return VerificationOutcome.verified(
                    "Contract is already verified",
                    explorer_url=self.explorer_url(request.network, request.address),
                )
            raise

        outcome = self.poller.poll(
            job,
            max_attempts=self.config.max_attempts if max_attempts is None else max_attempts,
            interval=self.config.poll_interval if interval is None else interval,
            cancel=cancel,
        )
        if outcome.success:
            return VerificationOutcome.verified(
                outcome.message,
                explorer_url=self.explorer_url(request.network, request.address),
            )
        return outcome

    def verification_status(self, network: str, address: str) -> ContractSource:
        return self.client.get_source(network, address)

    def compiler_versions(self, network: str = "ethereum") -> List[str]:
        return self.client.get_compiler_versions(network)
