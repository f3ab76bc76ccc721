from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class VerificationRequest:
    """Everything one verification submission needs"""

    network: str
    address: str
    source_code: str
    contract_name: str
    compiler_version: str
    optimized: bool = False
    runs: int = 200
    evm_version: str = "default"
    constructor_args: str = ""


@dataclass(frozen=True)
class VerificationJob:
    guid: str
    network: str


class OutcomeStatus(str, Enum):
    VERIFIED = "verified"
    FAILED = "failed"
    TIMED_OUT = "timeout"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class VerificationOutcome:
    """Terminal result of a verification job"""

    status: OutcomeStatus
    message: str
    explorer_url: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status is OutcomeStatus.VERIFIED

    @classmethod
    def verified(cls, message: str = "Contract verified successfully", explorer_url: Optional[str] = None):
        return cls(OutcomeStatus.VERIFIED, message, explorer_url)

    @classmethod
    def failed(cls, message: str = "Verification failed"):
        return cls(OutcomeStatus.FAILED, message)

    @classmethod
    def timed_out(cls, message: str = "Verification timeout - check manually on explorer"):
        return cls(OutcomeStatus.TIMED_OUT, message)

    @classmethod
    def cancelled(cls, message: str = "Verification polling cancelled"):
        return cls(OutcomeStatus.CANCELLED, message)


@dataclass(frozen=True)
class ContractSource:
    """Result of an explorer source lookup"""

    verified: bool
    contract_name: str = ""
    compiler_version: str = ""
    optimization_used: bool = False
    runs: str = ""
    source_code: str = ""
    message: str = ""
