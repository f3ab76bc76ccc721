"""Verify smart contract source on Etherscan-family block explorers"""

from .abi import encode_constructor_args
from .client import ExplorerClient
from .config import NetworkConfig, NetworkRegistry, VerifierConfig, load_config
from .errors import (
    ApiError,
    ArityMismatch,
    ConfigError,
    EmptySource,
    InvalidAddress,
    InvalidCompilerVersion,
    InvalidNumber,
    InvalidRuns,
    InvalidString,
    MissingCredential,
    NetworkError,
    RejectedBySource,
    SourceNotFound,
    UnsupportedNetwork,
    UnsupportedType,
    ValidationError,
    VerifierError,
)
from .models import (
    ContractSource,
    OutcomeStatus,
    VerificationJob,
    VerificationOutcome,
    VerificationRequest,
)
from .poller import Poller
from .validation import is_valid_address, is_valid_compiler_version, normalize_address
from .verifier import ContractVerifier

__version__ = "1.0.0"
