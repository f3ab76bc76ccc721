"""Exceptions raised by the contract verifier"""

from typing import Optional


class VerifierError(Exception):
    """Base class for every error the verifier raises"""


class ValidationError(VerifierError):
    """Caller input is malformed; raised before any network call"""


class ArityMismatch(ValidationError):
    pass


class UnsupportedType(ValidationError):
    pass


class InvalidNumber(ValidationError):
    pass


class InvalidAddress(ValidationError):
    pass


class InvalidString(ValidationError):
    pass


class InvalidRuns(ValidationError):
    pass


class InvalidCompilerVersion(ValidationError):
    pass


class EmptySource(ValidationError):
    pass


class SourceNotFound(ValidationError):
    pass


class ConfigError(VerifierError):
    """Network registry or settings problem"""


class UnsupportedNetwork(ConfigError):
    pass


class MissingCredential(ConfigError):
    pass


class NetworkError(VerifierError):
    """The explorer API could not be reached (timeout, refused connection)"""


class ApiError(VerifierError):
    """The explorer API answered with an HTTP error or an unusable payload"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RejectedBySource(ApiError):
    """The explorer accepted the request but refused the verification"""
