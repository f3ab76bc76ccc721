"""Syntactic checks for addresses and compiler versions"""

import re

from .errors import InvalidAddress, InvalidCompilerVersion

ADDRESS_RE = re.compile(r"0x[0-9a-fA-F]{40}")
COMPILER_VERSION_RE = re.compile(r"v\d+\.\d+\.\d+\+commit\.[a-f0-9]+")


def is_valid_address(address) -> bool:
    """True for ``0x`` followed by exactly 40 hex characters, any case"""
    if not isinstance(address, str):
        return False
    return ADDRESS_RE.fullmatch(address) is not None


def normalize_address(address: str) -> str:
    if not is_valid_address(address):
        raise InvalidAddress(f"Invalid contract address: {address}")
    return address.lower()


def is_valid_compiler_version(version) -> bool:
    """Accepts versions shaped like ``v0.8.19+commit.e7d8d7db``"""
    if not isinstance(version, str):
        return False
    return COMPILER_VERSION_RE.fullmatch(version) is not None


def require_compiler_version(version: str) -> str:
    if not is_valid_compiler_version(version):
        raise InvalidCompilerVersion(
            f"Invalid compiler version format: {version} (expected e.g. v0.8.19+commit.e7d8d7db)"
        )
    return version
