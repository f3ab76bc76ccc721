"""
Tests for address and compiler version checks
"""
import pytest

from contract_verifier.errors import InvalidAddress, InvalidCompilerVersion
from contract_verifier.validation import (
    is_valid_address,
    is_valid_compiler_version,
    normalize_address,
    require_compiler_version,
)


class TestAddressValidation:
    """Test address syntax checks"""

    @pytest.mark.parametrize(
        "address",
        [
            "0x742d35Cc6634C0532925a3b8D82d8C20C2f84c3c",
            "0x0000000000000000000000000000000000000000",
            "0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF",
            "0xabcdefabcdefabcdefabcdefabcdefabcdefabcd",
        ],
    )
    def test_valid_addresses(self, address):
        assert is_valid_address(address) is True

    @pytest.mark.parametrize(
        "address",
        [
            "0x123",
            "742d35Cc6634C0532925a3b8D82d8C20C2f84c3c",
            "0x742d35Cc6634C0532925a3b8D82d8C20C2f84c3",
            "0x742d35Cc6634C0532925a3b8D82d8C20C2f84c3cc",
            "0x742d35Cc6634C0532925a3b8D82d8C20C2f84c3g",
            "0X742d35Cc6634C0532925a3b8D82d8C20C2f84c3c",
            "0x742d35Cc6634C0532925a3b8D82d8C20C2f84c3c\n",
            " 0x742d35Cc6634C0532925a3b8D82d8C20C2f84c3c",
            "",
            None,
            42,
        ],
    )
    def test_invalid_addresses(self, address):
        assert is_valid_address(address) is False

    def test_normalize_lowercases(self):
        assert normalize_address("0xABCDEFABCDEFABCDEFABCDEFABCDEFABCDEFABCD") == "0x" + "abcdef" * 6 + "abcd"

    def test_normalize_rejects_invalid(self):
        with pytest.raises(InvalidAddress):
            normalize_address("0x123")


class TestCompilerVersionValidation:
    """Test compiler version format checks"""

    @pytest.mark.parametrize("version", ["v0.8.19+commit.7dd6d404", "v0.4.26+commit.4563c3fc", "v0.8.30+commit.73712a01"])
    def test_valid_versions(self, version):
        assert is_valid_compiler_version(version) is True

    @pytest.mark.parametrize(
        "version",
        ["0.8.19+commit.7dd6d404", "v0.8.19", "v0.8+commit.7dd6d404", "v0.8.19+commit.7DD6D404", "latest", "", None],
    )
    def test_invalid_versions(self, version):
        assert is_valid_compiler_version(version) is False

    def test_require_compiler_version(self):
        assert require_compiler_version("v0.8.19+commit.7dd6d404") == "v0.8.19+commit.7dd6d404"
        with pytest.raises(InvalidCompilerVersion):
            require_compiler_version("0.8.19")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
