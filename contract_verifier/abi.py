"""
Constructor argument encoding for explorer verification requests

Only ``uint256``, ``address`` and ``string`` are supported. Strings use a
simplified single-slot layout: a 32-byte length word followed by the UTF-8
bytes right-padded to a 32-byte boundary. There is no head/tail offset
section, so the output for a string mixed with other arguments does NOT match
what ``eth_abi.encode`` (or solc) produces for a dynamic type. Pass a
pre-encoded hex blob instead when a constructor needs the full layout.
"""

import re
from typing import Any, Sequence

from eth_abi import encode
from eth_abi.exceptions import EncodingError

from .errors import ArityMismatch, InvalidAddress, InvalidNumber, InvalidString, UnsupportedType
from .validation import is_valid_address

SUPPORTED_TYPES = ("uint256", "address", "string")

WORD_HEX_CHARS = 64
_DECIMAL_RE = re.compile(r"\d+")
_HEX_RE = re.compile(r"0[xX][0-9a-fA-F]+")


def parse_uint(value: Any) -> int:
    """Parse an int or an integer literal (decimal or 0x-hex) into a non-negative int"""
    if isinstance(value, bool):
        raise InvalidNumber(f"Invalid uint256 value: {value!r}")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        if _DECIMAL_RE.fullmatch(text):
            number = int(text, 10)
        elif _HEX_RE.fullmatch(text):
            number = int(text, 16)
        else:
            raise InvalidNumber(f"Invalid uint256 value: {value!r}")
    else:
        raise InvalidNumber(f"Invalid uint256 value: {value!r}")

    if number < 0:
        raise InvalidNumber(f"uint256 value cannot be negative: {value!r}")
    if number >= 2**256:
        raise InvalidNumber(f"uint256 value out of range: {value!r}")
    return number


def encode_uint256(value: Any) -> str:
    number = parse_uint(value)
    try:
        return encode(["uint256"], [number]).hex()
    except EncodingError as e:
        raise InvalidNumber(f"Invalid uint256 value: {value!r} ({e})") from e


def encode_address(value: Any) -> str:
    if not is_valid_address(value):
        raise InvalidAddress(f"Invalid address: {value}")
    # eth_abi enforces EIP-55 on mixed case input; the syntax check is case-insensitive
    return encode(["address"], [value.lower()]).hex()


def encode_string(value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidString(f"Invalid string value: {value!r}")
    raw = value.encode("utf-8")
    length_word = format(len(raw), "x").zfill(WORD_HEX_CHARS)
    data = raw.hex()
    padded_len = -(-len(data) // WORD_HEX_CHARS) * WORD_HEX_CHARS
    return length_word + data.ljust(padded_len, "0")


_ENCODERS = {
    "uint256": encode_uint256,
    "address": encode_address,
    "string": encode_string,
}


def encode_constructor_args(types: Sequence[str], values: Sequence[Any]) -> str:
    """
    Encode constructor arguments into the hex blob explorers expect.

    Returns ``""`` when there are no arguments, otherwise ``0x`` followed by
    the words for each argument in order.
    """
    if types is None or values is None or len(types) != len(values):
        raise ArityMismatch("Types and values arrays must have the same length")

    if len(types) == 0:
        return ""

    for type_tag in types:
        if type_tag not in _ENCODERS:
            raise UnsupportedType(f"Unsupported type: {type_tag}")

    encoded = "0x"
    for type_tag, value in zip(types, values):
        encoded += _ENCODERS[type_tag](value)

    return encoded
