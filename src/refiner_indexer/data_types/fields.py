import base64
from typing import Annotated, Any, List

from pydantic import BeforeValidator, Field


def parse_uint256(value: Any) -> int:
    """Parse a 256-bit numeric value carried as a string

    Accepts decimal strings, prefixed strings (0x, 0o, 0b), a bare leading 0
    for octal (so "010" is 8) and plain integers.
    Anything that cannot be parsed becomes 0 instead of failing the block.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return 0

    text = value.strip()
    digits = text.lstrip('+-')
    try:
        if len(digits) > 1 and digits[0] == '0' and digits[1].isdigit():
            return int(text, 8)
        return int(text, 0)
    except ValueError:
        return 0


def parse_bytes(value: Any) -> bytes:
    """Decode a byte payload serialized either as base64 text or as a list of byte values"""
    if value is None:
        return b""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, list):
        return bytes(value)
    if isinstance(value, str):
        return base64.b64decode(value, validate=True)
    raise ValueError(f"Unsupported byte payload type: {type(value).__name__}")


def parse_list(value: Any) -> List[Any]:
    # null lists are valid in refiner output
    return [] if value is None else value


Uint256 = Annotated[int, BeforeValidator(parse_uint256)]
Uint64 = Annotated[int, Field(ge=0, lt=2**64)]
Bytes = Annotated[bytes, BeforeValidator(parse_bytes)]
