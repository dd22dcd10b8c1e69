import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

import base58
from hexbytes import HexBytes
from loguru import logger

NANOSECONDS_PER_SECOND = 1_000_000_000


def hex_to_bytes(hex_value: Optional[str]) -> Optional[bytes]:
    """Convert a hex string (with or without 0x prefix) to bytes for a BYTEA column

    Empty values map to None so they are stored as NULL, never as an empty blob.
    """
    if not hex_value:
        return None
    value = bytes(HexBytes(hex_value))
    return value or None


def base58_to_bytes(value: Optional[str]) -> Optional[bytes]:
    """Decode an upstream NEAR hash (base58) to bytes, None when empty"""
    if not value:
        return None
    return base58.b58decode(value) or None


def bytes_or_none(value: Optional[bytes]) -> Optional[bytes]:
    return bytes(value) if value else None


def uint256_to_decimal(value: int) -> Decimal:
    # Decimal(int) is exact, NUMERIC columns keep the full 256 bits
    return Decimal(int(value))


def unix_nano_to_utc(timestamp: int) -> datetime:
    """Convert a nanosecond Unix timestamp to a UTC datetime, dropping sub-second precision

    Args:
        timestamp (int): Unix timestamp in nanoseconds

    Returns:
        datetime: timezone-aware UTC datetime truncated to whole seconds
    """
    seconds = abs(timestamp) // NANOSECONDS_PER_SECOND
    if timestamp < 0:
        seconds = -seconds
    return datetime.fromtimestamp(seconds, timezone.utc)


def setup_logging(debug: bool = False, log_file: Optional[str] = None) -> None:
    """Replace the default loguru sink with the indexer's sinks

    Args:
        debug (bool): Log at DEBUG level instead of INFO
        log_file (str | None): Optional path of a rotating log file
    """
    level = "DEBUG" if debug else "INFO"
    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_file:
        logger.add(log_file, level=level, rotation="100 MB", retention="10 days")
