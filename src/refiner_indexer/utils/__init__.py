from .config import IndexerConfig, load_config
from .utils import (
    base58_to_bytes,
    bytes_or_none,
    hex_to_bytes,
    setup_logging,
    uint256_to_decimal,
    unix_nano_to_utc,
)

__all__ = [
    "IndexerConfig",
    "base58_to_bytes",
    "bytes_or_none",
    "hex_to_bytes",
    "load_config",
    "setup_logging",
    "uint256_to_decimal",
    "unix_nano_to_utc",
]
