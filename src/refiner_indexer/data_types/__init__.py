from .blocks import (
    Block,
    ExistingBlock,
    NearBlock,
    NearMetadata,
)
from .logs import Log
from .transactions import (
    AccessListEntry,
    NearTransaction,
    Transaction,
)
from .fields import (
    Bytes,
    Uint64,
    Uint256,
    parse_bytes,
    parse_uint256,
)

__all__ = [
    "AccessListEntry",
    "Block",
    "Bytes",
    "ExistingBlock",
    "Log",
    "NearBlock",
    "NearMetadata",
    "NearTransaction",
    "Transaction",
    "Uint64",
    "Uint256",
    "parse_bytes",
    "parse_uint256",
]
