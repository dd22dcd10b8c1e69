from pydantic import BaseModel, BeforeValidator, Field
from typing import Annotated, List, Union

from .fields import Uint64, Uint256, parse_list
from .transactions import Transaction


class ExistingBlock(BaseModel):
    """Upstream NEAR block a refined block was produced from"""
    model_config = {
        "arbitrary_types_allowed": False,
    }

    near_hash: str
    near_parent_hash: str
    author: str


class NearBlock(BaseModel):
    """Structured provenance variant: {"ExistingBlock": {...}}"""
    model_config = {
        "extra": "forbid",
        "populate_by_name": True,
    }

    existing_block: ExistingBlock = Field(alias="ExistingBlock")


# Provenance is either the structured record or a bare marker such as "SkipBlock"
NearMetadata = Union[NearBlock, str]


class Block(BaseModel):
    model_config = {
        "arbitrary_types_allowed": False,
    }

    chain_id: Uint64 = 0
    hash: str
    parent_hash: str = ""
    height: Uint64
    miner: str = ""
    timestamp: int = 0  # nanoseconds since epoch
    gas_limit: Uint256 = 0
    gas_used: Uint256 = 0
    logs_bloom: str = ""
    transactions_root: str = ""
    receipts_root: str = ""
    state_root: str = ""
    size: Uint256 = 0
    transactions: Annotated[List[Transaction], BeforeValidator(parse_list)] = []
    near_metadata: NearMetadata
    sequence: int = 0

    @property
    def existing_block(self) -> ExistingBlock:
        """Provenance sub-fields, all empty when the marker variant was decoded"""
        if isinstance(self.near_metadata, NearBlock):
            return self.near_metadata.existing_block
        return ExistingBlock(near_hash="", near_parent_hash="", author="")

    @property
    def log_count(self) -> int:
        return sum(len(tx.logs) for tx in self.transactions)
