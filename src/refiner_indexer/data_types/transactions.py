from pydantic import BaseModel, BeforeValidator, Field
from typing import Annotated, List

from .fields import Bytes, Uint64, Uint256, parse_list
from .logs import Log


class AccessListEntry(BaseModel):
    model_config = {
        "arbitrary_types_allowed": False,
        "populate_by_name": True,
    }

    address: str
    storage_keys: Annotated[List[str], BeforeValidator(parse_list)] = Field(
        default_factory=list, alias="storageKeys"
    )


class NearTransaction(BaseModel):
    # Originating NEAR receipt, base58 encoded
    hash: str = ""
    receipt_hash: str = ""


class Transaction(BaseModel):
    model_config = {
        "arbitrary_types_allowed": False,
        "populate_by_name": True,
    }

    hash: str
    block_hash: str = ""
    block_height: Uint64 = 0
    chain_id: Uint64 = 0
    transaction_index: int = Field(default=0, ge=0, lt=2**32)
    from_address: str = Field(default="", alias="from")
    to_address: str = Field(default="", alias="to")
    nonce: Uint256 = 0
    gas_price: Uint256 = 0
    gas_limit: Uint256 = 0
    gas_used: Uint64 = 0
    max_priority_fee_per_gas: Uint256 = 0
    max_fee_per_gas: Uint256 = 0
    value: Uint256 = 0
    input: Bytes = b""
    output: Bytes = b""
    access_list: Annotated[List[AccessListEntry], BeforeValidator(parse_list)] = []
    tx_type: int = Field(default=0, ge=0, lt=256)
    status: bool = False
    logs: Annotated[List[Log], BeforeValidator(parse_list)] = []
    logs_bloom: str = ""
    contract_address: str = ""
    v: Uint64 = 0
    r: Uint256 = 0
    s: Uint256 = 0
    near_metadata: NearTransaction = Field(default_factory=NearTransaction)
