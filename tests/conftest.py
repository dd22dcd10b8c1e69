import base64
import json
from typing import List

import base58
import pytest

from refiner_indexer.data_manager import BaseDataManager
from refiner_indexer.data_types import Block

BLOCK_HASH = "0x" + "ab" * 32
PARENT_HASH = "0x" + "cd" * 32
NEAR_BLOCK_HASH = base58.b58encode(bytes(range(32))).decode()
NEAR_RECEIPT_HASH = base58.b58encode(b"\x07" * 32).decode()


def make_log(topic_count: int = 2, data: bytes = b"\x01\x02") -> dict:
    return {
        "Address": "0x" + "11" * 20,
        "Topics": [base64.b64encode(bytes([i]) * 32).decode() for i in range(topic_count)],
        "data": base64.b64encode(data).decode() if data else None,
    }


def make_transaction(index: int, status: bool = True, log_count: int = 1, height: int = 100) -> dict:
    return {
        "hash": "0x" + f"{index + 1:02x}" * 32,
        "block_hash": BLOCK_HASH,
        "block_height": height,
        "chain_id": 1313161554,
        "transaction_index": index,
        "from": "0x" + "22" * 20,
        "to": "0x" + "33" * 20,
        "nonce": "0x1",
        "gas_price": "0",
        "gas_limit": "0x5208",
        "gas_used": 21000,
        "max_priority_fee_per_gas": "0",
        "max_fee_per_gas": "0",
        "value": "1000000000000000000",
        "input": base64.b64encode(b"\xde\xad\xbe\xef").decode(),
        "output": None,
        "access_list": [{"address": "0x" + "44" * 20, "storageKeys": ["0x" + "00" * 32]}],
        "tx_type": 2,
        "status": status,
        "logs": [make_log() for _ in range(log_count)],
        "logs_bloom": "0x" + "00" * 256,
        "contract_address": "",
        "v": 37,
        "r": "0x" + "ff" * 32,
        "s": "12345",
        "near_metadata": {"hash": NEAR_RECEIPT_HASH, "receipt_hash": NEAR_RECEIPT_HASH},
    }


def make_block(height: int = 100, transactions: List[dict] | None = None, near_metadata=None) -> dict:
    if near_metadata is None:
        near_metadata = {
            "ExistingBlock": {
                "near_hash": NEAR_BLOCK_HASH,
                "near_parent_hash": NEAR_BLOCK_HASH,
                "author": "aurora",
            }
        }
    return {
        "chain_id": 1313161554,
        "hash": BLOCK_HASH,
        "parent_hash": PARENT_HASH,
        "height": height,
        "miner": "0x" + "00" * 20,
        "timestamp": 1_650_000_000_999_999_999,
        "gas_limit": "0xffffffffffffffff",
        "gas_used": "63000",
        "logs_bloom": "0x" + "00" * 256,
        "transactions_root": "0x" + "12" * 32,
        "receipts_root": "0x" + "34" * 32,
        "state_root": "0x" + "56" * 32,
        "size": "0x200",
        "transactions": transactions if transactions is not None else [],
        "near_metadata": near_metadata,
    }


def write_block(folder, height: int, shard_width: int = 10_000, content: str | None = None, **kwargs):
    shard = folder / str(height // shard_width * shard_width)
    shard.mkdir(parents=True, exist_ok=True)
    path = shard / f"{height}.json"
    path.write_text(content if content is not None else json.dumps(make_block(height, **kwargs)))
    return path


class FakeDataManager(BaseDataManager):
    """In-memory store that records committed blocks and can fail on demand"""

    def __init__(self, last_processed_block: int = 0, failures: int = 0):
        self.last_processed_block = last_processed_block
        self.failures = failures
        self.attempts = 0
        self.loaded: List[Block] = []

    async def connect(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def get_last_processed_block(self) -> int:
        return self.last_processed_block

    async def load_block(self, block: Block) -> None:
        self.attempts += 1
        if self.failures > 0:
            self.failures -= 1
            raise TimeoutError("statement timed out")
        self.loaded.append(block)
        self.last_processed_block = block.height

    @property
    def heights(self) -> List[int]:
        return [block.height for block in self.loaded]


@pytest.fixture
def block_dict():
    return make_block(
        height=100,
        transactions=[make_transaction(0, log_count=2), make_transaction(1, status=False, log_count=0)],
    )


@pytest.fixture
def block(block_dict):
    return Block.model_validate_json(json.dumps(block_dict))
