from datetime import datetime, timezone
from decimal import Decimal
import json

import base58

from refiner_indexer.data_types import Block
from refiner_indexer.parsers import BlockParser, LogParser, TransactionParser
from refiner_indexer.utils import hex_to_bytes, unix_nano_to_utc
from tests.conftest import NEAR_BLOCK_HASH, NEAR_RECEIPT_HASH, make_block


def test_hex_to_bytes():
    assert hex_to_bytes("0x0102") == b"\x01\x02"
    assert hex_to_bytes("0102") == b"\x01\x02"
    assert hex_to_bytes("") is None
    assert hex_to_bytes("0x") is None
    assert hex_to_bytes(None) is None


def test_unix_nano_to_utc_truncates():
    assert unix_nano_to_utc(1_650_000_000_999_999_999) == datetime(2022, 4, 15, 5, 20, tzinfo=timezone.utc)
    assert unix_nano_to_utc(999_999_999) == datetime(1970, 1, 1, tzinfo=timezone.utc)


def test_block_row(block):
    block.sequence = block.height
    row = BlockParser.parse_raw(block)

    assert row['height'] == 100
    assert row['sequence'] == 100
    assert row['chain'] == 1313161554
    assert row['hash'] == b"\xab" * 32
    assert row['parent_hash'] == b"\xcd" * 32
    assert row['miner'] == b"\x00" * 20
    assert row['timestamp'] == datetime.fromtimestamp(1_650_000_000, timezone.utc)
    assert row['gas_limit'] == Decimal(2**64 - 1)
    assert row['size'] == Decimal(512)
    assert row['near_hash'] == base58.b58decode(NEAR_BLOCK_HASH)
    assert row['author'] == "aurora"


def test_block_row_with_marker_provenance():
    block = Block.model_validate_json(json.dumps(make_block(near_metadata="SkipBlock")))
    row = BlockParser.parse_raw(block)

    assert row['near_hash'] is None
    assert row['author'] == ""


def test_transaction_row(block):
    row = TransactionParser.parse_raw(block.transactions[0])

    assert row['hash'] == b"\x01" * 32
    assert row['block_height'] == 100
    assert row['index'] == 0
    assert row['from'] == b"\x22" * 20
    assert row['to'] == b"\x33" * 20
    assert row['input'] == b"\xde\xad\xbe\xef"
    assert row['output'] is None
    assert row['contract_address'] is None
    assert row['status'] is True
    assert row['type'] == 2
    assert row['nonce'] == Decimal(1)
    assert row['r'] == Decimal(2**256 - 1)
    assert row['s'] == Decimal(12345)
    assert row['access_list'] == [{"address": "0x" + "44" * 20, "storageKeys": ["0x" + "00" * 32]}]
    assert row['near_hash'] == row['near_receipt_hash'] == base58.b58decode(NEAR_RECEIPT_HASH)


def test_log_row_carries_transaction_context(block):
    transaction = block.transactions[0]
    row = LogParser.parse_raw(transaction.logs[1], 1, transaction, block)

    assert row['index'] == 1
    assert row['data'] == b"\x01\x02"
    assert row['from'] == b"\x11" * 20
    assert row['topics'] == [b"\x00" * 32, b"\x01" * 32]
    assert row['block'] == 100
    assert row['block_hash'] == b"\xab" * 32
    assert row['transaction_index'] == 0
    assert row['transaction_hash'] == b"\x01" * 32


def test_log_row_empty_data_is_null(block):
    transaction = block.transactions[0]
    log = transaction.logs[0].model_copy(update={"data": b""})

    assert LogParser.parse_raw(log, 0, transaction, block)['data'] is None
