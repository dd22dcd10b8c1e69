from refiner_indexer.data_types import Transaction
from refiner_indexer.utils.utils import base58_to_bytes, bytes_or_none, hex_to_bytes, uint256_to_decimal


class TransactionParser:
    @staticmethod
    def parse_raw(transaction: Transaction) -> dict:
        # Both provenance columns carry the originating receipt hash
        receipt_hash = base58_to_bytes(transaction.near_metadata.receipt_hash)
        return {
            'block_height': transaction.block_height,
            'block_hash': hex_to_bytes(transaction.block_hash),
            'index': transaction.transaction_index,
            'hash': hex_to_bytes(transaction.hash),
            'near_hash': receipt_hash,
            'near_receipt_hash': receipt_hash,
            'from': hex_to_bytes(transaction.from_address),
            'to': hex_to_bytes(transaction.to_address),
            'nonce': uint256_to_decimal(transaction.nonce),
            'gas_price': uint256_to_decimal(transaction.gas_price),
            'gas_limit': uint256_to_decimal(transaction.gas_limit),
            'gas_used': uint256_to_decimal(transaction.gas_used),
            'value': uint256_to_decimal(transaction.value),
            'input': bytes_or_none(transaction.input),
            'output': bytes_or_none(transaction.output),
            'v': uint256_to_decimal(transaction.v),
            'r': uint256_to_decimal(transaction.r),
            's': uint256_to_decimal(transaction.s),
            'status': transaction.status,
            'logs_bloom': hex_to_bytes(transaction.logs_bloom),
            'access_list': [entry.model_dump(by_alias=True) for entry in transaction.access_list],
            'max_fee_per_gas': uint256_to_decimal(transaction.max_fee_per_gas),
            'max_priority_fee_per_gas': uint256_to_decimal(transaction.max_priority_fee_per_gas),
            'type': transaction.tx_type,
            'contract_address': hex_to_bytes(transaction.contract_address),
        }
