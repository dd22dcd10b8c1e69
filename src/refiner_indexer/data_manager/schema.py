from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Identity,
    Integer,
    LargeBinary,
    MetaData,
    Numeric,
    PrimaryKeyConstraint,
    SmallInteger,
    Table,
    Text,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB

metadata = MetaData()

# Hashes, addresses and payloads are stored as BYTEA, 256-bit integers as NUMERIC

block_table = Table(
    'block',
    metadata,
    Column('chain', BigInteger, nullable=False),
    Column('height', BigInteger, primary_key=True, autoincrement=False),
    Column('hash', LargeBinary, nullable=False, unique=True),
    Column('parent_hash', LargeBinary),
    Column('miner', LargeBinary),
    Column('timestamp', DateTime(timezone=True)),
    Column('size', Numeric),
    Column('gas_limit', Numeric),
    Column('gas_used', Numeric),
    Column('transactions_root', LargeBinary),
    Column('state_root', LargeBinary),
    Column('receipts_root', LargeBinary),
    Column('logs_bloom', LargeBinary),
    Column('near_hash', LargeBinary),
    Column('author', Text),
    Column('sequence', BigInteger, nullable=False),
)

transaction_table = Table(
    'transaction',
    metadata,
    Column('id', BigInteger, Identity(), primary_key=True),
    Column('hash', LargeBinary, nullable=False, unique=True),
    Column('block_height', BigInteger, nullable=False),
    Column('block_hash', LargeBinary),
    Column('index', Integer, nullable=False),
    Column('from', LargeBinary),
    Column('to', LargeBinary),
    Column('nonce', Numeric),
    Column('gas_price', Numeric),
    Column('gas_limit', Numeric),
    Column('gas_used', Numeric),
    Column('value', Numeric),
    Column('input', LargeBinary),
    Column('output', LargeBinary),
    Column('v', Numeric),
    Column('r', Numeric),
    Column('s', Numeric),
    Column('status', Boolean, nullable=False),
    Column('logs_bloom', LargeBinary),
    Column('access_list', JSONB),
    Column('max_fee_per_gas', Numeric),
    Column('max_priority_fee_per_gas', Numeric),
    Column('type', SmallInteger),
    Column('contract_address', LargeBinary),
    Column('near_hash', LargeBinary),
    Column('near_receipt_hash', LargeBinary),
)

event_table = Table(
    'event',
    metadata,
    Column('transaction', BigInteger, ForeignKey('transaction.id', ondelete='CASCADE'), nullable=False),
    Column('index', Integer, nullable=False),
    Column('data', LargeBinary),
    Column('from', LargeBinary),
    Column('topics', ARRAY(LargeBinary)),
    Column('block', BigInteger, nullable=False),
    Column('block_hash', LargeBinary),
    Column('transaction_index', Integer),
    Column('transaction_hash', LargeBinary),
    # One row per log index within the owning transaction
    PrimaryKeyConstraint('transaction', 'index'),
)

EVENT_COLUMNS = [
    'transaction',
    'index',
    'data',
    'from',
    'topics',
    'block',
    'block_hash',
    'transaction_index',
    'transaction_hash',
]

TRANSACTION_COLUMNS = [column.name for column in transaction_table.columns if column.name != 'id']
