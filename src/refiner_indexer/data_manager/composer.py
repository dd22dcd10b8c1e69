import json
from typing import Any, List, Sequence, Tuple

from loguru import logger
from sqlalchemy import (
    Integer,
    LargeBinary,
    Text,
    and_,
    cast,
    column,
    delete,
    false,
    func,
    literal,
    literal_column,
    select,
    true,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, insert
from sqlalchemy.sql.expression import CTE, TableValuedAlias

from refiner_indexer.data_types import Block
from refiner_indexer.parsers import BlockParser, LogParser, TransactionParser
from .schema import EVENT_COLUMNS, TRANSACTION_COLUMNS, block_table, event_table, transaction_table

# Column names that cannot be used unquoted in a derived column list
_DERIVED_NAMES = {'from': 'sender', 'to': 'recipient'}


def compose_block_insert(block: Block):
    """Build the single statement that persists a block, its transactions and their logs

    The statement is a chain of data-modifying CTEs:

        WITH b AS (INSERT INTO block ... ON CONFLICT DO NOTHING),
             tx AS (INSERT INTO transaction ... SELECT ... FROM unnest(...)
                    ON CONFLICT (hash) DO UPDATE ... RETURNING id, hash),
             stale AS (DELETE FROM event USING tx ...),
             topics AS (SELECT ... AS flat)
        INSERT INTO event (...) SELECT tx.id, ... FROM tx JOIN unnest(...) AS logs ... JOIN topics ...

    Transactions and logs are bound as one array per column and expanded with
    unnest, so the number of bind parameters does not depend on the block size.

    The transaction CTE only returns rows that were inserted or promoted from
    status false to true, so logs are written (and stale logs beyond the new
    log count removed) exactly for those rows. With no logs at all the primary
    query is a plain SELECT 1.

    Args:
        block (Block): Decoded block with nested transactions and logs

    Returns:
        Executable statement, committed or rolled back as one unit
    """
    block_cte = insert(block_table).values(BlockParser.parse_raw(block)).on_conflict_do_nothing().cte('b')

    if not block.transactions:
        logger.debug(f"Composed block {block.height}: no transactions")
        return select(literal_column('1')).add_cte(block_cte)

    transaction_rows = [TransactionParser.parse_raw(transaction) for transaction in block.transactions]
    event_rows = [
        LogParser.parse_raw(log, log_index, transaction, block)
        for transaction in block.transactions
        for log_index, log in enumerate(transaction.logs)
    ]

    transaction_cte = _transaction_upsert(transaction_rows).cte('tx')
    stale_cte = _stale_event_delete(
        transaction_cte,
        [row['hash'] for row in transaction_rows],
        [len(transaction.logs) for transaction in block.transactions],
    ).cte('stale')

    logger.debug(
        f"Composed block {block.height}: {len(transaction_rows)} transactions, {len(event_rows)} logs"
    )

    if not event_rows:
        statement = select(literal_column('1'))
    else:
        statement = _event_upsert(transaction_cte, event_rows)

    # Unreferenced CTEs (the block, the stale log removal) still have to run
    return statement.add_cte(block_cte, transaction_cte, stale_cte)


def _derived_name(name: str) -> str:
    return _DERIVED_NAMES.get(name, name)


def _array(values: Sequence[Any], item_type):
    return cast(literal(list(values), ARRAY(item_type)), ARRAY(item_type))


def _unnest(name: str, arrays: List[Tuple[str, Any, Sequence[Any]]]) -> TableValuedAlias:
    """Expand equally long column arrays into rows of a derived table

    Args:
        name (str): Alias of the derived table
        arrays: (column name, item type, values) per column
    """
    return func.unnest(
        *[_array(values, item_type) for _, item_type, values in arrays]
    ).table_valued(
        *[column(_derived_name(key), item_type) for key, item_type, _ in arrays]
    ).render_derived(name=name)


def _transaction_upsert(rows: List[dict]):
    arrays = []
    for name in TRANSACTION_COLUMNS:
        values = [row[name] for row in rows]
        if name == 'access_list':
            # one JSON document per transaction, cast back to JSONB in the select
            arrays.append((name, Text, [json.dumps(value) for value in values]))
        else:
            arrays.append((name, transaction_table.c[name].type, values))

    source = _unnest('txs', arrays)
    columns = [
        cast(source.c.access_list, JSONB) if name == 'access_list' else source.c[_derived_name(name)]
        for name in TRANSACTION_COLUMNS
    ]

    upsert = insert(transaction_table).from_select(TRANSACTION_COLUMNS, select(*columns))
    upsert = upsert.on_conflict_do_update(
        index_elements=[transaction_table.c.hash],
        set_={name: upsert.excluded[name] for name in TRANSACTION_COLUMNS if name != 'hash'},
        # One-way promotion: a succeeded transaction is never rewritten
        where=and_(
            transaction_table.c.status.is_(false()),
            upsert.excluded.status.is_(true()),
        ),
    )
    return upsert.returning(transaction_table.c.id, transaction_table.c.hash)


def _stale_event_delete(transaction_cte: CTE, hashes: List[bytes], log_counts: List[int]):
    """Drop logs of promoted transactions whose index is beyond the incoming log count"""
    counts = _unnest('counts', [
        ('hash', LargeBinary, hashes),
        ('log_count', Integer, log_counts),
    ])
    return delete(event_table).where(
        event_table.c.transaction == transaction_cte.c.id,
        counts.c.hash == transaction_cte.c.hash,
        event_table.c.index >= counts.c.log_count,
    )


def _event_upsert(transaction_cte: CTE, rows: List[dict]):
    # All topics of the block in one array, each log reads its own 1-based inclusive slice.
    # An empty slice (start > end) yields an empty array.
    topics = []
    topic_starts = []
    topic_ends = []
    for row in rows:
        topic_starts.append(len(topics) + 1)
        topics.extend(row['topics'])
        topic_ends.append(len(topics))

    topics_cte = select(_array(topics, LargeBinary).label('flat')).cte('topics')

    arrays = [
        (name, event_table.c[name].type, [row[name] for row in rows])
        for name in EVENT_COLUMNS
        if name not in ('transaction', 'topics')
    ]
    arrays.append(('topic_start', Integer, topic_starts))
    arrays.append(('topic_end', Integer, topic_ends))
    source = _unnest('logs', arrays)

    columns = []
    for name in EVENT_COLUMNS:
        if name == 'transaction':
            columns.append(transaction_cte.c.id)
        elif name == 'topics':
            columns.append(topics_cte.c.flat[source.c.topic_start:source.c.topic_end])
        else:
            columns.append(source.c[_derived_name(name)])

    selection = select(*columns).select_from(
        transaction_cte
        .join(source, source.c.transaction_hash == transaction_cte.c.hash)
        .join(topics_cte, true())
    )

    event_insert = insert(event_table).from_select(EVENT_COLUMNS, selection)
    return event_insert.on_conflict_do_update(
        index_elements=[event_table.c.transaction, event_table.c.index],
        set_={name: event_insert.excluded[name] for name in EVENT_COLUMNS[2:]},
    )
