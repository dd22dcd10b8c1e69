from prometheus_client import Counter, Gauge, start_http_server
from loguru import logger

# Block ingestion metrics
BLOCKS_PROCESSED = Counter(
    'indexer_blocks_processed_total',
    'Total number of blocks persisted'
)

TRANSACTIONS_PROCESSED = Counter(
    'indexer_transactions_processed_total',
    'Total number of transactions submitted with persisted blocks'
)

LOGS_PROCESSED = Counter(
    'indexer_logs_processed_total',
    'Total number of logs submitted with persisted blocks'
)

LATEST_PROCESSED_BLOCK = Gauge(
    'indexer_latest_processed_block_number',
    'Latest block height persisted'
)

LATEST_BLOCK_PROCESSING_TIME = Gauge(
    'indexer_latest_block_processing_seconds',
    'Time spent persisting the latest block'
)

# Retry metrics
BLOCK_RETRIES = Counter(
    'indexer_block_retries_total',
    'Number of times a height was retried',
    ['reason']
)

CLEANUP_ERRORS = Counter(
    'indexer_cleanup_errors_total',
    'Number of failed file or directory removals after a commit'
)


def start_metrics_server(port: int, addr: str = '0.0.0.0'):
    """Start Prometheus metrics server

    Args:
        port (int): Port to listen on
        addr (str): Address to bind to (default: all interfaces)
    """
    logger.info(f"Starting Prometheus metrics server on {addr}:{port}")
    start_http_server(port, addr)

    # Expose every retry reason from the start
    for reason in ('missing', 'read', 'decode', 'persist'):
        BLOCK_RETRIES.labels(reason=reason).inc(0)
