"""
BlockLedger Configuration

Module-level constants shared by the hashing and ledger modules, plus the
few settings that may be overridden through the environment.

Environment:
- BLOCKLEDGER_LOG_LEVEL: logging level name used by setup_logging (default INFO)
"""

import os


# ============================================================================
# Genesis Block (frozen, never recomputed)
# ============================================================================

GENESIS_INDEX = 0
GENESIS_PREV_HASH = '0'
GENESIS_TIMESTAMP = 1552801194452
GENESIS_PAYLOAD = 'genesis block'
GENESIS_HASH = '810f9e854ade9bb8730d776ea02622b65c02b82ffa163ecfe4cb151a14412ed4'


# ============================================================================
# Hashing
# ============================================================================

HASH_ENCODING = 'utf-8'
PAYLOAD_JSON_SEPARATORS = (',', ':')  # Compact JSON


# ============================================================================
# Logging
# ============================================================================

LOG_LEVEL_ENV = 'BLOCKLEDGER_LOG_LEVEL'
DEFAULT_LOG_LEVEL = 'INFO'
LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
LOG_DATE_FORMAT = '%H:%M:%S'


def get_log_level() -> str:
    """Get the configured log level name."""
    return os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
