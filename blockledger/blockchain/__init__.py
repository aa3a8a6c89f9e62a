# Blockchain Module
"""
Blockchain Ledger implementation including:
- Immutable blocks (frozen dataclass)
- SHA-256 content hashes and prev-hash chaining
- Single block admission
- Tail replacement under the longest-chain rule

Security features:
- Hard-coded genesis block
- No partial mutation on rejected input
"""

# Lazy imports to avoid RuntimeWarning when running module directly
def __getattr__(name):
    """Lazy import to avoid circular import issues."""
    from . import ledger
    return getattr(ledger, name)

__all__ = [
    'Block',
    'Blockchain',
    'ValidationError',
    'GENESIS_BLOCK',
    'genesis_block',
    'generate_block',
    'validate_block',
    'is_valid_block',
    'current_millis',
]
