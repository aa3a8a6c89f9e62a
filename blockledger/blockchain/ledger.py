"""
Blockchain Ledger Module

Implements an in-memory, hash-authenticated chain of blocks with:
- SHA-256 content hashes over (index, previous_hash, timestamp, payload)
- Block-to-block linkage checks
- Tail replacement under the longest-chain rule

Security features:
- Immutable blocks (frozen dataclass, field types checked on construction)
- Hard-coded genesis block that can never be replaced
- Failed admissions leave the chain untouched
"""

import copy
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..config import (
    GENESIS_HASH,
    GENESIS_INDEX,
    GENESIS_PAYLOAD,
    GENESIS_PREV_HASH,
    GENESIS_TIMESTAMP,
)
from ..core_crypto.block_hash import calculate_hash

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def current_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


# ============================================================================
# Block Structure (Immutable)
# ============================================================================

def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class Block:
    """
    Immutable block structure for the blockchain.

    A block is only valid relative to a predecessor; see is_valid_block.
    Malformed field types are rejected here so that a Block instance always
    has the expected shape.
    """
    index: int
    previous_hash: str
    timestamp: int
    payload: Any
    hash: str

    def __post_init__(self):
        if not _is_int(self.index):
            raise TypeError(f"index must be int, got {type(self.index).__name__}")
        if self.index < 0:
            raise ValueError(f"index must be non-negative, got {self.index}")
        if not isinstance(self.previous_hash, str):
            raise TypeError("previous_hash must be str")
        if not _is_int(self.timestamp):
            raise TypeError(f"timestamp must be int, got {type(self.timestamp).__name__}")
        if not isinstance(self.hash, str):
            raise TypeError("hash must be str")

    def to_dict(self) -> Dict[str, Any]:
        """Convert block to dictionary for serialization."""
        return {
            'index': self.index,
            'previous_hash': self.previous_hash,
            'timestamp': self.timestamp,
            'payload': self.payload,
            'hash': self.hash,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Block':
        """Create block from dictionary."""
        return cls(
            index=data['index'],
            previous_hash=data['previous_hash'],
            timestamp=data['timestamp'],
            payload=data['payload'],
            hash=data['hash'],
        )

    def __str__(self) -> str:
        return (
            f"Block #{self.index}\n"
            f"  Hash: {self.hash[:16]}...\n"
            f"  Prev: {self.previous_hash[:16]}...\n"
            f"  Timestamp: {self.timestamp}"
        )


GENESIS_BLOCK = Block(
    index=GENESIS_INDEX,
    previous_hash=GENESIS_PREV_HASH,
    timestamp=GENESIS_TIMESTAMP,
    payload=GENESIS_PAYLOAD,
    hash=GENESIS_HASH,
)


def genesis_block() -> Block:
    """Get the hard-coded genesis block."""
    return GENESIS_BLOCK


def generate_block(
    payload: Any,
    previous_block: Block,
    timestamp: Optional[int] = None,
    clock: Optional[Clock] = None
) -> Block:
    """
    Mint a block that directly follows previous_block.

    Args:
        payload: Opaque block payload
        previous_block: The block to build on
        timestamp: Fixed timestamp; taken from clock when omitted
        clock: Time source in epoch milliseconds (default: current_millis)

    Returns:
        The new block (not added to any chain)

    Raises:
        TypeError: If the payload has no deterministic text form
    """
    if timestamp is None:
        timestamp = (clock or current_millis)()
    index = previous_block.index + 1
    block_hash = calculate_hash(index, previous_block.hash, timestamp, payload)
    return Block(
        index=index,
        previous_hash=previous_block.hash,
        timestamp=timestamp,
        payload=payload,
        hash=block_hash,
    )


# ============================================================================
# Validation
# ============================================================================

class ValidationError(Exception):
    """Raised when blockchain validation fails."""
    pass


def validate_block(candidate: Block, predecessor: Block) -> None:
    """
    Validate that candidate may directly follow predecessor.

    Raises:
        ValidationError: If the block is invalid
    """
    if not isinstance(candidate, Block) or not isinstance(predecessor, Block):
        raise ValidationError("Not a Block instance")

    if candidate.index != predecessor.index + 1:
        raise ValidationError(
            f"Invalid index: expected {predecessor.index + 1}, got {candidate.index}"
        )

    if candidate.previous_hash != predecessor.hash:
        raise ValidationError("Previous hash mismatch")

    try:
        computed_hash = calculate_hash(
            candidate.index,
            candidate.previous_hash,
            candidate.timestamp,
            candidate.payload
        )
    except (TypeError, ValueError, RecursionError) as e:
        raise ValidationError(f"Payload cannot be hashed: {e}") from e
    if computed_hash != candidate.hash:
        raise ValidationError("Block hash mismatch")


def _stored_copy(block: Block) -> Block:
    """
    Deep-copy a validated block for storage.

    The copy is re-hashed so a payload whose copy renders differently
    never enters the chain.

    Raises:
        ValidationError: If the payload cannot be copied or the copy
            no longer matches the block hash
    """
    try:
        stored = copy.deepcopy(block)
        computed_hash = calculate_hash(
            stored.index, stored.previous_hash, stored.timestamp, stored.payload
        )
    except (TypeError, ValueError, RecursionError, copy.Error) as e:
        raise ValidationError(f"Payload cannot be copied: {e}") from e
    if computed_hash != stored.hash:
        raise ValidationError("Stored copy hash mismatch")
    return stored


def is_valid_block(candidate: Block, predecessor: Block) -> bool:
    """
    Check whether candidate may directly follow predecessor.

    Total predicate: malformed input yields False, never an exception.
    """
    try:
        validate_block(candidate, predecessor)
    except ValidationError as e:
        logger.debug("Block rejected: %s", e)
        return False
    return True


# ============================================================================
# Blockchain
# ============================================================================

class Blockchain:
    """
    An append-only chain of blocks starting at the fixed genesis block.

    State changes only through add_block (append one) and replace_chain
    (replace a tail). Both are gated by side-effect-free validation and
    hold the chain lock for their full duration.
    """

    def __init__(self, clock: Optional[Clock] = None):
        """
        Initialize a new blockchain holding only the genesis block.

        Args:
            clock: Time source in epoch milliseconds (default: current_millis)
        """
        self._clock = clock or current_millis
        self._lock = threading.RLock()
        self._chain: List[Block] = [GENESIS_BLOCK]

    @property
    def chain(self) -> List[Block]:
        """Get the blockchain (read-only copy)."""
        with self._lock:
            return [copy.deepcopy(block) for block in self._chain]

    @property
    def length(self) -> int:
        """Get blockchain length."""
        with self._lock:
            return len(self._chain)

    def __len__(self) -> int:
        return self.length

    @property
    def last_block(self) -> Block:
        """Get the last block in the chain (the tip)."""
        with self._lock:
            return copy.deepcopy(self._chain[-1])

    def get_block(self, index: int) -> Optional[Block]:
        """
        Get the block at a position.

        Returns:
            A copy of the block, or None if index is out of range
        """
        if not _is_int(index):
            return None
        with self._lock:
            if index < 0 or index >= len(self._chain):
                return None
            return copy.deepcopy(self._chain[index])

    def generate_next_block(self, payload: Any) -> Block:
        """
        Mint the block that would follow the current tip.

        The chain is not modified; pass the result to add_block to admit it.
        """
        with self._lock:
            tip = self._chain[-1]
        return generate_block(payload, tip, clock=self._clock)

    def check_block(self, block: Block) -> bool:
        """Dry run: would block be accepted on top of the current tip?"""
        with self._lock:
            return is_valid_block(block, self._chain[-1])

    def add_block(self, block: Block) -> bool:
        """
        Append a block if it directly follows the current tip.

        Returns:
            True if the block was added, False otherwise (chain unchanged)
        """
        with self._lock:
            if not is_valid_block(block, self._chain[-1]):
                return False
            try:
                stored = _stored_copy(block)
            except ValidationError as e:
                logger.debug("Block rejected: %s", e)
                return False
            self._chain.append(stored)
            logger.info("Added block #%d (%s...)", block.index, block.hash[:16])
            return True

    def _validate_tail(self, tail: Sequence[Block]) -> None:
        """
        Validate a candidate replacement tail against the current chain.

        Raises:
            ValidationError: If the tail cannot replace the chain suffix
        """
        if not isinstance(tail, (list, tuple)) or not tail:
            raise ValidationError("Replacement tail must be a non-empty list")

        first = tail[0]
        if not isinstance(first, Block):
            raise ValidationError("Not a Block instance")

        # Hard-coded genesis block can never be replaced
        if first.index == GENESIS_INDEX:
            raise ValidationError("Cannot replace the genesis block")

        # Longest chain wins, ties keep the current chain
        new_length = len(tail) + first.index
        if new_length <= len(self._chain):
            raise ValidationError(
                f"Resulting chain not longer: {new_length} <= {len(self._chain)}"
            )

        # Splice point must exist, then the tail must graft onto it
        if first.index > len(self._chain):
            raise ValidationError(f"No block at splice point #{first.index - 1}")
        validate_block(first, self._chain[first.index - 1])

        for i in range(1, len(tail)):
            validate_block(tail[i], tail[i - 1])

    def is_valid_chain(self, tail: Sequence[Block]) -> bool:
        """
        Check whether tail may replace the chain from tail[0].index onward.

        Returns:
            True only if the tail grafts onto the chain, is internally
            linked, and the result is strictly longer than the current chain
        """
        with self._lock:
            try:
                self._validate_tail(tail)
            except ValidationError as e:
                logger.debug("Replacement tail rejected: %s", e)
                return False
            return True

    def replace_chain(self, tail: Sequence[Block]) -> bool:
        """
        Replace the chain suffix starting at tail[0].index with tail.

        Returns:
            True if the tail was adopted, False otherwise (chain unchanged)
        """
        with self._lock:
            if not self.is_valid_chain(tail):
                return False
            try:
                stored = [_stored_copy(block) for block in tail]
            except ValidationError as e:
                logger.debug("Replacement tail rejected: %s", e)
                return False
            splice_at = stored[0].index
            discarded = len(self._chain) - splice_at
            self._chain = self._chain[:splice_at] + stored
            logger.info(
                "Replaced %d block(s) from #%d, new length %d",
                discarded, splice_at, len(self._chain)
            )
            return True

    def validate_chain(self) -> bool:
        """
        Validate the entire stored chain.

        Returns:
            True if chain is valid

        Raises:
            ValidationError: If chain is invalid
        """
        with self._lock:
            if not self._chain:
                raise ValidationError("Chain is empty")

            if self._chain[0] != GENESIS_BLOCK:
                raise ValidationError("Invalid genesis block")

            for i in range(1, len(self._chain)):
                validate_block(self._chain[i], self._chain[i - 1])

            return True

    def to_list(self) -> List[Dict[str, Any]]:
        """Get the chain as a list of block dictionaries."""
        with self._lock:
            return [copy.deepcopy(block.to_dict()) for block in self._chain]
