"""
Block Content Hash

Computes the deterministic content hash that authenticates every block:

    SHA-256( str(index) + previous_hash + str(timestamp) + payload_text )

returned as 64 lowercase hex characters. The same function mints new blocks
and re-verifies existing ones, so both paths always agree on the field order
and on the textual form of each field.

Payload text rules (see serialize_payload):
- str: used as-is
- bool: "true" / "false"
- None: "null"
- int: decimal
- float: JavaScript number text ("1", "0.5", "1e+21", "1e-7", "NaN")
- bytes: lowercase hex
- JSON types (dict, list, tuple): compact canonical JSON
- anything else: rejected with TypeError
"""

import json
import math
from decimal import Decimal
from typing import Any

from cryptography.hazmat.primitives import hashes

from ..config import HASH_ENCODING, PAYLOAD_JSON_SEPARATORS


def format_number(value: float) -> str:
    """
    Render a float the way JavaScript converts a number to a string.

    Uses the shortest round-trip digits, positional notation for
    1e-6 <= |value| < 1e21, exponent notation ("1e+21", "1e-7") otherwise.
    """
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'Infinity' if value > 0 else '-Infinity'
    if value == 0:
        return '0'

    shortest = repr(value)
    if 1e-6 <= abs(value) < 1e21:
        text = format(Decimal(shortest), 'f')
        if '.' in text:
            text = text.rstrip('0').rstrip('.')
        return text

    # repr always uses exponent notation outside the positional range
    mantissa, _, exponent = shortest.partition('e')
    exp = int(exponent)
    return f"{mantissa}e{'+' if exp >= 0 else '-'}{abs(exp)}"


def serialize_payload(payload: Any) -> str:
    """
    Render an opaque payload as the text that enters the block hash.

    Args:
        payload: Any value supplied by the caller

    Returns:
        Deterministic text form of the payload

    Raises:
        TypeError: If the payload cannot be rendered as JSON
        ValueError: If the payload contains a circular reference
        RecursionError: If the payload is nested too deeply
    """
    if isinstance(payload, str):
        return payload
    # bool is a subclass of int, check it first
    if isinstance(payload, bool):
        return 'true' if payload else 'false'
    if payload is None:
        return 'null'
    if isinstance(payload, int):
        return str(payload)
    if isinstance(payload, float):
        return format_number(payload)
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload).hex()
    return json.dumps(
        payload,
        sort_keys=True,
        separators=PAYLOAD_JSON_SEPARATORS,
    )


def sha256_hex(data: bytes) -> str:
    """Compute SHA-256 and return it as a hexadecimal string."""
    digest = hashes.Hash(hashes.SHA256())
    digest.update(data)
    return digest.finalize().hex()


def calculate_hash(index: int, previous_hash: str, timestamp: int, payload: Any) -> str:
    """
    Compute the content hash of a block.

    Args:
        index: Block position in the chain
        previous_hash: Hash of the preceding block
        timestamp: Block timestamp (epoch milliseconds)
        payload: Opaque block payload

    Returns:
        64-character hexadecimal SHA-256 digest

    Example:
        >>> calculate_hash(0, '0', 1552801194452, 'genesis block')
        '810f9e854ade9bb8730d776ea02622b65c02b82ffa163ecfe4cb151a14412ed4'
    """
    text = f"{index}{previous_hash}{timestamp}{serialize_payload(payload)}"
    return sha256_hex(text.encode(HASH_ENCODING))
