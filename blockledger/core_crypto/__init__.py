# Core Cryptography Module
"""
Hashing primitives used by the ledger:
- SHA-256 block content hash
- Deterministic payload serialization
"""
