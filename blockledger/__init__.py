# BlockLedger
"""
In-memory, hash-authenticated block chain with validated single-block
admission and longest-chain tail replacement.
"""

__version__ = "1.0.0"
