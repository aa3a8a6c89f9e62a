# BlockLedger Test Suite
"""
Test suite including:
- Unit tests (hashing, blocks, chain operations)
- Security tests (tampering, malformed input, fork choice)
- Integration tests (end-to-end chain scenarios)

Run with: pytest
Coverage: coverage run -m pytest && coverage report
"""
