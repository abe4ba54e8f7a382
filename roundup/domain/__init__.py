"""Domain models and types for roundup.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Exact integer arithmetic for money
- Business logic separated from the CLI
"""

from roundup.domain.models import Instant, Money, RejectionCode, Transaction

__all__ = ["Money", "Instant", "Transaction", "RejectionCode"]
