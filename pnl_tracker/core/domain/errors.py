'''
Caller-facing exceptions raised by the Ledger.

Both are raised before any state mutation. The HTTP layer maps every
LedgerError to a client error; the ledger itself has no notion of
transport.
'''

from __future__ import annotations

from decimal import Decimal


__all__ = ['InsufficientBalanceError', 'InvalidTradeError', 'LedgerError']


class LedgerError(Exception):

    '''
    Base exception for all ledger rejections.

    Args:
        message (str): Human-readable error description
    '''

    def __init__(self, message: str) -> None:

        self.message = message
        super().__init__(message)


class InvalidTradeError(LedgerError):

    '''
    Raised when a trade payload has a missing or out-of-range field.

    Args:
        field (str): Name of the offending field
        message (str): Human-readable error description
    '''

    def __init__(self, field: str, message: str) -> None:

        self.field = field
        super().__init__(message)


class InsufficientBalanceError(LedgerError):

    '''
    Raised when a sell exceeds the quantity currently held.

    Args:
        symbol (str): Symbol of the rejected sell
        available (Decimal): Quantity held before the sell
        requested (Decimal): Quantity the sell asked for
    '''

    def __init__(self, symbol: str, available: Decimal, requested: Decimal) -> None:

        self.symbol = symbol
        self.available = available
        self.requested = requested
        super().__init__(
            f'Insufficient balance for {symbol}. '
            f'Available: {available} Requested: {requested}'
        )
