'''
Trade dataclass representing one executed trade in the ledger's log.

Trades are immutable facts: once recorded, no field changes. The
value field is derived at creation and never recomputed.
'''

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from pnl_tracker.core.domain._require_str import _require_str
from pnl_tracker.core.domain.enums import TradeSide
from pnl_tracker.core.domain.trade_request import TradeRequest


__all__ = ['Trade']

_ZERO = Decimal(0)


@dataclass(frozen=True)
class Trade:

    '''
    A recorded buy or sell.

    Args:
        trade_id (str): Unique trade identifier.
        symbol (str): Uppercase asset symbol.
        side (TradeSide): Trade direction.
        price (Decimal): Execution price, must be positive.
        quantity (Decimal): Execution amount, must be positive.
        timestamp (datetime): Execution time, must be timezone-aware.
        value (Decimal): price * quantity at creation.
    '''

    trade_id: str
    symbol: str
    side: TradeSide
    price: Decimal
    quantity: Decimal
    timestamp: datetime
    value: Decimal

    def __post_init__(self) -> None:

        '''Validate invariants at construction time.'''

        for field in ('trade_id', 'symbol'):
            _require_str('Trade', field, getattr(self, field))

        if self.timestamp.tzinfo is None or self.timestamp.utcoffset() is None:
            msg = 'Trade.timestamp must be timezone-aware'
            raise ValueError(msg)
        if self.price <= _ZERO:
            msg = 'Trade.price must be positive'
            raise ValueError(msg)
        if self.quantity <= _ZERO:
            msg = 'Trade.quantity must be positive'
            raise ValueError(msg)

    @classmethod
    def from_request(cls, request: TradeRequest, received_at: datetime) -> Trade:

        '''
        Create a Trade with a fresh identifier from a validated request.

        Args:
            request (TradeRequest): Normalized trade request
            received_at (datetime): Ingestion time, used when the request
                carries no timestamp

        Returns:
            Trade: New immutable trade record
        '''

        return cls(
            trade_id=str(uuid.uuid4()),
            symbol=request.symbol,
            side=request.side,
            price=request.price,
            quantity=request.quantity,
            timestamp=request.timestamp or received_at,
            value=request.price * request.quantity,
        )
