'''
Position dataclass representing lot-based holdings of one symbol.

Positions are mutable: quantity, costs and lots change as trades are
recorded. Mutation logic belongs in the Ledger, not here.
'''

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from decimal import Decimal, localcontext

from pnl_tracker.core.domain._decimal_context import LEDGER_CONTEXT
from pnl_tracker.core.domain._require_str import _require_str
from pnl_tracker.core.domain.lot import Lot


__all__ = ['Position']

_ZERO = Decimal(0)


@dataclass
class Position:

    '''
    Holdings of a single symbol, tracked as a FIFO queue of lots.

    Args:
        symbol (str): Uppercase asset symbol.
        quantity (Decimal): Current net holding, must be non-negative.
        total_cost (Decimal): Cost basis of the remaining lots.
        average_cost (Decimal): total_cost / quantity, zero when flat.
        lots (deque[Lot]): Unconsumed buys, oldest first.
    '''

    symbol: str
    quantity: Decimal = _ZERO
    total_cost: Decimal = _ZERO
    average_cost: Decimal = _ZERO
    lots: deque[Lot] = field(default_factory=deque)

    def __post_init__(self) -> None:

        '''Validate invariants at construction time.'''

        _require_str('Position', 'symbol', self.symbol)

        if self.quantity < _ZERO:
            msg = 'Position.quantity must be non-negative'
            raise ValueError(msg)

        if self.total_cost < _ZERO:
            msg = 'Position.total_cost must be non-negative'
            raise ValueError(msg)

    @property
    def is_closed(self) -> bool:

        '''Return True if position quantity has reached zero.'''

        return self.quantity == _ZERO

    @property
    def lots_quantity(self) -> Decimal:

        '''Return the sum of remaining lot quantities.'''

        with localcontext(LEDGER_CONTEXT):
            return sum((lot.quantity for lot in self.lots), _ZERO)
