'''
Lot dataclass representing the unconsumed remainder of a past buy.
'''

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


__all__ = ['Lot']


@dataclass
class Lot:

    '''
    A slice of a historical buy not yet matched by sells.

    Args:
        price (Decimal): Acquisition price of the originating buy.
        quantity (Decimal): Remaining unmatched quantity.
        timestamp (datetime): Execution time of the originating buy.
    '''

    price: Decimal
    quantity: Decimal
    timestamp: datetime

    @property
    def cost(self) -> Decimal:

        '''Return the cost basis of the remaining quantity.'''

        return self.price * self.quantity
