'''
Enumerated types for the PnL tracker domain.
'''

from __future__ import annotations

from enum import Enum


__all__ = ['TradeSide']


class TradeSide(Enum):

    '''
    Buy or sell direction of a recorded trade.

    Values are lowercase to match the wire representation.
    '''

    BUY = 'buy'
    SELL = 'sell'
