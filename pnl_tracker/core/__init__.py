'''
Represent the ledger core and domain types for the PnL tracker.

Re-exports Ledger and MarketPrices from the core package.
'''

from __future__ import annotations

from pnl_tracker.core.ledger import Ledger
from pnl_tracker.core.market_prices import DEFAULT_MARKET_PRICES, MarketPrices

__all__ = ['DEFAULT_MARKET_PRICES', 'Ledger', 'MarketPrices']
