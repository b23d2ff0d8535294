'''
Domain dataclasses for the PnL tracker.

Re-exports all domain types: the trade side enum, boundary requests,
trades, lots, positions, PnL read models, and ledger errors.
'''

from __future__ import annotations

from pnl_tracker.core.domain.enums import TradeSide
from pnl_tracker.core.domain.errors import (
    InsufficientBalanceError,
    InvalidTradeError,
    LedgerError,
)
from pnl_tracker.core.domain.lot import Lot
from pnl_tracker.core.domain.pnl import (
    PnLReport,
    PnLSummary,
    PortfolioSummary,
    PositionView,
    SymbolPnL,
    TotalPnL,
)
from pnl_tracker.core.domain.position import Position
from pnl_tracker.core.domain.trade import Trade
from pnl_tracker.core.domain.trade_request import TradeRequest

__all__ = [
    'InsufficientBalanceError',
    'InvalidTradeError',
    'LedgerError',
    'Lot',
    'PnLReport',
    'PnLSummary',
    'PortfolioSummary',
    'Position',
    'PositionView',
    'SymbolPnL',
    'TotalPnL',
    'Trade',
    'TradeRequest',
    'TradeSide',
]
