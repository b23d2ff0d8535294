'''
Read models returned by Ledger queries.

All types here are frozen snapshots: they are built on demand from
ledger state and never feed back into it.
'''

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal


__all__ = [
    'PnLReport',
    'PnLSummary',
    'PortfolioSummary',
    'PositionView',
    'SymbolPnL',
    'TotalPnL',
]

_ZERO = Decimal(0)


@dataclass(frozen=True)
class PositionView:

    '''
    Point-in-time view of a position valued at its reference price.

    Args:
        symbol (str): Uppercase asset symbol.
        quantity (Decimal): Current net holding.
        average_cost (Decimal): Weighted-average acquisition price.
        total_cost (Decimal): Cost basis of the remaining lots.
        market_price (Decimal): Reference price, falls back to average_cost.
        current_value (Decimal): quantity * market_price.
        unrealized_pnl (Decimal): (market_price - average_cost) * quantity.
        lot_count (int): Number of unconsumed lots.
    '''

    symbol: str
    quantity: Decimal
    average_cost: Decimal
    total_cost: Decimal
    market_price: Decimal
    current_value: Decimal
    unrealized_pnl: Decimal
    lot_count: int

    @property
    def is_closed(self) -> bool:

        return self.quantity == _ZERO


@dataclass(frozen=True)
class PnLSummary:

    '''
    Per-symbol PnL figures and their sum.

    Args:
        total_pnl (Decimal): Sum across symbols.
        by_symbol (dict[str, Decimal]): PnL per symbol.
    '''

    total_pnl: Decimal
    by_symbol: dict[str, Decimal]

    @classmethod
    def from_mapping(cls, by_symbol: dict[str, Decimal]) -> PnLSummary:

        return cls(total_pnl=sum(by_symbol.values(), _ZERO), by_symbol=by_symbol)


@dataclass(frozen=True)
class SymbolPnL:

    '''Realized, unrealized and combined PnL of one symbol.'''

    realized: Decimal
    unrealized: Decimal
    total: Decimal


@dataclass(frozen=True)
class TotalPnL:

    '''
    Combined PnL with per-symbol breakdown.

    Args:
        total_pnl (Decimal): Realized total plus unrealized total.
        breakdown (dict[str, SymbolPnL]): Union of symbols in either summary.
    '''

    total_pnl: Decimal
    breakdown: dict[str, SymbolPnL]


@dataclass(frozen=True)
class PnLReport:

    '''
    Full PnL report as returned by Ledger.get_pnl().

    Args:
        realized (PnLSummary): PnL locked in by sells.
        unrealized (PnLSummary): Mark-to-reference PnL of open positions.
        total (TotalPnL): Combination of both.
    '''

    realized: PnLSummary
    unrealized: PnLSummary
    total: TotalPnL

    @classmethod
    def combine(cls, realized: PnLSummary, unrealized: PnLSummary) -> PnLReport:

        '''
        Merge realized and unrealized summaries into a report.

        Args:
            realized (PnLSummary): Realized PnL summary
            unrealized (PnLSummary): Unrealized PnL summary

        Returns:
            PnLReport: Report with per-symbol breakdown over the union of symbols
        '''

        breakdown: dict[str, SymbolPnL] = {}
        symbols = list(realized.by_symbol)
        symbols += [s for s in unrealized.by_symbol if s not in realized.by_symbol]

        for symbol in symbols:
            r = realized.by_symbol.get(symbol, _ZERO)
            u = unrealized.by_symbol.get(symbol, _ZERO)
            breakdown[symbol] = SymbolPnL(realized=r, unrealized=u, total=r + u)

        return cls(
            realized=realized,
            unrealized=unrealized,
            total=TotalPnL(
                total_pnl=realized.total_pnl + unrealized.total_pnl,
                breakdown=breakdown,
            ),
        )


@dataclass(frozen=True)
class PortfolioSummary:

    '''
    Aggregate figures over a set of positions.

    Args:
        total_value (Decimal): Sum of current values.
        total_cost (Decimal): Sum of cost bases.
        number_of_positions (int): Count of positions summarized.
    '''

    total_value: Decimal
    total_cost: Decimal
    number_of_positions: int

    @classmethod
    def from_positions(cls, positions: Iterable[PositionView]) -> PortfolioSummary:

        views = list(positions)
        return cls(
            total_value=sum((v.current_value for v in views), _ZERO),
            total_cost=sum((v.total_cost for v in views), _ZERO),
            number_of_positions=len(views),
        )
