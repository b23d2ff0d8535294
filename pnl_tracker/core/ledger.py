'''
Represent the portfolio ledger of a single owner.

The Ledger keeps an append-only trade log, lot-based positions per
symbol, and cumulative realized PnL per symbol. Sells are matched
against buys first-in-first-out. Every record_trade() call validates
fully before touching any state, so a rejected trade leaves no trace.
'''

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from decimal import Decimal, localcontext
from typing import Any

from pnl_tracker.core.domain._decimal_context import AVERAGE_CONTEXT, LEDGER_CONTEXT
from pnl_tracker.core.domain.enums import TradeSide
from pnl_tracker.core.domain.errors import InsufficientBalanceError
from pnl_tracker.core.domain.lot import Lot
from pnl_tracker.core.domain.pnl import (
    PnLReport,
    PnLSummary,
    PortfolioSummary,
    PositionView,
)
from pnl_tracker.core.domain.position import Position
from pnl_tracker.core.domain.trade import Trade
from pnl_tracker.core.domain.trade_request import TradeRequest
from pnl_tracker.core.market_prices import MarketPrices

__all__ = ['Ledger']

_log = logging.getLogger(__name__)

_ZERO = Decimal(0)


def _utc_now() -> datetime:

    return datetime.now(timezone.utc)


def _average(total_cost: Decimal, quantity: Decimal) -> Decimal:

    with localcontext(AVERAGE_CONTEXT):
        return total_cost / quantity


class Ledger:

    '''
    Represent trades, FIFO positions and PnL for one owner.

    Args:
        owner_id (str): Session or user this ledger belongs to.
        market_prices (MarketPrices | None): Reference prices for
            unrealized PnL, defaults to the built-in table.
        clock (Callable[[], datetime] | None): Source of ingestion time
            for trades without a timestamp, defaults to UTC now.
    '''

    def __init__(
        self,
        owner_id: str,
        market_prices: MarketPrices | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:

        if not owner_id:
            msg = 'Ledger.owner_id must be a non-empty string'
            raise ValueError(msg)
        self.owner_id = owner_id
        self.market_prices = market_prices if market_prices is not None else MarketPrices()
        self._clock = clock or _utc_now
        self.trades: list[Trade] = []
        self.positions: dict[str, Position] = {}
        self.realized_pnl: dict[str, Decimal] = {}

    def record_trade(self, request: TradeRequest | Mapping[str, Any]) -> Trade:

        '''
        Validate and record a trade, updating position and realized PnL.

        Args:
            request (TradeRequest | Mapping[str, Any]): Normalized request,
                or a raw payload to be parsed into one

        Returns:
            Trade: The recorded trade

        Raises:
            InvalidTradeError: If the payload is malformed or out of range
            InsufficientBalanceError: If a sell exceeds the held quantity
        '''

        if not isinstance(request, TradeRequest):
            request = TradeRequest.parse(request)

        with localcontext(LEDGER_CONTEXT):
            if request.side is TradeSide.SELL:
                self._check_balance(request)

            trade = Trade.from_request(request, self._clock())

            position = self.positions.get(trade.symbol) or Position(symbol=trade.symbol)

            if trade.side is TradeSide.BUY:
                self._apply_buy(position, trade)
            else:
                self._apply_sell(position, trade)

        # Committed only once the position update has gone through.
        self.positions[trade.symbol] = position
        self.trades.append(trade)

        _log.info(
            'trade recorded: id=%s symbol=%s side=%s qty=%s price=%s owner=%s',
            trade.trade_id,
            trade.symbol,
            trade.side.value,
            trade.quantity,
            trade.price,
            self.owner_id,
        )

        return trade

    def _check_balance(self, request: TradeRequest) -> None:

        '''Raise InsufficientBalanceError if a sell exceeds the held lots.'''

        position = self.positions.get(request.symbol)
        available = position.lots_quantity if position is not None else _ZERO

        if available < request.quantity:
            _log.warning(
                'sell rejected: symbol=%s available=%s requested=%s owner=%s',
                request.symbol,
                available,
                request.quantity,
                self.owner_id,
            )
            raise InsufficientBalanceError(request.symbol, available, request.quantity)

    def _apply_buy(self, position: Position, trade: Trade) -> None:

        '''Append a lot and roll the cost basis forward.'''

        position.lots.append(
            Lot(price=trade.price, quantity=trade.quantity, timestamp=trade.timestamp)
        )
        position.quantity += trade.quantity
        position.total_cost += trade.value
        position.average_cost = _average(position.total_cost, position.quantity)

    def _apply_sell(self, position: Position, trade: Trade) -> None:

        '''Consume lots oldest first and book the realized PnL.'''

        remaining = trade.quantity
        realized = _ZERO

        while remaining > _ZERO and position.lots:
            lot = position.lots[0]
            if lot.quantity < remaining:
                realized += (trade.price - lot.price) * lot.quantity
                remaining -= lot.quantity
                position.lots.popleft()
            else:
                realized += (trade.price - lot.price) * remaining
                lot.quantity -= remaining
                remaining = _ZERO
                if lot.quantity == _ZERO:
                    position.lots.popleft()

        position.quantity -= trade.quantity

        if position.quantity > _ZERO:
            position.total_cost = sum((lot.cost for lot in position.lots), _ZERO)
            position.average_cost = _average(position.total_cost, position.quantity)
        else:
            position.quantity = _ZERO
            position.total_cost = _ZERO
            position.average_cost = _ZERO
            position.lots.clear()

        self.realized_pnl[trade.symbol] = self.realized_pnl.get(trade.symbol, _ZERO) + realized

    def list_trades(self) -> list[Trade]:

        '''
        Return all recorded trades in insertion order.

        Returns:
            list[Trade]: Copy of the trade log
        '''

        return list(self.trades)

    def _market_price(self, position: Position) -> Decimal:

        price = self.market_prices.price_for(position.symbol)
        return price if price is not None else position.average_cost

    def _view(self, position: Position) -> PositionView:

        market_price = self._market_price(position)
        with localcontext(LEDGER_CONTEXT):
            return PositionView(
                symbol=position.symbol,
                quantity=position.quantity,
                average_cost=position.average_cost,
                total_cost=position.total_cost,
                market_price=market_price,
                current_value=position.quantity * market_price,
                unrealized_pnl=(market_price - position.average_cost) * position.quantity,
                lot_count=len(position.lots),
            )

    def get_position(self, symbol: str) -> PositionView | None:

        '''
        Return the view of one symbol's position.

        Args:
            symbol (str): Asset symbol, case-insensitive

        Returns:
            PositionView | None: Position view, or None if never traded
        '''

        position = self.positions.get(symbol.strip().upper())
        if position is None:
            return None

        return self._view(position)

    def get_positions(self, include_closed: bool = True) -> dict[str, PositionView]:

        '''
        Return views of every traded symbol's position.

        Args:
            include_closed (bool): Include fully closed positions

        Returns:
            dict[str, PositionView]: Views keyed by symbol, in first-trade order
        '''

        return {
            symbol: self._view(position)
            for symbol, position in self.positions.items()
            if include_closed or not position.is_closed
        }

    def get_portfolio_summary(self) -> PortfolioSummary:

        '''Return aggregate value and cost across all positions.'''

        with localcontext(LEDGER_CONTEXT):
            return PortfolioSummary.from_positions(self.get_positions().values())

    def get_pnl(self) -> PnLReport:

        '''
        Return realized, unrealized and combined PnL.

        Returns:
            PnLReport: Report with per-symbol breakdowns
        '''

        with localcontext(LEDGER_CONTEXT):
            realized = PnLSummary.from_mapping({
                symbol: pnl
                for symbol, pnl in self.realized_pnl.items()
                if pnl != _ZERO
            })

            unrealized = PnLSummary.from_mapping({
                symbol: (self._market_price(position) - position.average_cost) * position.quantity
                for symbol, position in self.positions.items()
                if position.quantity > _ZERO
            })

            return PnLReport.combine(realized, unrealized)
