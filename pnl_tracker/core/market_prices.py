'''
Static reference price table used for unrealized PnL.

Prices are fixed at construction; recorded trades never update them.
'''

from __future__ import annotations

from collections.abc import Iterator, Mapping
from decimal import Decimal, InvalidOperation

__all__ = ['DEFAULT_MARKET_PRICES', 'MarketPrices']

_ZERO = Decimal(0)

DEFAULT_MARKET_PRICES: Mapping[str, Decimal] = {
    'BTC': Decimal('50000'),
    'ETH': Decimal('2500'),
    'PYUSD': Decimal('1'),
}


class MarketPrices:

    '''
    Represent an immutable symbol to reference price table.

    Args:
        prices (Mapping[str, Decimal | int | float | str] | None): Prices
            keyed by symbol, defaults to DEFAULT_MARKET_PRICES
    '''

    def __init__(self, prices: Mapping[str, Decimal | int | float | str] | None = None) -> None:

        source = DEFAULT_MARKET_PRICES if prices is None else prices
        table: dict[str, Decimal] = {}

        for symbol, raw in source.items():
            if not isinstance(symbol, str) or not symbol.strip():
                msg = 'MarketPrices symbol must be a non-empty string'
                raise ValueError(msg)
            if isinstance(raw, bool):
                msg = f'MarketPrices price for {symbol} must be numeric'
                raise ValueError(msg)
            try:
                price = raw if isinstance(raw, Decimal) else Decimal(str(raw))
            except InvalidOperation as exc:
                msg = f'MarketPrices price for {symbol} must be numeric'
                raise ValueError(msg) from exc
            if not price.is_finite() or price <= _ZERO:
                msg = f'MarketPrices price for {symbol} must be positive'
                raise ValueError(msg)
            table[symbol.strip().upper()] = price

        self._prices = table

    def price_for(self, symbol: str) -> Decimal | None:

        '''
        Return the reference price for a symbol.

        Args:
            symbol (str): Asset symbol, case-insensitive

        Returns:
            Decimal | None: Reference price, or None if not configured
        '''

        return self._prices.get(symbol.upper())

    def symbols(self) -> list[str]:

        return sorted(self._prices)

    def __contains__(self, symbol: object) -> bool:

        return isinstance(symbol, str) and symbol.upper() in self._prices

    def __iter__(self) -> Iterator[str]:

        return iter(self._prices)

    def __len__(self) -> int:

        return len(self._prices)

    def __repr__(self) -> str:

        return f'MarketPrices({self._prices!r})'
