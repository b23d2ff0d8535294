'''
TradeRequest dataclass representing a validated instruction to record a trade.

Loosely typed payloads (JSON bodies, keyword dicts) are parsed into a
TradeRequest at the boundary. Every field of a TradeRequest is already
normalized, so the Ledger never re-validates shape, only balance.
'''

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from pnl_tracker.core.domain._decimal_context import (
    MAX_ADJUSTED_EXPONENT,
    MIN_EXPONENT,
    _bounded,
)
from pnl_tracker.core.domain.enums import TradeSide
from pnl_tracker.core.domain.errors import InvalidTradeError

__all__ = ['TradeRequest']

_ZERO = Decimal(0)


def _out_of_range(name: str) -> str:

    return (
        f'{name} must be at most 1e{MAX_ADJUSTED_EXPONENT} with at most '
        f'{-MIN_EXPONENT} decimal places'
    )


def _parse_symbol(value: Any) -> str:

    if not isinstance(value, str) or not value.strip():
        msg = 'Trade.symbol must be a non-empty string'
        raise InvalidTradeError('symbol', msg)

    return value.strip().upper()


def _parse_side(value: Any) -> TradeSide:

    if isinstance(value, TradeSide):
        return value

    if isinstance(value, str):
        try:
            return TradeSide(value.strip().lower())
        except ValueError:
            pass

    msg = f'Trade.side must be one of buy, sell (got {value!r})'
    raise InvalidTradeError('side', msg)


def _parse_positive_decimal(field: str, value: Any) -> Decimal:

    '''
    Coerce a numeric payload value to a positive finite Decimal.

    Args:
        field (str): Field name for error context
        value (Any): Raw value, one of Decimal, int, float or str

    Returns:
        Decimal: Parsed value
    '''

    msg = f'Trade.{field} must be a positive finite number'

    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (Decimal, int, float, str)):
        raise InvalidTradeError(field, msg)

    try:
        parsed = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise InvalidTradeError(field, msg) from exc

    if not parsed.is_finite() or parsed <= _ZERO:
        raise InvalidTradeError(field, msg)

    bounded = _bounded(parsed)
    if bounded is None:
        raise InvalidTradeError(field, _out_of_range(f'Trade.{field}'))

    return bounded


def _parse_timestamp(value: Any) -> datetime | None:

    '''
    Coerce an optional timestamp to a timezone-aware datetime.

    Naive values are interpreted as UTC.

    Args:
        value (Any): None, empty string, datetime, or ISO-8601 string

    Returns:
        datetime | None: Parsed timestamp, None when absent
    '''

    if value is None or value == '':
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError as exc:
            msg = f'Trade.timestamp must be an ISO-8601 instant (got {value!r})'
            raise InvalidTradeError('timestamp', msg) from exc
    else:
        msg = 'Trade.timestamp must be an ISO-8601 string or datetime'
        raise InvalidTradeError('timestamp', msg)

    if parsed.tzinfo is None or parsed.utcoffset() is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed


@dataclass(frozen=True)
class TradeRequest:

    '''
    A normalized request to record one trade.

    Args:
        symbol (str): Uppercase asset symbol, non-empty.
        side (TradeSide): Trade direction.
        price (Decimal): Execution price, must be positive and finite.
        quantity (Decimal): Execution amount, must be positive and finite.
        timestamp (datetime | None): Execution time, timezone-aware when set.
            None means the ledger stamps the ingestion time.
    '''

    symbol: str
    side: TradeSide
    price: Decimal
    quantity: Decimal
    timestamp: datetime | None = None

    def __post_init__(self) -> None:

        '''Validate invariants at construction time.'''

        if not isinstance(self.symbol, str) or not self.symbol or self.symbol != self.symbol.upper():
            msg = 'TradeRequest.symbol must be a non-empty uppercase string'
            raise InvalidTradeError('symbol', msg)

        if not isinstance(self.side, TradeSide):
            msg = 'TradeRequest.side must be a TradeSide'
            raise InvalidTradeError('side', msg)

        for field in ('price', 'quantity'):
            value = getattr(self, field)
            if not isinstance(value, Decimal) or not value.is_finite() or value <= _ZERO:
                msg = f'TradeRequest.{field} must be a positive finite Decimal'
                raise InvalidTradeError(field, msg)
            if _bounded(value) is not value:
                raise InvalidTradeError(field, _out_of_range(f'TradeRequest.{field}'))

        if self.timestamp is not None and (
            self.timestamp.tzinfo is None or self.timestamp.utcoffset() is None
        ):
            msg = 'TradeRequest.timestamp must be timezone-aware'
            raise InvalidTradeError('timestamp', msg)

    @classmethod
    def parse(cls, payload: Mapping[str, Any]) -> TradeRequest:

        '''
        Build a TradeRequest from a loosely typed payload.

        Symbol is uppercased, side lowercased and matched case-insensitively,
        price and quantity coerced to Decimal.

        Args:
            payload (Mapping[str, Any]): Mapping with symbol, side, price,
                quantity and optional timestamp keys

        Returns:
            TradeRequest: Normalized request

        Raises:
            InvalidTradeError: If any field is missing or out of range
        '''

        if not isinstance(payload, Mapping):
            msg = 'Trade payload must be a mapping'
            raise InvalidTradeError('payload', msg)

        return cls(
            symbol=_parse_symbol(payload.get('symbol')),
            side=_parse_side(payload.get('side')),
            price=_parse_positive_decimal('price', payload.get('price')),
            quantity=_parse_positive_decimal('quantity', payload.get('quantity')),
            timestamp=_parse_timestamp(payload.get('timestamp')),
        )
