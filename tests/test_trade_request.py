'''
Tests for TradeRequest parsing and validation.
'''

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from pnl_tracker.core.domain import InvalidTradeError, TradeRequest, TradeSide

_TS = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        'symbol': 'btc',
        'side': 'buy',
        'price': '40000',
        'quantity': '1.5',
    }
    payload.update(overrides)
    return payload


def test_parse_normalizes_fields() -> None:
    request = TradeRequest.parse(_payload(symbol=' eth ', side='SeLL'))
    assert request.symbol == 'ETH'
    assert request.side is TradeSide.SELL
    assert request.price == Decimal('40000')
    assert request.quantity == Decimal('1.5')
    assert request.timestamp is None


@pytest.mark.parametrize('raw, expected', [
    (40000, Decimal('40000')),
    (0.1, Decimal('0.1')),
    ('0.25', Decimal('0.25')),
    (Decimal('12.5'), Decimal('12.5')),
    (' 7 ', Decimal('7')),
])
def test_parse_coerces_numeric_types(raw: object, expected: Decimal) -> None:
    assert TradeRequest.parse(_payload(price=raw)).price == expected


@pytest.mark.parametrize('bad', [0, -1, '0', 'abc', '', None, True, 'inf', 'NaN', float('nan'), [1]])
def test_parse_rejects_bad_price(bad: object) -> None:
    with pytest.raises(InvalidTradeError) as exc_info:
        TradeRequest.parse(_payload(price=bad))
    assert exc_info.value.field == 'price'


@pytest.mark.parametrize('bad', [0, '-0.5', 'one', None, False, float('inf')])
def test_parse_rejects_bad_quantity(bad: object) -> None:
    with pytest.raises(InvalidTradeError) as exc_info:
        TradeRequest.parse(_payload(quantity=bad))
    assert exc_info.value.field == 'quantity'


@pytest.mark.parametrize('bad', ['hold', '', None, 1])
def test_parse_rejects_bad_side(bad: object) -> None:
    with pytest.raises(InvalidTradeError) as exc_info:
        TradeRequest.parse(_payload(side=bad))
    assert exc_info.value.field == 'side'


@pytest.mark.parametrize('bad', ['', '   ', None, 42, ['BTC']])
def test_parse_rejects_bad_symbol(bad: object) -> None:
    with pytest.raises(InvalidTradeError) as exc_info:
        TradeRequest.parse(_payload(symbol=bad))
    assert exc_info.value.field == 'symbol'


def test_parse_rejects_non_mapping() -> None:
    with pytest.raises(InvalidTradeError):
        TradeRequest.parse(['BTC', 'buy'])  # type: ignore[arg-type]


def test_parse_iso_timestamp_with_offset() -> None:
    request = TradeRequest.parse(_payload(timestamp='2026-01-01T02:00:00+02:00'))
    assert request.timestamp == _TS
    assert request.timestamp is not None
    assert request.timestamp.utcoffset() == timedelta(hours=2)


def test_parse_naive_timestamp_is_utc() -> None:
    request = TradeRequest.parse(_payload(timestamp='2026-01-01T00:00:00'))
    assert request.timestamp == _TS


def test_parse_datetime_timestamp() -> None:
    request = TradeRequest.parse(_payload(timestamp=_TS))
    assert request.timestamp == _TS


@pytest.mark.parametrize('empty', [None, ''])
def test_parse_empty_timestamp_is_none(empty: object) -> None:
    assert TradeRequest.parse(_payload(timestamp=empty)).timestamp is None


@pytest.mark.parametrize('bad', ['yesterday', 1700000000])
def test_parse_rejects_bad_timestamp(bad: object) -> None:
    with pytest.raises(InvalidTradeError) as exc_info:
        TradeRequest.parse(_payload(timestamp=bad))
    assert exc_info.value.field == 'timestamp'


def test_trade_request_frozen() -> None:
    request = TradeRequest.parse(_payload())
    with pytest.raises(AttributeError):
        request.price = Decimal('1')  # type: ignore[misc]


def test_direct_construction_validates() -> None:
    with pytest.raises(InvalidTradeError, match='uppercase'):
        TradeRequest(symbol='btc', side=TradeSide.BUY, price=Decimal('1'), quantity=Decimal('1'))
    with pytest.raises(InvalidTradeError, match='positive'):
        TradeRequest(symbol='BTC', side=TradeSide.BUY, price=Decimal('0'), quantity=Decimal('1'))
    with pytest.raises(InvalidTradeError, match='timezone-aware'):
        TradeRequest(
            symbol='BTC', side=TradeSide.BUY,
            price=Decimal('1'), quantity=Decimal('1'),
            timestamp=datetime(2026, 1, 1),
        )


@pytest.mark.parametrize('bad', ['1e16', '10000000000000000', '1e-31', '9e999999', '9e9999999'])
def test_parse_rejects_out_of_range_price(bad: str) -> None:
    with pytest.raises(InvalidTradeError, match='at most') as exc_info:
        TradeRequest.parse(_payload(price=bad))
    assert exc_info.value.field == 'price'


@pytest.mark.parametrize('edge', ['1e15', '999999999999999.5', '0.000000000000000000000000000001'])
def test_parse_accepts_values_at_bounds(edge: str) -> None:
    assert TradeRequest.parse(_payload(quantity=edge)).quantity == Decimal(edge)


def test_parse_drops_trailing_zeros_beyond_scale() -> None:
    request = TradeRequest.parse(_payload(quantity='1.' + '0' * 40, price='2E+3'))
    assert request.quantity == Decimal('1')
    assert request.quantity.as_tuple().exponent == 0
    assert request.price == Decimal('2000')


def test_direct_construction_enforces_bounds() -> None:
    with pytest.raises(InvalidTradeError, match='at most'):
        TradeRequest(symbol='BTC', side=TradeSide.BUY, price=Decimal('1e16'), quantity=Decimal('1'))
    with pytest.raises(InvalidTradeError, match='at most'):
        TradeRequest(
            symbol='BTC', side=TradeSide.BUY,
            price=Decimal('1'), quantity=Decimal('1.' + '0' * 40),
        )
