'''
aiohttp application exposing a Ledger over JSON HTTP.

Thin transport layer: routes parse request bodies, call into the
Ledger, and shape its read models into camelCase JSON. The Ledger is
injected through the application, never held in a module global.
Decimals are rendered as strings so no precision is lost on the wire.
'''

from __future__ import annotations

import uuid
from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import orjson
from aiohttp import web

from pnl_tracker.core.domain.errors import InsufficientBalanceError, LedgerError
from pnl_tracker.core.domain.pnl import PnLReport, PnLSummary, PositionView
from pnl_tracker.core.domain.trade import Trade
from pnl_tracker.core.ledger import Ledger
from pnl_tracker.infrastructure.observability import bind_context, clear_context, get_logger

__all__ = ['CORS_ORIGINS_KEY', 'LEDGER_KEY', 'create_app']

LEDGER_KEY = web.AppKey('ledger', Ledger)
CORS_ORIGINS_KEY = web.AppKey('cors_origins', tuple)

_REQUIRED_FIELDS = ('symbol', 'side', 'price', 'quantity')
_HTTP_OK = 200
_HTTP_CREATED = 201
_HTTP_NO_CONTENT = 204
_HTTP_BAD_REQUEST = 400
_HTTP_SERVER_ERROR = 500
_CORS_ALLOW_METHODS = 'GET, POST, OPTIONS'
_CORS_ALLOW_HEADERS = 'Content-Type, Authorization'

_log = get_logger(__name__)

_Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def _serialize_default(obj: Any) -> Any:

    '''
    Serialize Decimal to string for orjson.

    Args:
        obj (Any): Object that orjson cannot serialize natively

    Returns:
        Any: JSON-serializable representation
    '''

    if isinstance(obj, Decimal):
        return str(obj)
    msg = f"Object of type {type(obj).__name__} is not JSON serializable"
    raise TypeError(msg)


def _json_response(data: Any, status: int = _HTTP_OK) -> web.Response:

    return web.Response(
        body=orjson.dumps(data, default=_serialize_default),
        status=status,
        content_type='application/json',
    )


def _error_response(error: str, status: int, **extra: Any) -> web.Response:

    return _json_response({'success': False, 'error': error, **extra}, status=status)


def _trade_to_dict(trade: Trade) -> dict[str, Any]:

    return {
        'id': trade.trade_id,
        'symbol': trade.symbol,
        'side': trade.side.value,
        'price': trade.price,
        'quantity': trade.quantity,
        'timestamp': trade.timestamp,
        'value': trade.value,
    }


def _position_to_dict(view: PositionView) -> dict[str, Any]:

    return {
        'quantity': view.quantity,
        'averageCost': view.average_cost,
        'totalCost': view.total_cost,
        'marketPrice': view.market_price,
        'currentValue': view.current_value,
        'unrealizedPnL': view.unrealized_pnl,
        'lotCount': view.lot_count,
    }


def _summary_to_dict(summary: PnLSummary) -> dict[str, Any]:

    return {'totalPnL': summary.total_pnl, 'bySymbol': dict(summary.by_symbol)}


def _pnl_to_dict(report: PnLReport) -> dict[str, Any]:

    return {
        'realized': _summary_to_dict(report.realized),
        'unrealized': _summary_to_dict(report.unrealized),
        'total': {
            'totalPnL': report.total.total_pnl,
            'breakdown': {
                symbol: {
                    'realized': entry.realized,
                    'unrealized': entry.unrealized,
                    'total': entry.total,
                }
                for symbol, entry in report.total.breakdown.items()
            },
        },
    }


async def _post_trade(request: web.Request) -> web.Response:

    '''Record a trade from a JSON body.'''

    try:
        body = await request.json(loads=orjson.loads)
    except ValueError:
        return _error_response('Invalid JSON body', _HTTP_BAD_REQUEST)

    if not isinstance(body, dict) or not all(body.get(key) for key in _REQUIRED_FIELDS):
        return _error_response('Missing required fields', _HTTP_BAD_REQUEST)

    payload = {key: body.get(key) for key in (*_REQUIRED_FIELDS, 'timestamp')}
    trade = request.app[LEDGER_KEY].record_trade(payload)

    _log.info('trade_accepted', trade_id=trade.trade_id, symbol=trade.symbol, side=trade.side.value)

    return _json_response(
        {'success': True, 'message': 'Trade successful', 'data': _trade_to_dict(trade)},
        status=_HTTP_CREATED,
    )


async def _list_trades(request: web.Request) -> web.Response:

    trades = request.app[LEDGER_KEY].list_trades()
    return _json_response({
        'success': True,
        'count': len(trades),
        'data': [_trade_to_dict(trade) for trade in trades],
    })


async def _get_portfolio(request: web.Request) -> web.Response:

    '''Return every position with aggregate value and cost.'''

    ledger = request.app[LEDGER_KEY]
    positions = ledger.get_positions()
    summary = ledger.get_portfolio_summary()

    return _json_response({
        'success': True,
        'summary': {
            'totalValue': summary.total_value,
            'totalCost': summary.total_cost,
            'numberOfPositions': summary.number_of_positions,
        },
        'positions': {symbol: _position_to_dict(view) for symbol, view in positions.items()},
    })


async def _get_pnl(request: web.Request) -> web.Response:

    report = request.app[LEDGER_KEY].get_pnl()
    return _json_response({'success': True, 'data': _pnl_to_dict(report)})


async def _health(request: web.Request) -> web.Response:

    return _json_response({'status': 'OK', 'timestamp': datetime.now(timezone.utc)})


@web.middleware
async def _context_middleware(request: web.Request, handler: _Handler) -> web.StreamResponse:

    '''Bind a request id and path to every log event of the request.'''

    clear_context()
    bind_context(request_id=uuid.uuid4().hex, method=request.method, path=request.path)
    try:
        return await handler(request)
    finally:
        clear_context()


@web.middleware
async def _cors_middleware(request: web.Request, handler: _Handler) -> web.StreamResponse:

    '''Answer preflight requests and attach CORS headers to every response.'''

    if request.method == 'OPTIONS':
        response: web.StreamResponse = web.Response(status=_HTTP_NO_CONTENT)
        response.headers['Access-Control-Allow-Methods'] = _CORS_ALLOW_METHODS
        response.headers['Access-Control-Allow-Headers'] = _CORS_ALLOW_HEADERS
    else:
        response = await handler(request)

    origins = request.app[CORS_ORIGINS_KEY]
    origin = request.headers.get('Origin')
    if '*' in origins:
        response.headers['Access-Control-Allow-Origin'] = '*'
    elif origin is not None and origin in origins:
        response.headers['Access-Control-Allow-Origin'] = origin
        response.headers['Vary'] = 'Origin'

    return response


@web.middleware
async def _error_middleware(request: web.Request, handler: _Handler) -> web.StreamResponse:

    '''Translate ledger rejections to 400 and unexpected failures to 500.'''

    try:
        return await handler(request)
    except InsufficientBalanceError as exc:
        _log.warning('trade_rejected', reason='insufficient_balance', symbol=exc.symbol)
        return _error_response(
            exc.message,
            _HTTP_BAD_REQUEST,
            available=exc.available,
            requested=exc.requested,
        )
    except LedgerError as exc:
        _log.warning('trade_rejected', reason='invalid_trade', error=exc.message)
        return _error_response(exc.message, _HTTP_BAD_REQUEST)
    except web.HTTPException as exc:
        return _error_response(exc.reason, exc.status)
    except Exception as exc:
        _log.exception('request_failed')
        return _error_response(str(exc) or type(exc).__name__, _HTTP_SERVER_ERROR)


def create_app(ledger: Ledger, cors_origins: Iterable[str] = ('*',)) -> web.Application:

    '''
    Build the aiohttp application serving a ledger.

    Args:
        ledger (Ledger): Ledger owned by the hosting process
        cors_origins (Iterable[str]): Allowed CORS origins, '*' for any

    Returns:
        web.Application: Configured application
    '''

    app = web.Application(
        middlewares=[_context_middleware, _cors_middleware, _error_middleware],
    )
    app[LEDGER_KEY] = ledger
    app[CORS_ORIGINS_KEY] = tuple(cors_origins)

    app.router.add_post('/api/trades', _post_trade)
    app.router.add_get('/api/trades', _list_trades)
    app.router.add_get('/api/portfolio', _get_portfolio)
    app.router.add_get('/api/pnl', _get_pnl)
    app.router.add_get('/health', _health)

    return app
