'''
Environment-driven process configuration.

Settings are read once at startup. A .env file in the working
directory is loaded first; real environment variables take precedence.
'''

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

import orjson
from dotenv import load_dotenv

from pnl_tracker.core.market_prices import DEFAULT_MARKET_PRICES, MarketPrices

__all__ = ['Settings']

_DEFAULT_PORT = 3001
_DEFAULT_HOST = '0.0.0.0'
_DEFAULT_LOG_LEVEL = 'INFO'
_DEFAULT_OWNER_ID = 'default'
_LOG_LEVELS = frozenset({'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'})
_MAX_PORT = 65535


def _parse_port(raw: str) -> int:

    try:
        port = int(raw)
    except ValueError as exc:
        msg = f'PORT must be an integer (got {raw!r})'
        raise ValueError(msg) from exc

    if not 0 < port <= _MAX_PORT:
        msg = f'PORT must be between 1 and {_MAX_PORT} (got {port})'
        raise ValueError(msg)

    return port


def _parse_market_prices(raw: str) -> MarketPrices:

    '''
    Parse a JSON object of symbol to price into a MarketPrices table.

    Args:
        raw (str): JSON object, e.g. {"BTC": "50000", "ETH": 2500}

    Returns:
        MarketPrices: Parsed price table
    '''

    try:
        decoded = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        msg = 'PNL_MARKET_PRICES must be a JSON object'
        raise ValueError(msg) from exc

    if not isinstance(decoded, dict):
        msg = 'PNL_MARKET_PRICES must be a JSON object'
        raise ValueError(msg)

    return MarketPrices(decoded)


@dataclass(frozen=True)
class Settings:

    '''
    Process configuration for the PnL tracker service.

    Args:
        host (str): Interface the HTTP server binds to.
        port (int): Listen port.
        log_level (str): Minimum log level.
        cors_origins (tuple[str, ...]): Allowed CORS origins, '*' for any.
        owner_id (str): Owner of the ledger served by this process.
        market_prices (MarketPrices): Reference prices for unrealized PnL.
    '''

    host: str = _DEFAULT_HOST
    port: int = _DEFAULT_PORT
    log_level: str = _DEFAULT_LOG_LEVEL
    cors_origins: tuple[str, ...] = ('*',)
    owner_id: str = _DEFAULT_OWNER_ID
    market_prices: MarketPrices = field(default_factory=MarketPrices)

    def __post_init__(self) -> None:

        '''Validate invariants at construction time.'''

        if self.log_level not in _LOG_LEVELS:
            msg = f'Settings.log_level must be one of {sorted(_LOG_LEVELS)}'
            raise ValueError(msg)

        if not self.owner_id:
            msg = 'Settings.owner_id must be a non-empty string'
            raise ValueError(msg)

        if not self.cors_origins:
            msg = 'Settings.cors_origins must not be empty'
            raise ValueError(msg)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:

        '''
        Build Settings from environment variables.

        Reads PORT, PNL_HOST, PNL_LOG_LEVEL, PNL_CORS_ORIGINS,
        PNL_OWNER_ID and PNL_MARKET_PRICES. When environ is None the
        process environment is used after loading .env.

        Args:
            environ (Mapping[str, str] | None): Source of variables

        Returns:
            Settings: Parsed configuration
        '''

        if environ is None:
            load_dotenv()
            environ = os.environ

        origins = tuple(
            origin.strip()
            for origin in environ.get('PNL_CORS_ORIGINS', '*').split(',')
            if origin.strip()
        )

        raw_prices = environ.get('PNL_MARKET_PRICES')
        market_prices = (
            _parse_market_prices(raw_prices) if raw_prices
            else MarketPrices(DEFAULT_MARKET_PRICES)
        )

        return cls(
            host=environ.get('PNL_HOST', _DEFAULT_HOST),
            port=_parse_port(environ.get('PORT', str(_DEFAULT_PORT))),
            log_level=environ.get('PNL_LOG_LEVEL', _DEFAULT_LOG_LEVEL).upper(),
            cors_origins=origins,
            owner_id=environ.get('PNL_OWNER_ID', _DEFAULT_OWNER_ID),
            market_prices=market_prices,
        )
