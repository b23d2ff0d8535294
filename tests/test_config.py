'''
Tests for pnl_tracker.infrastructure.config.Settings.
'''

from __future__ import annotations

from decimal import Decimal

import pytest

from pnl_tracker.infrastructure.config import Settings


def test_defaults_from_empty_environment() -> None:
    settings = Settings.from_env({})
    assert settings.port == 3001
    assert settings.host == '0.0.0.0'
    assert settings.log_level == 'INFO'
    assert settings.cors_origins == ('*',)
    assert settings.owner_id == 'default'
    assert settings.market_prices.price_for('BTC') == Decimal('50000')


def test_reads_environment_values() -> None:
    settings = Settings.from_env({
        'PORT': '8080',
        'PNL_HOST': '127.0.0.1',
        'PNL_LOG_LEVEL': 'debug',
        'PNL_CORS_ORIGINS': 'http://localhost:5173, https://app.example.com',
        'PNL_OWNER_ID': 'alice',
        'PNL_MARKET_PRICES': '{"BTC": "60000", "sol": 150}',
    })
    assert settings.port == 8080
    assert settings.host == '127.0.0.1'
    assert settings.log_level == 'DEBUG'
    assert settings.cors_origins == ('http://localhost:5173', 'https://app.example.com')
    assert settings.owner_id == 'alice'
    assert settings.market_prices.price_for('BTC') == Decimal('60000')
    assert settings.market_prices.price_for('SOL') == Decimal('150')
    assert settings.market_prices.price_for('ETH') is None


@pytest.mark.parametrize('bad', ['abc', '0', '70000'])
def test_rejects_bad_port(bad: str) -> None:
    with pytest.raises(ValueError, match='PORT'):
        Settings.from_env({'PORT': bad})


def test_rejects_unknown_log_level() -> None:
    with pytest.raises(ValueError, match='log_level'):
        Settings.from_env({'PNL_LOG_LEVEL': 'chatty'})


@pytest.mark.parametrize('bad', ['not json', '[1, 2]', '{"BTC": -1}'])
def test_rejects_bad_market_prices(bad: str) -> None:
    with pytest.raises(ValueError):
        Settings.from_env({'PNL_MARKET_PRICES': bad})


def test_rejects_empty_cors_origins() -> None:
    with pytest.raises(ValueError, match='cors_origins'):
        Settings.from_env({'PNL_CORS_ORIGINS': ' , '})


def test_settings_frozen() -> None:
    settings = Settings()
    with pytest.raises(AttributeError):
        settings.port = 1  # type: ignore[misc]
