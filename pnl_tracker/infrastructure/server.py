'''
Process entrypoint for the PnL tracker HTTP service.

Loads Settings from the environment, configures logging, constructs
the Ledger owned by this process, and serves it until interrupted.
'''

from __future__ import annotations

from aiohttp import web

from pnl_tracker.core.ledger import Ledger
from pnl_tracker.infrastructure.config import Settings
from pnl_tracker.infrastructure.http_api import create_app
from pnl_tracker.infrastructure.observability import configure_logging, get_logger

__all__ = ['build_app', 'main']


def build_app(settings: Settings) -> web.Application:

    '''
    Construct the Ledger and the application serving it.

    Args:
        settings (Settings): Process configuration

    Returns:
        web.Application: Application ready to be run
    '''

    ledger = Ledger(owner_id=settings.owner_id, market_prices=settings.market_prices)
    return create_app(ledger, cors_origins=settings.cors_origins)


def main() -> None:

    settings = Settings.from_env()
    configure_logging(settings.log_level)

    log = get_logger(__name__)
    log.info(
        'service_starting',
        host=settings.host,
        port=settings.port,
        owner_id=settings.owner_id,
        priced_symbols=settings.market_prices.symbols(),
    )

    web.run_app(build_app(settings), host=settings.host, port=settings.port, print=None)


if __name__ == '__main__':
    main()
