'''
Structured logging configuration for the PnL tracker.

Configures structlog with orjson serialization, asyncio-safe context
variable binding, and ISO 8601 UTC timestamps. Stdlib loggers used by
the ledger core are routed through the same JSON renderer, so core and
HTTP events share one format. Call configure_logging() once at process
startup before serving requests.
'''

import logging
import sys
from typing import Any, TextIO

import orjson
import structlog

__all__ = ['bind_context', 'clear_context', 'configure_logging', 'get_logger']


def _orjson_dumps_str(*args: Any, **kwargs: Any) -> str:

    '''
    Serialize to JSON string via orjson for stdlib ProcessorFormatter.

    Returns:
        str: JSON-encoded string
    '''

    return orjson.dumps(*args, **kwargs).decode()


def _shared_processors() -> list[structlog.types.Processor]:

    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt='iso', utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(log_level: str = 'INFO', stream: TextIO | None = None) -> None:

    '''
    Configure structlog and stdlib logging to emit one JSON object per line.

    Native structlog events and stdlib records (the ledger core logs
    through logging.getLogger) go to the same stream. Values orjson
    cannot encode, such as Decimal, are rendered with str().

    Args:
        log_level (str): Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream (TextIO | None): Destination, defaults to stdout

    Returns:
        None
    '''

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    target = stream if stream is not None else sys.stdout

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.processors.JSONRenderer(serializer=_orjson_dumps_str, default=str),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=target),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.JSONRenderer(serializer=_orjson_dumps_str, default=str),
        ],
        foreign_pre_chain=_shared_processors(),
    )

    handler = logging.StreamHandler(target)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)


def get_logger(name: str | None = None, **initial_values: Any) -> Any:

    '''
    Return a structlog logger, optionally pre-bound with fields.

    Args:
        name (str | None): Logger name recorded under the logger key
        **initial_values (Any): Fields bound to every event of this logger

    Returns:
        Any: structlog bound logger
    '''

    if name is not None:
        initial_values.setdefault('logger', name)
    return structlog.get_logger().bind(**initial_values)


def bind_context(**kwargs: Any) -> None:

    '''
    Bind fields to the current context for all subsequent log events.

    Args:
        **kwargs (Any): Fields to bind, e.g. request_id or owner_id
    '''

    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:

    structlog.contextvars.clear_contextvars()
