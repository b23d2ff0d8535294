'''
Decimal context and input bounds for ledger arithmetic.

Prices and quantities are limited in magnitude and scale so that sums,
differences and products of them are exact within LEDGER_CONTEXT.
Only averages are rounded, in AVERAGE_CONTEXT.
'''

from __future__ import annotations

from decimal import Context, Decimal, DivisionByZero, InvalidOperation, Overflow

__all__ = [
    'AVERAGE_CONTEXT',
    'LEDGER_CONTEXT',
    'MAX_ADJUSTED_EXPONENT',
    'MIN_EXPONENT',
    '_bounded',
]

# At most 10**15 in magnitude, at most 30 fractional digits.
MAX_ADJUSTED_EXPONENT = 15
MIN_EXPONENT = -30

# A product of two bounded values spans at most 92 digits.
LEDGER_CONTEXT = Context(prec=120, traps=[InvalidOperation, DivisionByZero, Overflow])
AVERAGE_CONTEXT = Context(prec=28, traps=[InvalidOperation, DivisionByZero, Overflow])

_ONE = Decimal(1)


def _bounded(value: Decimal) -> Decimal | None:

    '''
    Return value in canonical form, or None if it exceeds the ledger bounds.

    Trailing fractional zeros beyond MIN_EXPONENT are dropped; any other
    representation is kept as given.

    Args:
        value (Decimal): Finite value to check

    Returns:
        Decimal | None: Equal value within bounds, or None
    '''

    if not MIN_EXPONENT <= value.adjusted() <= MAX_ADJUSTED_EXPONENT:
        return None

    stripped = value.normalize(LEDGER_CONTEXT)
    exponent = stripped.as_tuple().exponent
    if (
        stripped != value
        or not isinstance(exponent, int)
        or exponent < MIN_EXPONENT
    ):
        return None

    current = value.as_tuple().exponent
    if isinstance(current, int) and current < MIN_EXPONENT:
        return stripped.quantize(_ONE, context=LEDGER_CONTEXT) if exponent > 0 else stripped

    return value
