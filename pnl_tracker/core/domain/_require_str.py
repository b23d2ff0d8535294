'''
Validate that a string field is non-empty.

Shared validation helper used by the domain dataclasses to enforce
non-empty string invariants at construction time.
'''

from __future__ import annotations

__all__ = ['_require_str']


def _require_str(cls: str, field: str, value: str) -> None:

    '''
    Validate that a string field is a non-empty str.

    Args:
        cls (str): Class name for error context.
        field (str): Field name for error context.
        value (str): Value to validate.
    '''

    if not isinstance(value, str) or not value:
        msg = f'{cls}.{field} must be a non-empty string'
        raise ValueError(msg)
