"""Comparisons used by the convenience assertions.

A comparison is a zero-argument callable returning a Result. Building one is
cheap; the values are only compared when the assertion evaluates it.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from klaw_assert.result import Failure, Result, Success, result_from_error

__all__ = ['equal', 'no_error']


def equal(x: Any, y: Any) -> Callable[[], Result]:
    """Succeed if ``x == y``.

    Example:
        ```python
        equal(1, 2)()
        # Failure('1 (int) != 2 (int)')
        ```
    """

    def compare() -> Result:
        if x == y:
            return Success()
        return Failure(f'{x!r} ({type(x).__name__}) != {y!r} ({type(y).__name__})')

    return compare


def no_error(err: BaseException | None) -> Callable[[], Result]:
    """Succeed if ``err`` is None."""

    def compare() -> Result:
        result = result_from_error(err)
        if isinstance(result, Failure):
            return Failure(f'error is not None: {result.message}')
        return result

    return compare
