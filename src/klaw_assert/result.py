"""Comparison results: the Success / Failure tagged union.

A structured comparison is a zero-argument callable returning a Result. The
two variants are msgspec Structs tagged with their kind, so a Result can be
encoded for reports and decoded back without losing the variant.

Example:
    ```python
    from klaw_assert.result import Failure, Success

    def positive(n: int):
        def compare():
            if n > 0:
                return Success()
            return Failure(f'{n} is not positive')

        return compare

    match positive(-1)():
        case Success():
            print('ok')
        case Failure(message):
            print(message)  # -1 is not positive
    ```
"""

from __future__ import annotations

from typing import TypeGuard

import msgspec

__all__ = [
    'Failure',
    'Result',
    'Success',
    'decode_result',
    'encode_result',
    'is_failure',
    'is_success',
    'result_from_error',
]


class Success(msgspec.Struct, frozen=True, gc=False, tag='success'):
    """The comparison held."""

    def is_success(self) -> bool:
        """Return True, this is the success variant."""
        return True

    def is_failure(self) -> bool:
        """Return False, this is not a failure."""
        return False

    def __bool__(self) -> bool:
        return True

    def __repr__(self) -> str:
        return 'Success()'


class Failure(msgspec.Struct, frozen=True, gc=False, tag='failure'):
    """The comparison did not hold.

    Attributes:
        message: Human-readable description of why the comparison failed.
            Never empty.
    """

    message: str

    def __post_init__(self) -> None:
        if not self.message:
            msg = 'Failure message must not be empty'
            raise ValueError(msg)

    def is_success(self) -> bool:
        """Return False, this is not a success."""
        return False

    def is_failure(self) -> bool:
        """Return True, this is the failure variant."""
        return True

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f'Failure({self.message!r})'


type Result = Success | Failure

_decoder = msgspec.json.Decoder(Success | Failure)
_encoder = msgspec.json.Encoder()


def is_success(r: Result) -> TypeGuard[Success]:
    """Type guard for the Success variant.

    Args:
        r: The Result to check.

    Returns:
        True if r is Success.
    """
    return isinstance(r, Success)


def is_failure(r: Result) -> TypeGuard[Failure]:
    """Type guard for the Failure variant.

    Args:
        r: The Result to check.

    Returns:
        True if r is Failure.
    """
    return isinstance(r, Failure)


def result_from_error(err: BaseException | None) -> Result:
    """Convert an optional exception into a Result.

    Args:
        err: The exception to report, or None.

    Returns:
        Success if err is None, otherwise Failure carrying the error text.
    """
    if err is None:
        return Success()
    return Failure(str(err) or type(err).__name__)


def encode_result(r: Result) -> bytes:
    """Encode a Result as tagged JSON, e.g. ``{"type":"failure","message":"..."}``."""
    return _encoder.encode(r)


def decode_result(data: bytes | str) -> Result:
    """Decode tagged JSON produced by encode_result back into a Result."""
    return _decoder.decode(data)
