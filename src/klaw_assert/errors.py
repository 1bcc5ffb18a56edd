"""Error types: source recovery failures, contract violations and the halt signal.

Source recovery errors come in pairs like the rest of klaw: an exception for
raise-based code and a msgspec struct for records that get logged or encoded.
"""

from __future__ import annotations

from typing import Any

import msgspec

__all__ = [
    'ArgumentOutOfRange',
    'ArgumentOutOfRangeError',
    'CallNotFound',
    'CallNotFoundError',
    'ComparisonTypeError',
    'FailNow',
    'SourceError',
    'SourceParse',
    'SourceParseError',
    'SourceUnavailable',
    'SourceUnavailableError',
]


# --- Contract violations ---


class ComparisonTypeError(TypeError):
    """A comparison was not a bool, a Result-returning callable or a legacy callable.

    This signals a bug in the test code, not a failed assertion, so it is
    raised straight through to the caller.
    """

    def __init__(self, value: Any, *, returned: bool = False) -> None:
        self.value = value
        self.returned = returned
        if returned:
            msg = f'comparison callable must return Success, Failure or (bool, str), not {type(value).__name__}'
        else:
            msg = f'comparison arg must be bool or a comparison callable, not {type(value).__name__}'
        super().__init__(msg)


# --- Halt ---


class FailNow(BaseException):  # noqa: N818
    """Raised by TestingT.fail_now() to unwind the current test.

    Derives from BaseException so a broad ``except Exception`` in the code
    under test cannot swallow it. The name mirrors the operation, not an error.
    """

    __slots__ = ('_messages',)

    def __init__(self, messages: list[str] | None = None) -> None:
        """Initialize FailNow with the messages logged before halting.

        Args:
            messages: Log lines recorded for the test so far.
        """
        self._messages = list(messages or [])
        super().__init__('\n'.join(self._messages) or 'test halted')

    @property
    def messages(self) -> list[str]:
        """The log lines recorded before the halt."""
        return self._messages


# --- Source recovery errors ---


class SourceError(Exception):
    """Base class for failures to recover the source text of a call."""

    def __init__(self, filename: str, lineno: int, detail: str) -> None:
        self.filename = filename
        self.lineno = lineno
        self.detail = detail
        super().__init__(f'{filename}:{lineno}: {detail}')


class SourceUnavailable(msgspec.Struct, frozen=True, gc=False):
    """Source file could not be read - struct variant."""

    filename: str
    lineno: int
    reason: str | None = None

    def to_exception(self) -> SourceUnavailableError:
        """Convert to exception for raise-based code."""
        return SourceUnavailableError(self.filename, self.lineno, self.reason)


class SourceUnavailableError(SourceError):
    """Source file could not be read - exception variant."""

    def __init__(self, filename: str, lineno: int, reason: str | None = None) -> None:
        self.reason = reason
        detail = 'failed to read source file'
        if reason:
            detail = f'{detail}: {reason}'
        super().__init__(filename, lineno, detail)

    def to_struct(self) -> SourceUnavailable:
        """Convert to struct for logging and encoding."""
        return SourceUnavailable(self.filename, self.lineno, self.reason)


class SourceParse(msgspec.Struct, frozen=True, gc=False):
    """Source file did not parse - struct variant."""

    filename: str
    lineno: int
    reason: str

    def to_exception(self) -> SourceParseError:
        """Convert to exception for raise-based code."""
        return SourceParseError(self.filename, self.lineno, self.reason)


class SourceParseError(SourceError):
    """Source file did not parse - exception variant."""

    def __init__(self, filename: str, lineno: int, reason: str) -> None:
        self.reason = reason
        super().__init__(filename, lineno, f'failed to parse source file: {reason}')

    def to_struct(self) -> SourceParse:
        """Convert to struct for logging and encoding."""
        return SourceParse(self.filename, self.lineno, self.reason)


class CallNotFound(msgspec.Struct, frozen=True, gc=False):
    """No call expression at the recorded line - struct variant."""

    filename: str
    lineno: int

    def to_exception(self) -> CallNotFoundError:
        """Convert to exception for raise-based code."""
        return CallNotFoundError(self.filename, self.lineno)


class CallNotFoundError(SourceError):
    """No call expression at the recorded line - exception variant."""

    def __init__(self, filename: str, lineno: int) -> None:
        super().__init__(filename, lineno, 'failed to find call expression')

    def to_struct(self) -> CallNotFound:
        """Convert to struct for logging and encoding."""
        return CallNotFound(self.filename, self.lineno)


class ArgumentOutOfRange(msgspec.Struct, frozen=True, gc=False):
    """Selected argument is not present in the call - struct variant."""

    filename: str
    lineno: int
    nargs: int

    def to_exception(self) -> ArgumentOutOfRangeError:
        """Convert to exception for raise-based code."""
        return ArgumentOutOfRangeError(self.filename, self.lineno, self.nargs)


class ArgumentOutOfRangeError(SourceError):
    """Selected argument is not present in the call - exception variant."""

    def __init__(self, filename: str, lineno: int, nargs: int) -> None:
        self.nargs = nargs
        super().__init__(filename, lineno, f'no argument selected from call with {nargs} args')

    def to_struct(self) -> ArgumentOutOfRange:
        """Convert to struct for logging and encoding."""
        return ArgumentOutOfRange(self.filename, self.lineno, self.nargs)
