"""Assertions and checks that report failures to a test context.

assert_that() and check() both accept a comparison and fail the test when the
comparison fails. assert_that() ends the test immediately (``t.fail_now()``);
check() marks the test as failed (``t.fail()``), returns the outcome and lets
the test carry on.

A comparison is one of:

- a ``bool``; on failure the asserted expression is recovered from the
  caller's source, e.g. ``assertion failed: total != 10 is false``;
- a zero-argument callable returning a Result (``Success()`` or
  ``Failure(message)``), such as those in ``klaw_assert.cmp``;
- a zero-argument callable returning ``(success, message)``.

Example:
    ```python
    from klaw_assert import assert_equal, assert_no_error, assert_that, check, cmp

    def test_everything(t):
        assert_that(t, ok)
        assert_that(t, not missing)
        assert_that(t, total != 10)
        assert_equal(t, count, 1)
        assert_no_error(t, err)
        assert_that(t, cmp.equal(msg, 'the message'), 'got %r', msg)
        if check(t, items):
            assert_that(t, items[0] == 'first')
    ```
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from klaw_assert import cmp
from klaw_assert._config import get_config
from klaw_assert._format import with_custom_message
from klaw_assert._logging import get_logger
from klaw_assert.errors import ComparisonTypeError, SourceError
from klaw_assert.result import Failure, Result, Success
from klaw_assert.source import (
    ArgumentFilter,
    CallSite,
    capture_call_site,
    filter_comparison_args,
    filter_exclude_first,
    format_call_args,
    select_arg,
)

__all__ = [
    'FAILURE_MESSAGE',
    'UNAVAILABLE_EXPRESSION',
    'Comparison',
    'Escalation',
    'TestingT',
    'assert_equal',
    'assert_no_error',
    'assert_that',
    'check',
    'check_equal',
    'evaluate',
]

logger = get_logger(__name__)

FAILURE_MESSAGE = 'assertion failed: '
UNAVAILABLE_EXPRESSION = '<expression unavailable>'

type Comparison = bool | Callable[[], Result] | Callable[[], tuple[bool, str]]

# evaluate(t, escalation, comparison, ...)
_filter_evaluate_args = select_arg(2)


@runtime_checkable
class TestingT(Protocol):
    """The subset of a test context used to report failures."""

    def fail(self) -> None:
        """Mark the test as failed and continue."""
        ...

    def fail_now(self) -> None:
        """Mark the test as failed and stop it. Does not return."""
        ...

    def log(self, *args: Any) -> None:
        """Record a message in the test's output."""
        ...


class Escalation(Enum):
    """What to do with the test context once a failure has been logged."""

    ASSERT = 'assert'
    CHECK = 'check'

    def apply(self, t: TestingT) -> None:
        """Fail ``t``: halt it for ASSERT, mark it failed for CHECK."""
        if self is Escalation.ASSERT:
            t.fail_now()
        else:
            t.fail()


def _source_of_bool(t: TestingT, arg_filter: ArgumentFilter, call_site: CallSite) -> str:
    if not get_config().source_recovery:
        return UNAVAILABLE_EXPRESSION
    try:
        return format_call_args(call_site, arg_filter)
    except SourceError as exc:
        logger.debug('source.recovery_failed', kind=type(exc).__name__, error=str(exc))
        t.log(str(exc))
        return UNAVAILABLE_EXPRESSION


def _evaluate(
    t: TestingT,
    escalation: Escalation,
    arg_filter: ArgumentFilter,
    comparison: Comparison,
    msg_and_args: tuple[Any, ...],
    call_site: CallSite,
) -> bool:
    """Run a comparison and report a failure to ``t``.

    Every public entry point is a fixed parameterization of this function.

    Returns:
        True if the comparison succeeded.

    Raises:
        ComparisonTypeError: If ``comparison`` is not a supported shape.
    """
    __tracebackhide__ = True

    match comparison:
        case bool():
            if comparison:
                return True
            source = _source_of_bool(t, arg_filter, call_site)
            message = f'{FAILURE_MESSAGE}{source} is false'
        case _ if callable(comparison):
            outcome = comparison()
            match outcome:
                case Success():
                    return True
                case Failure(message=failure):
                    message = FAILURE_MESSAGE + failure
                case (bool() as success, str() as failure):
                    # Legacy comparison without a Result type
                    if success:
                        return True
                    message = FAILURE_MESSAGE + failure
                case _:
                    raise ComparisonTypeError(outcome, returned=True)
        case _:
            raise ComparisonTypeError(comparison)

    message = with_custom_message(message, *msg_and_args)
    t.log(message)
    logger.debug(
        'assertion.failed',
        message=message,
        escalation=escalation.value,
        arg_filter=getattr(arg_filter, '__name__', repr(arg_filter)),
        filename=call_site.filename,
        lineno=call_site.lineno,
        function=call_site.function,
    )
    escalation.apply(t)
    return False


def evaluate(t: TestingT, escalation: Escalation, comparison: Comparison, *msg_and_args: Any) -> bool:
    """Run a comparison and fail ``t`` according to ``escalation`` if it fails.

    Args:
        t: The test context.
        escalation: Escalation.ASSERT halts the test, Escalation.CHECK continues.
        comparison: A bool, a Result-returning callable or a legacy callable.
        *msg_and_args: Extra message, either a value, a printf-style template
            and its args, or a zero-argument callable producing the template.

    Returns:
        True if the comparison succeeded.
    """
    __tracebackhide__ = True
    call_site = capture_call_site(callee='evaluate')
    return _evaluate(t, escalation, _filter_evaluate_args, comparison, msg_and_args, call_site)


def assert_that(t: TestingT, comparison: Comparison, *msg_and_args: Any) -> None:
    """Fail the test and stop it immediately if the comparison fails."""
    __tracebackhide__ = True
    call_site = capture_call_site(callee='assert_that')
    _evaluate(t, Escalation.ASSERT, filter_comparison_args, comparison, msg_and_args, call_site)


def check(t: TestingT, comparison: Comparison, *msg_and_args: Any) -> bool:
    """Mark the test as failed if the comparison fails, and return the outcome."""
    __tracebackhide__ = True
    call_site = capture_call_site(callee='check')
    return _evaluate(t, Escalation.CHECK, filter_comparison_args, comparison, msg_and_args, call_site)


def assert_equal(t: TestingT, x: Any, y: Any, *msg_and_args: Any) -> None:
    """Fail the test and stop it immediately unless ``x == y``.

    Equivalent to ``assert_that(t, cmp.equal(x, y))``.
    """
    __tracebackhide__ = True
    call_site = capture_call_site(callee='assert_equal')
    _evaluate(t, Escalation.ASSERT, filter_exclude_first, cmp.equal(x, y), msg_and_args, call_site)


def check_equal(t: TestingT, x: Any, y: Any, *msg_and_args: Any) -> bool:
    """Mark the test as failed unless ``x == y``, and return the outcome."""
    __tracebackhide__ = True
    call_site = capture_call_site(callee='check_equal')
    return _evaluate(t, Escalation.CHECK, filter_exclude_first, cmp.equal(x, y), msg_and_args, call_site)


def assert_no_error(t: TestingT, err: BaseException | None, *msg_and_args: Any) -> None:
    """Fail the test and stop it immediately if ``err`` is not None.

    Equivalent to ``assert_that(t, cmp.no_error(err))``.
    """
    __tracebackhide__ = True
    call_site = capture_call_site(callee='assert_no_error')
    _evaluate(t, Escalation.ASSERT, filter_exclude_first, cmp.no_error(err), msg_and_args, call_site)
