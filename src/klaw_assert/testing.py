"""A standalone test context that records what the assertions report.

RecordingT works without any test runner. It is what klaw-assert's own tests
use, and it suits custom harnesses that drive test functions themselves:

    ```python
    from klaw_assert import FailNow
    from klaw_assert.testing import RecordingT

    t = RecordingT('test_total')
    try:
        test_total(t)
    except FailNow:
        pass
    print(t.failed, t.messages)
    ```
"""

from __future__ import annotations

from typing import Any

from klaw_assert.errors import FailNow

__all__ = ['RecordingT']


class RecordingT:
    """TestingT implementation that keeps the log and the failure state in memory.

    Attributes:
        name: Display name of the test.
        messages: Lines passed to log(), in order.
        failed: Whether fail() or fail_now() has been called.
        halted: Whether fail_now() has been called.
        fail_calls: Number of fail() calls.
        fail_now_calls: Number of fail_now() calls.
    """

    def __init__(self, name: str = '') -> None:
        self.name = name
        self.messages: list[str] = []
        self.failed = False
        self.halted = False
        self.fail_calls = 0
        self.fail_now_calls = 0

    def fail(self) -> None:
        self.fail_calls += 1
        self.failed = True

    def fail_now(self) -> None:
        """Mark the test failed and unwind it by raising FailNow."""
        self.fail_now_calls += 1
        self.failed = True
        self.halted = True
        raise FailNow(self.messages)

    def log(self, *args: Any) -> None:
        self.messages.append(' '.join(str(arg) for arg in args))

    @property
    def output(self) -> str:
        """All logged lines joined with newlines."""
        return '\n'.join(self.messages)

    def __repr__(self) -> str:
        return f'RecordingT(name={self.name!r}, failed={self.failed}, messages={len(self.messages)})'
