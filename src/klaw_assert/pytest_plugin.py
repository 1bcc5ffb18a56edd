"""pytest integration: the ``t`` fixture.

Registered through the ``pytest11`` entry point, so any test can ask for a
test context:

    ```python
    from klaw_assert import assert_that, check

    def test_total(t):
        total = compute()
        check(t, total > 0)          # marks the test failed, keeps going
        assert_that(t, total != 10)  # fails the test right here
    ```

``t.fail_now()`` fails the test immediately through ``pytest.fail``.
``t.fail()`` only records the failure; once the test function returns it
is failed with every line that was logged.
"""

from __future__ import annotations

import pytest

from klaw_assert.testing import RecordingT

__all__ = ['PytestT', 'pytest_pyfunc_call', 't']


class PytestT(RecordingT):
    """RecordingT that halts through pytest's own failure outcome."""

    def fail_now(self) -> None:
        __tracebackhide__ = True
        self.fail_now_calls += 1
        self.failed = True
        self.halted = True
        pytest.fail(self.output or 'test halted', pytrace=False)


@pytest.fixture
def t(request: pytest.FixtureRequest) -> PytestT:
    """Test context for klaw-assert assertions."""
    return PytestT(request.node.nodeid)


@pytest.hookimpl(wrapper=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> object:
    """Fail a test whose context recorded check() failures but was never halted."""
    result = yield
    ctx = pyfuncitem.funcargs.get('t')
    if isinstance(ctx, PytestT) and ctx.failed and not ctx.halted:
        pytest.fail(ctx.output or 'test failed', pytrace=False)
    return result
