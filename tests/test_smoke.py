"""Smoke tests for the public surface of klaw_assert."""

import klaw_assert
from klaw_assert import FailNow
from klaw_assert.testing import RecordingT


def test_all_exports_resolve():
    for name in klaw_assert.__all__:
        assert hasattr(klaw_assert, name), name


def test_recording_t_is_a_testing_t():
    assert isinstance(RecordingT(), klaw_assert.TestingT)


def test_plain_object_is_not_a_testing_t():
    assert not isinstance(object(), klaw_assert.TestingT)


def test_fail_now_escapes_broad_handlers():
    assert not issubclass(FailNow, Exception)
    assert issubclass(FailNow, BaseException)


def test_recording_t_state():
    t = RecordingT('smoke')
    t.log('first', 2)
    t.fail()
    assert t.failed
    assert not t.halted
    assert t.output == 'first 2'
    assert repr(t) == "RecordingT(name='smoke', failed=True, messages=1)"
