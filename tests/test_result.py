"""Tests for the Success / Failure result types and the bundled comparisons."""

import msgspec
import pytest
from hypothesis import given

from klaw_assert import Failure, Success, cmp, result_from_error
from klaw_assert.result import decode_result, encode_result, is_failure, is_success
from tests.strategies import results


class TestSuccess:
    """Tests for the Success variant."""

    def test_predicates(self):
        r = Success()
        assert r.is_success()
        assert not r.is_failure()
        assert bool(r)

    def test_equality(self):
        assert Success() == Success()
        assert Success() != Failure('x')

    def test_repr(self):
        assert repr(Success()) == 'Success()'


class TestFailure:
    """Tests for the Failure variant."""

    def test_predicates(self):
        r = Failure('bad')
        assert r.is_failure()
        assert not r.is_success()
        assert not bool(r)

    def test_message(self):
        assert Failure('bad').message == 'bad'

    def test_empty_message_rejected(self):
        """A failure must say why it failed."""
        with pytest.raises(ValueError, match='must not be empty'):
            Failure('')

    def test_frozen(self):
        r = Failure('bad')
        with pytest.raises(AttributeError):
            r.message = 'other'  # type: ignore[misc]

    def test_repr(self):
        assert repr(Failure('bad')) == "Failure('bad')"

    def test_pattern_matching(self):
        """Failure supports positional and keyword class patterns."""
        match Failure('why'):
            case Failure(message):
                assert message == 'why'
            case _:
                pytest.fail('no match')

        match Success():
            case Failure(message=_):
                pytest.fail('matched Failure')
            case Success():
                pass


class TestTypeGuards:
    """Tests for is_success / is_failure."""

    def test_guards(self):
        assert is_success(Success())
        assert not is_success(Failure('x'))
        assert is_failure(Failure('x'))
        assert not is_failure(Success())


class TestEncoding:
    """Tests for tagged JSON encoding."""

    def test_failure_is_tagged(self):
        assert msgspec.json.decode(encode_result(Failure('bad'))) == {'type': 'failure', 'message': 'bad'}

    def test_success_is_tagged(self):
        assert msgspec.json.decode(encode_result(Success())) == {'type': 'success'}

    def test_decode_rejects_empty_failure(self):
        with pytest.raises(msgspec.ValidationError):
            decode_result(b'{"type": "failure", "message": ""}')

    @given(results)
    def test_decode_restores_variant(self, r):
        assert decode_result(encode_result(r)) == r


class TestResultFromError:
    """Tests for result_from_error."""

    def test_none_is_success(self):
        assert result_from_error(None) == Success()

    def test_error_text(self):
        assert result_from_error(ValueError('boom')) == Failure('boom')

    def test_error_without_text_uses_type_name(self):
        assert result_from_error(KeyboardInterrupt()) == Failure('KeyboardInterrupt')


class TestComparisons:
    """Tests for cmp.equal and cmp.no_error."""

    def test_equal_success(self):
        assert cmp.equal([1, 2], [1, 2])() == Success()

    def test_equal_failure_names_values_and_types(self):
        assert cmp.equal(1, '1')() == Failure("1 (int) != '1' (str)")

    def test_equal_is_lazy(self):
        """Values are only compared when the comparison is called."""

        class Loud:
            compared = False

            def __eq__(self, other):
                Loud.compared = True
                return True

            __hash__ = object.__hash__

        compare = cmp.equal(Loud(), Loud())
        assert not Loud.compared
        assert compare() == Success()
        assert Loud.compared

    def test_no_error_success(self):
        assert cmp.no_error(None)() == Success()

    def test_no_error_failure(self):
        assert cmp.no_error(OSError('disk full'))() == Failure('error is not None: disk full')
