"""Tests for merging failure messages with extra message arguments."""

from klaw_assert._format import lazy, message, with_custom_message


class TestMessage:
    """Tests for message()."""

    def test_no_args(self):
        assert message() == ''

    def test_single_value(self):
        assert message('plain') == 'plain'

    def test_single_non_string(self):
        assert message(42) == '42'

    def test_single_value_not_formatted(self):
        """A lone message is used as is, even with printf directives."""
        assert message('100%d done') == '100%d done'

    def test_template_and_args(self):
        assert message('got %d of %s', 3, 'items') == 'got 3 of items'

    def test_mismatched_template_joins_parts(self):
        """Too many args for the template falls back to joining with spaces."""
        assert message('no directives', 1, 2) == 'no directives 1 2'

    def test_callable_template(self):
        calls = []

        def supplier():
            calls.append(1)
            return 'value=%s'

        assert message(supplier, 'x') == 'value=x'
        assert calls == [1]

    def test_lazy_wrapper(self):
        assert message(lazy(lambda: 'deferred')) == 'deferred'

    def test_bound_method_template(self):
        class Report:
            def render(self):
                return 'rows=%d'

        assert message(Report().render, 3) == 'rows=3'

    def test_class_rendered_not_called(self):
        """A class is a value to show, not a supplier to invoke."""
        assert message(int) == "<class 'int'>"

    def test_class_with_required_args_not_called(self):
        class Widget:
            def __init__(self, size):
                self.size = size

        assert message(Widget) == str(Widget)

    def test_function_needing_args_not_called(self):
        def scale(factor):
            return 'scaled'

        assert message(scale) == str(scale)

    def test_builtin_callable_not_called(self):
        assert message(len) == str(len)


class TestWithCustomMessage:
    """Tests for with_custom_message()."""

    def test_no_custom_message(self):
        assert with_custom_message('assertion failed: x') == 'assertion failed: x'

    def test_custom_appended_after_space(self):
        assert with_custom_message('assertion failed: x', 'context: %d', 5) == 'assertion failed: x context: 5'

    def test_empty_source(self):
        assert with_custom_message('', 'only custom') == 'only custom'

    def test_empty_custom(self):
        assert with_custom_message('base', '') == 'base'
