"""klaw-assert: assertions that report to a test context, for Python 3.13+.

Flat imports (preferred):
    from klaw_assert import assert_that, check, assert_equal, assert_no_error
    from klaw_assert import Success, Failure, cmp

Submodule imports (for organization):
    from klaw_assert.source import capture_call_site, recover_argument_text
    from klaw_assert.testing import RecordingT
"""

from klaw_assert import cmp

# Configuration
from klaw_assert._config import AssertConfig, get_config, init

# Message helpers
from klaw_assert._format import lazy

# Logging
from klaw_assert._logging import configure_logging

# Assertions
from klaw_assert.assert_ import (
    Comparison,
    Escalation,
    TestingT,
    assert_equal,
    assert_no_error,
    assert_that,
    check,
    check_equal,
    evaluate,
)

# Errors
from klaw_assert.errors import ComparisonTypeError, FailNow, SourceError

# Result types
from klaw_assert.result import Failure, Result, Success, result_from_error

# Source recovery
from klaw_assert.source import clear_source_cache

__all__ = [
    # Configuration
    'AssertConfig',
    # Assertions
    'Comparison',
    # Errors
    'ComparisonTypeError',
    'Escalation',
    'FailNow',
    # Result types
    'Failure',
    'Result',
    'SourceError',
    'Success',
    'TestingT',
    'assert_equal',
    'assert_no_error',
    'assert_that',
    'check',
    'check_equal',
    # Source recovery
    'clear_source_cache',
    'cmp',
    # Logging
    'configure_logging',
    'evaluate',
    'get_config',
    'init',
    # Message helpers
    'lazy',
    'result_from_error',
]
