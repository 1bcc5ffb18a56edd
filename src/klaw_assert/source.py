"""Recover the source text of the arguments passed to an assertion call.

The outermost public entry point captures its caller's position once with
capture_call_site(). On failure the captured CallSite is resolved back to the
call expression in the caller's source file, and the selected arguments are
rendered as they were written:

    ```python
    total = 10
    assert_that(t, total != 10)
    # -> "assertion failed: total != 10 is false"
    ```

Recovery is best effort. Every failure raises a SourceError subclass, which
the assertion engine converts into log text.
"""

from __future__ import annotations

import ast
import itertools
import linecache
import sys
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from types import CodeType

from klaw_assert._config import get_config
from klaw_assert._logging import get_logger
from klaw_assert.errors import (
    ArgumentOutOfRangeError,
    CallNotFoundError,
    SourceParseError,
    SourceUnavailableError,
)

__all__ = [
    'ArgumentFilter',
    'CallSite',
    'SourceCache',
    'capture_call_site',
    'clear_source_cache',
    'filter_comparison_args',
    'filter_exclude_first',
    'find_call',
    'format_call_args',
    'recover_argument_text',
    'select_arg',
]

logger = get_logger(__name__)

type ArgumentFilter = Callable[[Sequence[ast.expr]], Sequence[ast.expr]]


# -----------------------------------------------------------------------------
# Call sites
# -----------------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class CallSite:
    """Position of an assertion call in the caller's source.

    Attributes:
        filename: Source file of the calling frame.
        lineno: Line the frame was executing.
        function: Name of the calling function.
        code: Code object of the calling frame, used to resolve columns.
        lasti: Offset of the call instruction in ``code``, or -1.
        callee: Name of the entry point that was called, used to pick the
            right call when several share a line.
        parameters: Positional parameter names of the entry point, used to
            put keyword arguments back in their positions.
    """

    filename: str
    lineno: int
    function: str
    code: CodeType | None = None
    lasti: int = -1
    callee: str | None = None
    parameters: tuple[str, ...] = ()

    def position(self) -> tuple[int, int, int, int] | None:
        """Return (lineno, end_lineno, col_offset, end_col_offset) of the call, if known."""
        if self.code is None or self.lasti < 0:
            return None
        positions = self.code.co_positions()
        pos = next(itertools.islice(positions, self.lasti // 2, None), None)
        if pos is None or None in pos:
            return None
        return pos  # type: ignore[return-value]


def capture_call_site(depth: int = 1, *, callee: str | None = None) -> CallSite:
    """Capture the position of a caller further up the stack.

    Args:
        depth: How many frames above the function calling capture_call_site
            to look. 1 is that function's caller.
        callee: Name of the function whose call is being captured.

    Returns:
        The CallSite of the selected frame.
    """
    callee_code = sys._getframe(depth).f_code  # noqa: SLF001
    frame = sys._getframe(depth + 1)  # noqa: SLF001
    try:
        code = frame.f_code
        return CallSite(
            filename=code.co_filename,
            lineno=frame.f_lineno,
            function=code.co_name,
            code=code,
            lasti=frame.f_lasti,
            callee=callee,
            parameters=callee_code.co_varnames[: callee_code.co_argcount],
        )
    finally:
        del frame


# -----------------------------------------------------------------------------
# Argument filters
# -----------------------------------------------------------------------------


def filter_comparison_args(args: Sequence[ast.expr]) -> Sequence[ast.expr]:
    """Select the comparison argument, which follows the test context."""
    return list(args[1:2])


def filter_exclude_first(args: Sequence[ast.expr]) -> Sequence[ast.expr]:
    """Select every argument after the test context."""
    return list(args[1:])


def select_arg(position: int) -> ArgumentFilter:
    """Build a filter selecting the single argument at ``position``."""

    def select(args: Sequence[ast.expr]) -> Sequence[ast.expr]:
        return list(args[position : position + 1])

    select.__name__ = f'select_arg({position})'
    return select


# -----------------------------------------------------------------------------
# Parsed source cache
# -----------------------------------------------------------------------------


class SourceCache:
    """Parsed modules keyed by filename.

    An entry is reused only while the file's text is unchanged. Parsing
    happens outside the lock; two threads parsing the same file both store
    an equivalent tree, so the race is harmless.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, tuple[str, ast.Module]] = {}

    def parse(self, filename: str, source: str) -> ast.Module:
        """Return the parsed module for ``source``, reusing a cached tree when possible.

        Raises:
            SyntaxError: If the source does not parse.
        """
        with self._lock:
            entry = self._entries.get(filename)
        if entry is not None and entry[0] == source:
            logger.debug('source.parsed', filename=filename, cached=True)
            return entry[1]

        tree = ast.parse(source, filename)
        with self._lock:
            self._entries[filename] = (source, tree)
        logger.debug('source.parsed', filename=filename, cached=False)
        return tree

    def clear(self) -> None:
        """Drop every cached tree."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, filename: object) -> bool:
        with self._lock:
            return filename in self._entries


_cache = SourceCache()


def clear_source_cache() -> None:
    """Empty the process-wide parsed source cache."""
    _cache.clear()


# -----------------------------------------------------------------------------
# Recovery
# -----------------------------------------------------------------------------


def _read_source(call_site: CallSite) -> str:
    linecache.checkcache(call_site.filename)
    lines = linecache.getlines(call_site.filename)
    if not lines:
        raise SourceUnavailableError(call_site.filename, call_site.lineno, 'no source lines')
    return ''.join(lines)


def _parse(call_site: CallSite, source: str) -> ast.Module:
    try:
        if get_config().cache_sources:
            return _cache.parse(call_site.filename, source)
        return ast.parse(source, call_site.filename)
    except (SyntaxError, ValueError) as exc:
        raise SourceParseError(call_site.filename, call_site.lineno, str(exc)) from exc


def _callee_name(node: ast.Call) -> str | None:
    match node.func:
        case ast.Name(id=name):
            return name
        case ast.Attribute(attr=name):
            return name
        case _:
            return None


def find_call(tree: ast.AST, call_site: CallSite) -> ast.Call:
    """Find the call expression made at ``call_site``.

    An exact column match is used when the interpreter recorded one.
    Otherwise any call spanning the recorded line qualifies, preferring calls
    to ``call_site.callee`` and then the outermost call.

    Raises:
        CallNotFoundError: If no call spans the line.
    """
    calls = [node for node in ast.walk(tree) if isinstance(node, ast.Call)]

    position = call_site.position()
    if position is not None:
        for node in calls:
            if (node.lineno, node.end_lineno, node.col_offset, node.end_col_offset) == position:
                return node

    candidates = [
        node for node in calls if node.lineno <= call_site.lineno <= (node.end_lineno or node.lineno)
    ]
    if call_site.callee is not None:
        named = [node for node in candidates if _callee_name(node) == call_site.callee]
        candidates = named or candidates
    if not candidates:
        raise CallNotFoundError(call_site.filename, call_site.lineno)
    # ast.walk is breadth first, so the first candidate is the outermost call
    return candidates[0]


def _bind_args(call: ast.Call, call_site: CallSite) -> list[ast.expr]:
    """Return the call's arguments in parameter order, keywords included.

    Keywords fill the parameters that follow the positional arguments, up to
    the first one that was not passed. A starred argument makes positions
    unknowable, so only the literal positional arguments are returned then.
    """
    args = list(call.args)
    if any(isinstance(arg, ast.Starred) for arg in args):
        return args
    keywords = {kw.arg: kw.value for kw in call.keywords if kw.arg is not None}
    for name in call_site.parameters[len(args) :]:
        if name not in keywords:
            break
        args.append(keywords[name])
    return args


def _render(source: str, node: ast.expr) -> str:
    segment = ast.get_source_segment(source, node)
    if segment:
        return segment
    return ast.unparse(node)


def format_call_args(call_site: CallSite, arg_filter: ArgumentFilter) -> str:
    """Render the arguments of the call at ``call_site`` selected by ``arg_filter``.

    Args:
        call_site: The captured position of the call.
        arg_filter: Policy selecting which positional arguments to render.

    Returns:
        The selected arguments' source text, joined with ", ".

    Raises:
        SourceUnavailableError: If the source file cannot be read.
        SourceParseError: If the source file does not parse.
        CallNotFoundError: If no call expression is found at the position.
        ArgumentOutOfRangeError: If the filter selects no argument.
    """
    source = _read_source(call_site)
    tree = _parse(call_site, source)
    call = find_call(tree, call_site)
    args = _bind_args(call, call_site)
    selected = arg_filter(args)
    if not selected:
        raise ArgumentOutOfRangeError(call_site.filename, call_site.lineno, len(args))
    return ', '.join(_render(source, arg) for arg in selected)


def recover_argument_text(call_site: CallSite, arg_position: int) -> str:
    """Render the source text of one positional argument of the call at ``call_site``.

    Raises:
        SourceError: If the text cannot be recovered.
    """
    return format_call_args(call_site, select_arg(arg_position))
