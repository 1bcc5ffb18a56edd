"""Merge a failure message with the caller's extra message arguments."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

__all__ = ['lazy', 'message', 'with_custom_message']


@dataclass(slots=True, frozen=True)
class lazy:  # noqa: N801
    """Deferred message supplier.

    Wrap an expensive diagnostic so it is only built when the assertion fails:

        ```python
        check(t, ok, lazy(lambda: dump_state(db)))
        ```

    A plain function, lambda or bound method that takes no arguments is
    treated the same way when passed as the first message argument. Any
    other value, classes included, is rendered with ``str()``.
    """

    supplier: Callable[[], Any]

    def __call__(self) -> Any:
        return self.supplier()


def _is_supplier(value: Any) -> bool:
    if isinstance(value, lazy):
        return True
    if not (inspect.isfunction(value) or inspect.ismethod(value)):
        return False
    try:
        inspect.signature(value).bind()
    except TypeError:
        return False
    return True


def message(*msg_and_args: Any) -> str:
    """Format extra message arguments.

    - nothing: ``''``
    - a supplier first (``lazy`` or a zero-argument function): called, its
      result used as the template
    - one value: ``str(value)``
    - a template and args: ``template % args``, or all parts joined with
      spaces if the template does not take those args
    """
    if not msg_and_args:
        return ''
    first, *rest = msg_and_args
    if _is_supplier(first):
        first = first()
    if not rest:
        return str(first)
    try:
        return str(first) % tuple(rest)
    except (TypeError, ValueError):
        return ' '.join(str(part) for part in (first, *rest))


def with_custom_message(source: str, *msg_and_args: Any) -> str:
    """Append the formatted extra message to ``source``, separated by one space."""
    custom = message(*msg_and_args)
    if not custom:
        return source
    if not source:
        return custom
    return f'{source} {custom}'
