"""Process-level entry points.

- ``pretty_errors`` runs a function and turns any exception into a
  prettified trace on stderr followed by exit status 1.
- ``install`` / ``restore`` swap the prettified renderer in and out of
  ``sys.excepthook``. ``restore`` is idempotent and safe to call without a
  prior ``install``.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from types import TracebackType
from typing import TypeVar

import structlog

from pretty_stack.config.schema import Options
from pretty_stack.core.formatter import get_prettified
from pretty_stack.utils.errors import PrettyStackError
from pretty_stack.utils.logging import LogEventNames

log = structlog.get_logger()

T = TypeVar("T")

ExceptHook = Callable[[type[BaseException], BaseException, TracebackType | None], object]

# Hook that was active before install(); None while not installed
_previous_hook: ExceptHook | None = None


def pretty_errors(func: Callable[[], T], options: Options | None = None) -> T:
    """Call ``func``, printing a prettified trace and exiting on failure.

    Args:
        func: Zero-argument callable to run
        options: Rendering options

    Returns:
        Whatever ``func`` returns
    """
    try:
        return func()
    except Exception as err:
        log.debug(LogEventNames.WRAPPED_CALL_FAILED, error=type(err).__name__)
        print(get_prettified(err, options), file=sys.stderr)
        sys.exit(1)


def _make_hook(options: Options | None, fallback: ExceptHook) -> ExceptHook:
    def hook(
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> None:
        try:
            rendered = get_prettified(exc, options)
        except PrettyStackError as e:
            log.warning(LogEventNames.HOOK_FALLBACK, error=str(e))
            fallback(exc_type, exc, tb)
            return
        print(f"\n{rendered}\n", file=sys.stderr)

    return hook


def install(options: Options | None = None) -> None:
    """Prettify every uncaught exception.

    Calling ``install`` again replaces the options but keeps the original
    hook for ``restore``.

    Args:
        options: Rendering options
    """
    global _previous_hook
    if _previous_hook is None:
        _previous_hook = sys.excepthook
    sys.excepthook = _make_hook(options, _previous_hook)
    log.debug(LogEventNames.HOOK_INSTALLED)


def restore() -> None:
    """Put back the exception hook that was active before ``install``."""
    global _previous_hook
    if _previous_hook is None:
        return
    sys.excepthook = _previous_hook
    _previous_hook = None
    log.debug(LogEventNames.HOOK_RESTORED)


def is_installed() -> bool:
    """Check whether the prettified hook is currently installed."""
    return _previous_hook is not None
