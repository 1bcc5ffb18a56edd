"""Library configuration: AssertConfig, environment detection and init()."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace

from klaw_assert._logging import configure_logging

__all__ = [
    'AssertConfig',
    'get_config',
    'init',
    'reset_config',
]

logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({'1', 'on', 'true', 'yes'})
_FALSE_VALUES = frozenset({'0', 'off', 'false', 'no'})


@dataclass(frozen=True)
class AssertConfig:
    """Configuration for klaw-assert.

    Attributes:
        source_recovery: Recover the asserted expression's source text for
            failed boolean assertions.
        cache_sources: Memoize parsed source files across assertions.
        log_level: Logging level for the library's own diagnostics. None = silent.
    """

    source_recovery: bool = True
    cache_sources: bool = True
    log_level: str | None = None


# Global configuration (set by init(), or built lazily from the environment)
_config: AssertConfig | None = None


def _env_flag(name: str, default: bool) -> bool:
    """Read an on/off flag from the environment.

    Unknown values log a warning and fall back to ``default``.
    """
    raw = os.environ.get(name, '').strip().lower()
    if not raw:
        return default
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    logger.warning('Unknown %s value %r, defaulting to %s', name, raw, default)
    return default


def _config_from_env() -> AssertConfig:
    """Build a config from KLAW_ASSERT_* environment variables.

    Variables:
    1. KLAW_ASSERT_SOURCE ("on"/"off")
    2. KLAW_ASSERT_CACHE ("on"/"off")
    3. KLAW_ASSERT_LOG_LEVEL (e.g. "DEBUG")
    """
    return AssertConfig(
        source_recovery=_env_flag('KLAW_ASSERT_SOURCE', default=True),
        cache_sources=_env_flag('KLAW_ASSERT_CACHE', default=True),
        log_level=os.environ.get('KLAW_ASSERT_LOG_LEVEL') or None,
    )


def init(
    *,
    source_recovery: bool | None = None,
    cache_sources: bool | None = None,
    log_level: str | None = None,
) -> AssertConfig:
    """Initialize klaw-assert with the given settings.

    Settings left as None are taken from the environment.

    Args:
        source_recovery: Recover expression source text on failure.
        cache_sources: Memoize parsed source files.
        log_level: Logging level ("DEBUG", "INFO", etc.). None = silent.

    Returns:
        The AssertConfig that was set.

    Example:
        ```python
        import klaw_assert

        # Environment defaults
        klaw_assert.init()

        # Skip introspection, show diagnostics
        klaw_assert.init(source_recovery=False, log_level="DEBUG")
        ```
    """
    global _config  # noqa: PLW0603

    config = _config_from_env()
    overrides = {
        key: value
        for key, value in (
            ('source_recovery', source_recovery),
            ('cache_sources', cache_sources),
            ('log_level', log_level),
        )
        if value is not None
    }
    _config = replace(config, **overrides)

    if _config.log_level is not None:
        configure_logging(_config.log_level)

    return _config


def get_config() -> AssertConfig:
    """Get the current configuration.

    Builds one from the environment on first use when init() was not called.

    Returns:
        The current AssertConfig.
    """
    global _config  # noqa: PLW0603

    if _config is None:
        _config = _config_from_env()
    return _config


def reset_config() -> None:
    """Forget the current configuration; the next get_config() re-reads the environment."""
    global _config  # noqa: PLW0603

    _config = None
