"""Logging utilities for sweepgeom.

Provides a consistent logger hierarchy and formatting without modifying the
process root logger. All sweepgeom code should obtain loggers via get_logger().
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, Union

_ROOT_NAME = 'sweepgeom'
_FORMAT = logging.Formatter('%(levelname)s %(name)s: %(message)s')

# numba emits a lot of DEBUG output while compiling kernels
_NOISY_EXTERNAL = ('numba', 'numba.core')


def _ensure_package_root() -> logging.Logger:
    """Ensure the 'sweepgeom' logger has a single stream handler and is isolated
    from the process root logger. Returns the 'sweepgeom' logger.
    """
    pkg_root = logging.getLogger(_ROOT_NAME)
    # The package __init__ only installs a NullHandler; swap it for a real one
    has_non_null = any(not isinstance(h, logging.NullHandler) for h in pkg_root.handlers)
    if not has_non_null:
        for h in list(pkg_root.handlers):
            pkg_root.removeHandler(h)
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(_FORMAT)
        pkg_root.addHandler(handler)
    pkg_root.propagate = False
    return pkg_root


def _to_level(level: Union[str, int, None], default: int = logging.INFO) -> int:
    if level is None:
        return default
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else default


def configure_logging(level: Union[str, int] = 'INFO', mute_external: bool = True) -> None:
    """Configure the 'sweepgeom' logger family level and optional external noise suppression.

    This does NOT modify the process root logger.
    """
    pkg_root = _ensure_package_root()
    lvl = _to_level(level)
    pkg_root.setLevel(lvl)
    if mute_external and lvl <= logging.DEBUG:
        for noisy in _NOISY_EXTERNAL:
            logging.getLogger(noisy).setLevel(logging.INFO)


def get_logger(name: str, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Return a logger under the 'sweepgeom' namespace.

    Names outside the namespace are prefixed with ``sweepgeom.``. Without an
    explicit level the logger is NOTSET so it inherits whatever
    configure_logging() set on the package root.
    """
    if name != _ROOT_NAME and not name.startswith(_ROOT_NAME + '.'):
        name = f'{_ROOT_NAME}.{name}'
    log = logging.getLogger(name)
    log.setLevel(_to_level(level) if level is not None else logging.NOTSET)
    return log


__all__ = ['get_logger', 'configure_logging']
