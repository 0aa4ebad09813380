"""Unified logging configuration used by the CLI and the cache store API.

Provides helpers:
* ``setup_logging`` – idempotent configuration with rotating files and a
    console stream.
* ``log_call`` – lightweight decorator for entry/exit tracing.
"""

from __future__ import annotations

import inspect
import logging
import os
from collections.abc import Callable
from functools import wraps
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, ParamSpec, TypeVar

# ----- Custom TRACE level -------------------------------------------------
TRACE_LEVEL = 5
if not hasattr(logging, "TRACE"):
    logging.addLevelName(TRACE_LEVEL, "TRACE")


def _trace(
    self: logging.Logger,
    msg: str,
    *args: object,
    **kwargs: object,
) -> None:  # pragma: no cover - simple passthrough
    if self.isEnabledFor(TRACE_LEVEL):  # pragma: no branch
        self._log(TRACE_LEVEL, msg, args, **kwargs)  # type: ignore[arg-type]


logging.Logger.trace = _trace  # type: ignore[attr-defined]

# ----- Formatter -----------------------------------------------------------
DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(module)s | %(funcName)s | %(message)s"


def _resolve_level(level_name: str) -> int:
    level_name = level_name.upper()
    if level_name == "TRACE":
        return TRACE_LEVEL
    return getattr(logging, level_name, logging.INFO)


def setup_logging(force: bool = False, log_dir: Path | None = None) -> None:
    """Configure root logging for the application.

    Creates two daily rotating file handlers (``app.log`` at INFO and
    ``app-debug.log`` at TRACE) keeping 7 backups, plus a console handler at
    ``LOG_LEVEL``. The directory comes from ``log_dir``, else
    ``CHANGECAST_LOG_DIR``, else ``./logs``; setting
    ``CHANGECAST_LOG_FILES=0`` disables the file handlers.
    Idempotent unless ``force`` is set.
    """
    if getattr(setup_logging, "_configured", False) and not force:
        return

    root = logging.getLogger()
    if force:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()

    level = _resolve_level(os.getenv("LOG_LEVEL", "INFO"))
    root.setLevel(level)

    fmt = logging.Formatter(DEFAULT_FORMAT)

    if _files_enabled():
        directory = log_dir or Path(os.getenv("CHANGECAST_LOG_DIR", "logs"))
        directory.mkdir(parents=True, exist_ok=True)

        info_handler = TimedRotatingFileHandler(
            directory / "app.log",
            when="midnight",
            backupCount=7,
            encoding="utf-8",
        )
        info_handler.setFormatter(fmt)
        info_handler.setLevel(logging.INFO)

        debug_handler = TimedRotatingFileHandler(
            directory / "app-debug.log",
            when="midnight",
            backupCount=7,
            encoding="utf-8",
        )
        debug_handler.setFormatter(fmt)
        debug_handler.setLevel(TRACE_LEVEL)

        root.addHandler(info_handler)
        root.addHandler(debug_handler)

    console = logging.StreamHandler()
    console.setFormatter(fmt)
    console.setLevel(level)
    root.addHandler(console)

    setup_logging._configured = True  # type: ignore[attr-defined]


def _files_enabled() -> bool:
    return os.getenv("CHANGECAST_LOG_FILES", "1").strip().lower() not in {"0", "false", "no"}


P = ParamSpec("P")
R = TypeVar("R")


def log_call(
    level: int = logging.DEBUG,
) -> Callable[[Callable[P, Any]], Callable[P, Any]]:
    """Return decorator logging entry/exit of target function.

    The logger is looked up without configuring handlers, so decorating
    library code has no side effects at import time.

    Example::

        @log_call()
        async def refresh(self): ...
    """

    def _decorator(fn: Callable[P, Any]) -> Callable[P, Any]:
        logger = logging.getLogger(fn.__module__)
        if inspect.iscoroutinefunction(fn):

            @wraps(fn)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
                if logger.isEnabledFor(level):
                    logger.log(
                        level,
                        "ENTER %s args=%s kwargs=%s",
                        fn.__qualname__,
                        _shorten(args),
                        _shorten(kwargs),
                    )
                try:
                    result = await fn(*args, **kwargs)
                except Exception as e:  # noqa: BLE001
                    logger.exception("ERROR in %s: %s", fn.__qualname__, e)
                    raise
                if logger.isEnabledFor(level):
                    logger.log(level, "EXIT %s -> %s", fn.__qualname__, _shorten(result))
                return result

            return async_wrapper

        @wraps(fn)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
            if logger.isEnabledFor(level):
                logger.log(
                    level,
                    "ENTER %s args=%s kwargs=%s",
                    fn.__qualname__,
                    _shorten(args),
                    _shorten(kwargs),
                )
            try:
                result = fn(*args, **kwargs)
            except Exception as e:  # noqa: BLE001
                logger.exception("ERROR in %s: %s", fn.__qualname__, e)
                raise
            if logger.isEnabledFor(level):
                logger.log(level, "EXIT %s -> %s", fn.__qualname__, _shorten(result))
            return result

        return sync_wrapper

    return _decorator


def _shorten(obj: object, limit: int = 120) -> str:
    """Return a truncated repr for logging (never raises)."""
    try:  # pragma: no cover - defensive
        s = repr(obj)
        if len(s) > limit:
            return s[: limit - 3] + "..."
        return s
    except Exception:  # noqa: BLE001
        return type(obj).__name__
