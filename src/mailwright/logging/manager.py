"""Rich-backed logger with presets and structured context.

``LogManager`` is a ``logging.Logger`` subclass. Handlers carry the level
filtering, the logger itself always accepts everything down to ``TRACE``.

Configuration is resolved in this order (later wins):

1. ``FALLBACK_DEFAULTS`` (built in),
2. ``logger.defaults`` from the loaded configuration,
3. ``logger.presets.<preset>`` (configuration first, then built-in presets),
4. the ``config`` mapping passed to the constructor.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Any

from box import Box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from mailwright.config import get_config
from mailwright.config.loader import _deep_merge

TRACE_LEVEL = 5
SUCCESS_LEVEL = 25

logging.addLevelName(TRACE_LEVEL, "TRACE")
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")

FALLBACK_DEFAULTS: dict[str, Any] = {
    "output": "console",
    "console": {"level": "INFO", "show_path": False},
    "file": {
        "log_path": ".",
        "log_dir": "logs",
        "log_name": "mailwright.log",
        "level": "DEBUG",
        "max_bytes": 5 * 1024 * 1024,
        "backup_count": 3,
    },
}

FALLBACK_PRESETS: dict[str, dict[str, Any]] = {
    "dev": {"output": "console", "console": {"level": "DEBUG"}},
    "prod": {"output": "file", "file": {"level": "INFO"}},
    "debug": {
        "output": "both",
        "console": {"level": "TRACE", "show_path": True},
        "file": {"level": "TRACE"},
    },
}

_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Keyword arguments consumed by logging.Logger._log itself
_RESERVED_KWARGS = frozenset({"exc_info", "stack_info", "stacklevel", "extra"})


def _level_from_name(name: str | int) -> int:
    if isinstance(name, int):
        return name
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


class LogManager(logging.Logger):
    """Logger with Rich console output, optional rotating file and presets.

    Args:
        name: Logger name.
        preset: One of ``dev``, ``prod``, ``debug`` (unknown names are ignored).
        config: Explicit overrides, same shape as ``logger.defaults``.

    Examples:
        >>> log = LogManager(name="demo", preset="dev")
        >>> log.info("Message sent", host="smtp.example.com")  # doctest: +SKIP
    """

    def __init__(
        self,
        name: str = "mailwright",
        *,
        preset: str | None = None,
        config: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(name, level=TRACE_LEVEL)
        self._config = self._resolve_config(preset, config)
        self._setup_handlers()

    @staticmethod
    def _load_global_section() -> dict[str, Any]:
        try:
            section = get_config().get("logger")
        except (FileNotFoundError, ValueError) as exc:
            Console(stderr=True).print(f"Warning: ignoring logger configuration: {escape(str(exc))}", highlight=False)
            return {}
        return section.to_dict() if isinstance(section, Box) else dict(section or {})

    def _resolve_config(self, preset: str | None, config: dict[str, Any] | None) -> Box:
        global_section = self._load_global_section()
        resolved = _deep_merge(FALLBACK_DEFAULTS, global_section.get("defaults") or {})

        if preset:
            presets = _deep_merge(FALLBACK_PRESETS, global_section.get("presets") or {})
            resolved = _deep_merge(resolved, presets.get(preset) or {})

        if config:
            resolved = _deep_merge(resolved, dict(config))
        return Box(resolved)

    def _setup_handlers(self) -> None:
        output = self._config.output
        if output in ("console", "both"):
            console_cfg = self._config.console
            handler: logging.Handler = RichHandler(
                console=Console(stderr=True),
                show_path=bool(console_cfg.get("show_path", False)),
                rich_tracebacks=True,
            )
            handler.setLevel(_level_from_name(console_cfg.level))
            self.addHandler(handler)

        if output in ("file", "both"):
            file_cfg = self._config.file
            log_dir = Path(file_cfg.log_path) / file_cfg.log_dir
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_dir / file_cfg.log_name,
                maxBytes=int(file_cfg.get("max_bytes", 0)),
                backupCount=int(file_cfg.get("backup_count", 0)),
                encoding="utf-8",
            )
            file_handler.setLevel(_level_from_name(file_cfg.level))
            file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
            self.addHandler(file_handler)

    def _log(  # type: ignore[override]
        self,
        level: int,
        msg: object,
        args: Any,
        exc_info: Any = None,
        extra: Any = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        **context: Any,
    ) -> None:
        """Append ``key=value`` context pairs to the message."""
        if context:
            pairs = " ".join(f"{key}={value}" for key, value in context.items() if key not in _RESERVED_KWARGS)
            msg = f"{msg} | {pairs}" if pairs else msg
        super()._log(level, msg, args, exc_info=exc_info, extra=extra, stack_info=stack_info, stacklevel=stacklevel)

    def debug(self, msg: object, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        if self.isEnabledFor(logging.DEBUG):
            self._log(logging.DEBUG, msg, args, **kwargs)

    def info(self, msg: object, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        if self.isEnabledFor(logging.INFO):
            self._log(logging.INFO, msg, args, **kwargs)

    def warning(self, msg: object, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        if self.isEnabledFor(logging.WARNING):
            self._log(logging.WARNING, msg, args, **kwargs)

    def error(self, msg: object, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        if self.isEnabledFor(logging.ERROR):
            self._log(logging.ERROR, msg, args, **kwargs)

    def critical(self, msg: object, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        if self.isEnabledFor(logging.CRITICAL):
            self._log(logging.CRITICAL, msg, args, **kwargs)

    def trace(self, msg: object, *args: Any, **kwargs: Any) -> None:
        """Log at TRACE level (below DEBUG)."""
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(TRACE_LEVEL, msg, args, **kwargs)

    def success(self, msg: object, *args: Any, **kwargs: Any) -> None:
        """Log at SUCCESS level (between INFO and WARNING)."""
        if self.isEnabledFor(SUCCESS_LEVEL):
            self._log(SUCCESS_LEVEL, msg, args, **kwargs)

    def traceback(self, exc: BaseException) -> None:
        """Log an exception with its traceback at ERROR level."""
        self._log(logging.ERROR, str(exc) or type(exc).__name__, (), exc_info=(type(exc), exc, exc.__traceback__))


__all__ = [
    "FALLBACK_DEFAULTS",
    "FALLBACK_PRESETS",
    "SUCCESS_LEVEL",
    "TRACE_LEVEL",
    "LogManager",
]
